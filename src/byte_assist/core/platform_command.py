"""Cross-platform command helpers.

Shell selection and command-line formatting used when logging and
recording executed commands. Formatting here is for display only: commands
are always spawned from an argument vector, never from a formatted string.
"""

from __future__ import annotations

from collections.abc import Sequence


def get_shell_program() -> str:
    """Program used for trusted shell commands.

    Returns:
        'sh' on POSIX. Windows has no POSIX shell on the allow-list, but
        'sh' is still returned so validation fails with a clear message
        instead of silently picking cmd.exe.

    """
    return "sh"


def shell_quote(arg: str) -> str:
    """Quote an argument for display as part of a shell command line.

    Uses single quotes which protect against all special characters
    except single quotes themselves.

    Args:
        arg: The argument to quote.

    Returns:
        Quoted argument.

    """
    if arg and (arg.isalnum() or all(c.isalnum() or c in "_-./=:@" for c in arg)):
        return arg

    # ' becomes '\''
    return "'" + arg.replace("'", "'\\''") + "'"


def format_command(argv: Sequence[str]) -> str:
    """Render an argument vector as a readable command line.

    Examples:
        >>> format_command(["git", "commit", "-m", "Initial commit"])
        "git commit -m 'Initial commit'"

    """
    return " ".join(shell_quote(arg) for arg in argv)
