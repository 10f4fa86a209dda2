"""Non-interactive project dashboard rendered with rich."""

from byte_assist.dashboard.render import (
    ProjectRow,
    build_dashboard,
    render_build_state,
    render_dashboard,
    render_git_status,
)

__all__ = [
    "ProjectRow",
    "build_dashboard",
    "render_build_state",
    "render_dashboard",
    "render_git_status",
]
