"""Git helpers used when scaffolding projects."""
