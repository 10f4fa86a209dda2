"""Core services: paths, execution, discovery and project state."""
