"""byte-assist: scaffold, discover and inspect projects in a workspace."""

__version__ = "0.1.0"
