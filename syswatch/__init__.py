"""syswatch - local system and network health insights."""

__version__ = "1.0.0"
