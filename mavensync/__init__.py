"""Upload a local Maven repository tree to a remote artifact repository."""

__version__ = "1.0.0"
