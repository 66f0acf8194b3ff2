"""Archive inactive GitHub repositories and unarchive revived ones."""

__version__ = "0.1.0"
