"""Generate LICENSE files for a project from its metadata."""

__version__ = "0.3.0"
