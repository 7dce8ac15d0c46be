"""healthprobe: staged health and feature checks for an HTTP service."""

__version__ = "0.3.0"
