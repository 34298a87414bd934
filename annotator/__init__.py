"""Image sharing and annotation service."""

__version__ = "1.0.0"
