"""JobMatch - job deduplication and skill matching."""

__version__ = "1.0.0"
