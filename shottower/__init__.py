"""Request models, validation and FFmpeg filter-graph building for a JSON video editing API."""

__version__ = "0.1.0"