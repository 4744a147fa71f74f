"""Configuration, option, request, body, header and logging pieces for a local edge-compute testing server."""

__version__ = "0.1.0"