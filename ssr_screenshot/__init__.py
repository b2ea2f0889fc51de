"""Screenshot golden tests for server-side rendered documents."""

__version__ = "0.1.0"
