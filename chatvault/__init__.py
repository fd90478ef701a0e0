"""Chat backend with encrypted message storage."""

__version__ = "0.1.0"
