"""glint: expressive eyes for Tidbyt pixel displays."""

__version__ = "0.1.0"
