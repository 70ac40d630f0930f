"""Pull-based readers, broadcasting, media constraint matching and video transforms."""

__version__ = "0.1.0"