"""Section chain management for a single transit line."""

__version__ = "0.1.0"
