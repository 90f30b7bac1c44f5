"""Article Catcher core — clipboard URL detection, article fetch & extraction."""

__version__ = "0.1.0"
