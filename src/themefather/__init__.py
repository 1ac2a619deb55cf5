"""Theme Father - describe a theme, get a theme."""

__version__ = "0.1.0"
