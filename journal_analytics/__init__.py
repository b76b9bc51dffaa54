"""Performance analytics for a personal trading journal."""

__version__ = "1.0.0"
