"""vellum - rich-text article content pipeline."""

__version__ = "0.1.0"
