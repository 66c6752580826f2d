"""Manga Catalog - track and rate a personal manga/manhwa collection."""

__version__ = "0.1.0"
