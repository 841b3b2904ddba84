"""Catalog of the books, articles and other documents on your disk."""

__version__ = "0.1.0"
