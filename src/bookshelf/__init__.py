"""Bookshelf: a small ISBN-keyed book catalog service."""

__version__ = "0.1.0"
