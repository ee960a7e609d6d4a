"""Catalog provider for ShelfMatch."""

from .repository import CatalogRepository

__all__ = ["CatalogRepository"]
