"""Catalog storage and persistence.

- **Catalog**: insertion-ordered, duplicate-free entry collection with a tag index
- **IndexedSet**: ordered set with O(1) membership backing the catalog
- **codec**: msgpack encoding of the catalog
"""

from bookshelf.storage.catalog import Catalog
from bookshelf.storage.codec import CatalogRecord, EntryRecord
from bookshelf.storage.indexed import IndexedSet

__all__ = [
    "Catalog",
    "CatalogRecord",
    "EntryRecord",
    "IndexedSet",
]
