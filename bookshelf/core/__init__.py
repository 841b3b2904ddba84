"""Core domain models for cataloged files."""

from bookshelf.core.bibtex import (
    BIB_EXTENSION,
    BibRecord,
    BibtexDecoder,
    BibtexSyntaxError,
)
from bookshelf.core.exceptions import (
    BibliographyError,
    BookshelfError,
    CatalogError,
    ConfigError,
    DuplicateEntryError,
    DuplicateTagError,
    EntryError,
    InvalidLocationError,
    NoSuchEntryError,
    OpenFailureError,
    ReadFailureError,
    StorageError,
    UnknownCiteKeyError,
    UnparsableBibliographyError,
    UnreadableBibliographyError,
    WriteFailureError,
    WrongFileKindError,
)
from bookshelf.core.models import Entry, resolve_location
from bookshelf.core.tags import Tag

__all__ = [
    # Models
    "Entry",
    "Tag",
    "resolve_location",
    # BibTeX
    "BIB_EXTENSION",
    "BibRecord",
    "BibtexDecoder",
    "BibtexSyntaxError",
    # Errors
    "BookshelfError",
    "EntryError",
    "InvalidLocationError",
    "WrongFileKindError",
    "DuplicateTagError",
    "BibliographyError",
    "UnreadableBibliographyError",
    "UnparsableBibliographyError",
    "UnknownCiteKeyError",
    "CatalogError",
    "DuplicateEntryError",
    "NoSuchEntryError",
    "StorageError",
    "WriteFailureError",
    "ReadFailureError",
    "OpenFailureError",
    "ConfigError",
]
