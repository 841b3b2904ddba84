"""Exception classes for the bookshelf."""

from pathlib import Path


class BookshelfError(Exception):
    """Base exception for all bookshelf errors."""

    pass


class EntryError(BookshelfError):
    """Base exception for errors raised while building an entry."""

    pass


class InvalidLocationError(EntryError):
    """Raised when a path does not resolve to an existing file."""

    def __init__(self, path: str | Path, reason: str = "no such file"):
        """Initialize with the offending path."""
        self.path = path
        super().__init__(f"Invalid location {str(path)!r}: {reason}")


class WrongFileKindError(EntryError):
    """Raised when a file does not carry the expected extension."""

    def __init__(self, path: str | Path, expected: str):
        """Initialize with path and expected extension."""
        self.path = path
        self.expected = expected
        super().__init__(f"Expected a {expected} file, got {str(path)!r}")


class DuplicateTagError(EntryError, ValueError):
    """Raised when a tag list contains the same tag twice."""

    def __init__(self, keyword: str):
        """Initialize with the repeated keyword."""
        self.keyword = keyword
        super().__init__(f"Duplicate tag: {keyword}")


class BibliographyError(BookshelfError):
    """Base exception for bibliography resolution errors."""

    pass


class UnreadableBibliographyError(BibliographyError):
    """Raised when the bibliography file cannot be read."""

    def __init__(self, path: Path, details: str = ""):
        """Initialize with path and details."""
        self.path = path
        message = f"Cannot read bibliography {path}"
        if details:
            message += f": {details}"
        super().__init__(message)


class UnparsableBibliographyError(BibliographyError):
    """Raised when the bibliography file is not valid BibTeX."""

    def __init__(self, path: Path, details: str = ""):
        """Initialize with path and details."""
        self.path = path
        message = f"Malformed bibliography {path}"
        if details:
            message += f": {details}"
        super().__init__(message)


class UnknownCiteKeyError(BibliographyError, KeyError):
    """Raised when no record in a bibliography matches the cite key."""

    def __init__(self, path: Path, key: str):
        """Initialize with path and cite key."""
        self.path = path
        self.key = key
        super().__init__(f"No record with key '{key}' in {path}")

    def __str__(self) -> str:
        return self.args[0]


class CatalogError(BookshelfError):
    """Base exception for catalog mutation and lookup errors."""

    pass


class DuplicateEntryError(CatalogError):
    """Raised when an entry with the same location is already cataloged."""

    def __init__(self, location: Path):
        """Initialize with the colliding location."""
        self.location = location
        super().__init__(f"Entry already exists: {location}")


class NoSuchEntryError(CatalogError, LookupError):
    """Raised when an entry or position is not in the catalog."""

    def __init__(self, what: object):
        """Initialize with the missing location or position."""
        self.what = what
        if isinstance(what, int):
            message = f"No entry at position {what}"
        else:
            message = f"Entry not found: {what}"
        super().__init__(message)


class StorageError(BookshelfError):
    """Base exception for persistence errors."""

    pass


class WriteFailureError(StorageError):
    """Raised when the catalog cannot be saved."""

    def __init__(self, path: Path, details: str = ""):
        """Initialize with destination and details."""
        self.path = path
        message = f"Failed to save catalog to {path}"
        if details:
            message += f": {details}"
        super().__init__(message)


class ReadFailureError(StorageError):
    """Raised when the catalog cannot be opened."""

    def __init__(self, path: Path, details: str = ""):
        """Initialize with source and details."""
        self.path = path
        message = f"Failed to open catalog {path}"
        if details:
            message += f": {details}"
        super().__init__(message)


class OpenFailureError(BookshelfError):
    """Raised when an external viewer cannot open an entry."""

    def __init__(self, path: Path, program: str | None = None, details: str = ""):
        """Initialize with the file and the program used."""
        self.path = path
        self.program = program
        target = f"{path} with {program}" if program else str(path)
        message = f"Couldn't open {target}"
        if details:
            message += f": {details}"
        super().__init__(message)


class ConfigError(BookshelfError, ValueError):
    """Raised when the configuration cannot be loaded."""

    pass
