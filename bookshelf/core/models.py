"""Core data model for cataloged files.

An Entry references one file on disk. Its identity is the file's
resolved location: the path is canonicalized once, at construction,
and every later comparison uses that stored form without touching the
filesystem again. Two different spellings of the same file (a relative
path, a symlink) therefore collide.

Entries are immutable. Enrichment methods validate their input and
return a new Entry, so a failed step never leaves a partially built
value behind:

    entry = (
        Entry.construct("~/books/sicp.pdf")
        .attach_bibliography("~/books/sicp.bib")
        .attach_tags(["lisp", "classic"])
    )
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path

from .bibtex import BIB_EXTENSION, BibRecord, BibtexDecoder, BibtexSyntaxError
from .exceptions import (
    DuplicateTagError,
    InvalidLocationError,
    UnknownCiteKeyError,
    UnparsableBibliographyError,
    UnreadableBibliographyError,
    WrongFileKindError,
)
from .tags import Tag


def resolve_location(path: str | Path) -> Path:
    """Resolve ``path`` to the absolute, symlink-free path of an existing file.

    Raises:
        InvalidLocationError: If nothing exists at ``path``.
    """
    try:
        resolved = Path(path).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InvalidLocationError(path, getattr(e, "strerror", None) or str(e)) from e
    return resolved


@dataclass(frozen=True)
class Entry:
    """Immutable reference to one cataloged file.

    Equality and hashing consider ``location`` only.
    """

    location: Path
    bibliography: Path | None = field(default=None, compare=False)
    tags: tuple[Tag, ...] = field(default=(), compare=False)

    @classmethod
    def construct(cls, path: str | Path) -> "Entry":
        """Create an entry for the file at ``path``.

        Raises:
            InvalidLocationError: If ``path`` does not resolve to an
                existing file.
        """
        return cls(location=resolve_location(path))

    @property
    def display_name(self) -> str:
        """File name of the entry's location."""
        return self.location.name

    def attach_bibliography(self, bib_path: str | Path) -> "Entry":
        """Return a copy of this entry referencing a BibTeX file.

        Symlinks are resolved first. The extension check and the cite
        key both apply to the target file, not to the link's name.

        Raises:
            InvalidLocationError: If ``bib_path`` does not exist.
            WrongFileKindError: If ``bib_path`` is not a ``.bib`` file.
        """
        resolved = resolve_location(bib_path)
        if resolved.suffix.lower() != BIB_EXTENSION:
            raise WrongFileKindError(bib_path, BIB_EXTENSION)
        return replace(self, bibliography=resolved)

    def attach_tags(self, tags: Iterable[Tag | str]) -> "Entry":
        """Return a copy of this entry carrying ``tags``, sorted.

        Raises:
            DuplicateTagError: If ``tags`` holds the same tag twice.
        """
        seen: set[Tag] = set()
        for tag in map(Tag.coerce, tags):
            if tag in seen:
                raise DuplicateTagError(tag.keyword)
            seen.add(tag)
        return replace(self, tags=tuple(sorted(seen)))

    def resolve_bibliography_metadata(self) -> BibRecord | None:
        """Read the record describing this entry from its bibliography.

        The record's cite key must equal the bibliography file's base
        name, e.g. ``knuth1984.bib`` must contain ``@book{knuth1984, ...}``.
        The file is read on every call.

        Returns:
            The matching record, or None if no bibliography is attached.

        Raises:
            UnreadableBibliographyError: If the file cannot be read.
            UnparsableBibliographyError: If the file is not valid BibTeX.
            UnknownCiteKeyError: If no record matches the file's base name.
        """
        if self.bibliography is None:
            return None

        try:
            text = self.bibliography.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise UnreadableBibliographyError(self.bibliography, str(e)) from e

        key = self.bibliography.stem
        try:
            record = BibtexDecoder.find(text, key)
        except BibtexSyntaxError as e:
            raise UnparsableBibliographyError(self.bibliography, str(e)) from e

        if record is None:
            raise UnknownCiteKeyError(self.bibliography, key)
        return record
