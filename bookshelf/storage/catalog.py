"""The catalog: ordered, duplicate-free storage for entries.

Entries are kept in insertion order, which is the basis of the 1-based
positions shown to users. No two entries may share a resolved location.
The catalog also keeps an index of every tag seen on an added entry.
Removing an entry leaves the tag index untouched.

Persistence writes the whole catalog as one msgpack blob. Saving goes
through a temporary file in the destination directory which is then
renamed into place, so the destination holds either the old or the new
state and never a partial write.
"""

import os
import stat
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path

import msgspec

from bookshelf.core.exceptions import (
    DuplicateEntryError,
    NoSuchEntryError,
    ReadFailureError,
    WriteFailureError,
)
from bookshelf.core.models import Entry
from bookshelf.core.tags import Tag

from . import codec
from .indexed import IndexedSet


def _entry_key(entry: Entry) -> Path:
    return entry.location


def _tag_key(tag: Tag) -> str:
    return tag.keyword


class Catalog:
    """Insertion-ordered collection of entries plus a tag index."""

    def __init__(self, entries: Iterable[Entry] = ()):
        self._entries: IndexedSet[Path, Entry] = IndexedSet(_entry_key)
        self._tags: IndexedSet[str, Tag] = IndexedSet(_tag_key)
        for entry in entries:
            self.add(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries.snapshot())

    def __contains__(self, entry: object) -> bool:
        return entry in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Catalog):
            return NotImplemented
        return self.entries == other.entries and self.tags == other.tags

    def __repr__(self) -> str:
        return f"Catalog(entries={len(self)}, tags={len(self._tags)})"

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Entries in insertion order."""
        return self._entries.snapshot()

    @property
    def tags(self) -> tuple[Tag, ...]:
        """Every tag seen on an added entry, in the order first seen."""
        return self._tags.snapshot()

    def sorted_tags(self) -> list[Tag]:
        return sorted(self._tags)

    def enumerate_entries(self) -> list[tuple[int, Entry]]:
        """Return ``(position, entry)`` pairs with 1-based positions."""
        return list(enumerate(self._entries, start=1))

    def add(self, entry: Entry) -> list[Tag]:
        """Append ``entry`` and merge its tags into the tag index.

        Returns:
            The tags this call added to the tag index.

        Raises:
            DuplicateEntryError: If an entry with the same location exists.
        """
        if not self._entries.add(entry):
            raise DuplicateEntryError(entry.location)
        return [tag for tag in entry.tags if self._tags.add(tag)]

    def discard_tags(self, tags: Iterable[Tag]) -> None:
        """Drop ``tags`` from the tag index, undoing an ``add``."""
        for tag in tags:
            self._tags.discard(tag)

    def remove(self, entry: Entry) -> None:
        """Remove the entry sharing ``entry``'s location.

        Raises:
            NoSuchEntryError: If no such entry is cataloged.
        """
        if self._entries.discard(entry) is None:
            raise NoSuchEntryError(entry.location)

    def _check_position(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Position must be an int, not {type(index).__name__}")
        if not 1 <= index <= len(self._entries):
            raise NoSuchEntryError(index)

    def get_by_position(self, index: int) -> Entry:
        """Return the entry at 1-based position ``index``.

        Raises:
            NoSuchEntryError: If ``index`` is outside ``[1, len(self)]``.
        """
        self._check_position(index)
        return self._entries[index - 1]

    def remove_by_position(self, index: int) -> Entry:
        """Remove and return the entry at 1-based position ``index``.

        Raises:
            NoSuchEntryError: If ``index`` is outside ``[1, len(self)]``.
        """
        self._check_position(index)
        return self._entries.pop(index - 1)

    def save(self, destination: str | Path) -> None:
        """Write the catalog to ``destination``, replacing it atomically.

        Raises:
            WriteFailureError: If serialization or any filesystem step fails.
        """
        destination = Path(destination)
        try:
            data = codec.encode(list(self._entries), list(self._tags))
        except (msgspec.EncodeError, TypeError, ValueError) as e:
            raise WriteFailureError(destination, str(e)) from e

        temp_path = None
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
            )
            with open(temp_fd, "wb") as f:
                if destination.exists():
                    os.fchmod(f.fileno(), stat.S_IMODE(destination.stat().st_mode))
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, destination)
        except OSError as e:
            if temp_path is not None:
                Path(temp_path).unlink(missing_ok=True)
            raise WriteFailureError(destination, e.strerror or str(e)) from e

    @classmethod
    def open(cls, source: str | Path) -> "Catalog":
        """Read a catalog previously written by ``save``.

        Raises:
            ReadFailureError: If ``source`` cannot be read or decoded, or
                holds two entries with the same location.
        """
        source = Path(source)
        try:
            data = source.read_bytes()
        except OSError as e:
            raise ReadFailureError(source, e.strerror or str(e)) from e

        try:
            entries, tags = codec.decode(data)
        except msgspec.DecodeError as e:
            raise ReadFailureError(source, str(e)) from e

        catalog = cls()
        for entry in entries:
            if not catalog._entries.add(entry):
                raise ReadFailureError(source, f"duplicate entry {entry.location}")
        for tag in tags:
            catalog._tags.add(tag)
        for entry in entries:
            for tag in entry.tags:
                catalog._tags.add(tag)
        return catalog

    @classmethod
    def open_or_init(cls, path: str | Path) -> "Catalog":
        """Open the catalog at ``path``, creating an empty one first if missing.

        Raises:
            WriteFailureError: If the empty catalog cannot be written.
            ReadFailureError: If an existing catalog cannot be read.
        """
        path = Path(path)
        if not path.exists():
            cls().save(path)
        return cls.open(path)
