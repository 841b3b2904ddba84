"""Application service tying the configuration to the catalog.

Every mutation is followed by a save to the configured catalog file, so
the file on disk always reflects the last successful command.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from bookshelf.cli.config import Config
from bookshelf.cli.opener import open_path
from bookshelf.core.exceptions import WriteFailureError
from bookshelf.core.models import Entry
from bookshelf.core.tags import Tag
from bookshelf.storage.catalog import Catalog

logger = logging.getLogger(__name__)


class Library:
    """A catalog bound to its backing file."""

    def __init__(
        self,
        config: Config,
        catalog: Catalog,
        opener: Callable[[Path, str | None], None] | None = None,
    ):
        self.config = config
        self.catalog = catalog
        self._opener = opener or open_path

    @classmethod
    def from_config(cls, config: Config) -> "Library":
        """Open (or initialize) the catalog named by ``config``."""
        logger.debug(f"Opening catalog at {config.db_path}")
        return cls(config, Catalog.open_or_init(config.db_path))

    def save(self) -> None:
        self.catalog.save(self.config.db_path)

    def add_entry(self, entry: Entry) -> None:
        """Add ``entry`` and save.

        Raises:
            DuplicateEntryError: If the entry is already cataloged.
            WriteFailureError: If saving fails.
        """
        new_tags = self.catalog.add(entry)
        try:
            self.save()
        except WriteFailureError:
            self.catalog.remove(entry)
            self.catalog.discard_tags(new_tags)
            raise
        logger.info(f"Added entry: {entry.location}")

    def remove_entry(self, index: int) -> Entry:
        """Remove the entry at 1-based ``index`` and save.

        Raises:
            NoSuchEntryError: If there is no entry at ``index``.
            WriteFailureError: If saving fails.
        """
        entry = self.catalog.remove_by_position(index)
        logger.info(f"Removed entry: {entry.location}")
        self.save()
        return entry

    def get_entry(self, index: int) -> Entry:
        return self.catalog.get_by_position(index)

    def open_entry(self, index: int, program: str | None = None) -> Entry:
        """Open the entry at ``index`` with the default or named program.

        Raises:
            NoSuchEntryError: If there is no entry at ``index``.
            OpenFailureError: If the viewer fails.
        """
        entry = self.get_entry(index)
        self._opener(entry.location, program)
        return entry

    def list_entries(self) -> list[tuple[int, Entry]]:
        """Snapshot of ``(position, entry)`` pairs, positions 1-based."""
        return self.catalog.enumerate_entries()

    def tags(self) -> list[Tag]:
        return self.catalog.sorted_tags()

    def size(self) -> int:
        return len(self.catalog)
