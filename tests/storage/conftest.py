"""Shared fixtures for storage tests."""

import pytest

from bookshelf.core.models import Entry
from bookshelf.storage.catalog import Catalog


@pytest.fixture
def five_entries(make_file) -> list[Entry]:
    """Five entries for distinct files, in insertion order."""
    return [Entry.construct(make_file(f"book{i}.pdf")) for i in range(1, 6)]


@pytest.fixture
def tagged_entries(make_file, bib_file) -> list[Entry]:
    """Entries carrying tags and a bibliography reference."""
    return [
        Entry.construct(make_file("texbook.pdf"))
        .attach_bibliography(bib_file)
        .attach_tags(["typesetting", "tex"]),
        Entry.construct(make_file("sicp.pdf")).attach_tags(["lisp", "classic"]),
        Entry.construct(make_file("notes.txt")),
        Entry.construct(make_file("hobbit.epub")).attach_tags(["fiction", "classic"]),
    ]


@pytest.fixture
def catalog(five_entries) -> Catalog:
    """A catalog holding ``five_entries``."""
    return Catalog(five_entries)


@pytest.fixture
def db_path(tmp_path):
    """Location of a catalog file."""
    return tmp_path / "data" / "shelf.db"
