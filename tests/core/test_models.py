"""Tests for the Entry model.

This module tests entry identity (resolved locations), immutability and
the validating enrichment chain: bibliography references, tags and
bibliography metadata resolution.
"""

import dataclasses
import os

import pytest

from bookshelf.core.bibtex import BibRecord
from bookshelf.core.exceptions import (
    DuplicateTagError,
    InvalidLocationError,
    UnknownCiteKeyError,
    UnparsableBibliographyError,
    UnreadableBibliographyError,
    WrongFileKindError,
)
from bookshelf.core.models import Entry
from bookshelf.core.tags import Tag


class TestEntryConstruction:
    """Test Entry.construct and path resolution."""

    def test_construct_resolves_absolute_path(self, make_file):
        """The stored location is absolute and resolved."""
        path = make_file("sicp.pdf")

        entry = Entry.construct(path)

        assert entry.location == path.resolve()
        assert entry.location.is_absolute()
        assert entry.bibliography is None
        assert entry.tags == ()

    def test_construct_from_relative_path(self, make_file, monkeypatch):
        """Relative paths are resolved against the working directory."""
        path = make_file("sicp.pdf")
        monkeypatch.chdir(path.parent)

        entry = Entry.construct("sicp.pdf")

        assert entry.location == path.resolve()

    def test_construct_normalizes_relative_segments(self, make_file):
        """Paths with '..' segments resolve to the same entry."""
        path = make_file("sicp.pdf")
        (path.parent / "sub").mkdir()

        entry = Entry.construct(path.parent / "sub" / ".." / "sicp.pdf")

        assert entry == Entry.construct(path)
        assert ".." not in entry.location.parts

    def test_construct_expands_user(self, make_file, monkeypatch):
        """A leading ~ expands to the home directory."""
        path = make_file("sicp.pdf")
        monkeypatch.setenv("HOME", str(path.parent))

        entry = Entry.construct("~/sicp.pdf")

        assert entry.location == path.resolve()

    def test_construct_missing_file_fails(self, library_dir):
        """A path that does not exist is rejected."""
        with pytest.raises(InvalidLocationError) as exc_info:
            Entry.construct(library_dir / "missing.pdf")

        assert "missing.pdf" in str(exc_info.value)

    def test_construct_dangling_symlink_fails(self, library_dir):
        """A symlink whose target is gone does not resolve."""
        link = library_dir / "dangling.pdf"
        os.symlink(library_dir / "gone.pdf", link)

        with pytest.raises(InvalidLocationError):
            Entry.construct(link)

    def test_display_name(self, make_file):
        """display_name is the file name of the location."""
        entry = Entry.construct(make_file("sicp.pdf"))
        assert entry.display_name == "sicp.pdf"


class TestEntryIdentity:
    """Test that identity is the resolved location only."""

    def test_symlinks_to_same_file_are_equal(self, make_file, library_dir):
        """Two symlinks to one target produce equal entries."""
        target = make_file("sicp.pdf")
        link1 = library_dir / "link1.pdf"
        link2 = library_dir / "link2.pdf"
        os.symlink(target, link1)
        os.symlink(target, link2)

        entry1 = Entry.construct(link1)
        entry2 = Entry.construct(link2)

        assert entry1 == entry2
        assert hash(entry1) == hash(entry2)
        assert entry1.location == target.resolve()

    def test_other_fields_do_not_affect_equality(self, make_file, bib_file):
        """Tags and bibliography are ignored by equality and hashing."""
        entry = Entry.construct(make_file("sicp.pdf"))
        enriched = entry.attach_bibliography(bib_file).attach_tags(["lisp"])

        assert entry == enriched
        assert hash(entry) == hash(enriched)
        assert len({entry, enriched}) == 1

    def test_different_files_are_not_equal(self, make_file):
        """Entries for different files differ."""
        assert Entry.construct(make_file("a.pdf")) != Entry.construct(
            make_file("b.pdf")
        )

    def test_equality_survives_file_deletion(self, make_file):
        """Equality never touches the filesystem after construction."""
        path = make_file("sicp.pdf")
        entry1 = Entry.construct(path)
        entry2 = Entry.construct(path)
        path.unlink()

        assert entry1 == entry2
        assert hash(entry1) == hash(entry2)


class TestEntryImmutability:
    """Test Entry immutability constraints."""

    def test_entry_is_frozen(self, make_file):
        """Entry fields cannot be reassigned."""
        entry = Entry.construct(make_file("sicp.pdf"))

        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.location = make_file("other.pdf")  # type: ignore

        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.tags = (Tag("x"),)  # type: ignore


class TestAttachBibliography:
    """Test attaching a bibliography reference."""

    def test_attach_bibliography(self, make_file, bib_file):
        """A .bib file is accepted and resolved."""
        entry = Entry.construct(make_file("texbook.pdf"))

        enriched = entry.attach_bibliography(bib_file)

        assert enriched.bibliography == bib_file.resolve()
        assert entry.bibliography is None

    def test_extension_is_case_insensitive(self, make_file):
        """Upper-case .BIB is still a bibliography."""
        entry = Entry.construct(make_file("texbook.pdf"))
        bib = make_file("knuth1984.BIB", "")

        assert entry.attach_bibliography(bib).bibliography == bib.resolve()

    def test_wrong_extension_fails(self, make_file):
        """Non-.bib files are rejected and the entry keeps no reference."""
        entry = Entry.construct(make_file("texbook.pdf"))
        not_bib = make_file("knuth1984.txt", "")

        with pytest.raises(WrongFileKindError) as exc_info:
            entry.attach_bibliography(not_bib)

        assert exc_info.value.expected == ".bib"
        assert entry.bibliography is None

    def test_symlink_is_judged_by_its_target(self, make_file, library_dir):
        """A link named .bib pointing at another kind of file is rejected."""
        entry = Entry.construct(make_file("texbook.pdf"))
        os.symlink(make_file("data.txt", ""), library_dir / "knuth1984.bib")

        with pytest.raises(WrongFileKindError):
            entry.attach_bibliography(library_dir / "knuth1984.bib")

    def test_symlink_to_bib_uses_target_name(
        self, make_file, bib_file, library_dir
    ):
        """The cite key comes from the file that is actually read."""
        os.symlink(bib_file, library_dir / "references.txt")
        entry = Entry.construct(make_file("texbook.pdf"))

        enriched = entry.attach_bibliography(library_dir / "references.txt")

        assert enriched.bibliography == bib_file.resolve()
        assert enriched.resolve_bibliography_metadata().key == "knuth1984"

    def test_missing_bibliography_fails(self, make_file, library_dir):
        """A bibliography that does not exist is rejected."""
        entry = Entry.construct(make_file("texbook.pdf"))

        with pytest.raises(InvalidLocationError):
            entry.attach_bibliography(library_dir / "missing.bib")


class TestAttachTags:
    """Test attaching tags."""

    def test_tags_are_sorted(self, make_file):
        """Tags are stored in lexicographic order."""
        entry = Entry.construct(make_file("sicp.pdf"))

        tagged = entry.attach_tags(["lisp", "classic", "mit"])

        assert tagged.tags == (Tag("classic"), Tag("lisp"), Tag("mit"))
        assert entry.tags == ()

    def test_accepts_tag_objects(self, make_file):
        """Tag values and plain strings can be mixed."""
        entry = Entry.construct(make_file("sicp.pdf"))

        tagged = entry.attach_tags([Tag("lisp"), "classic"])

        assert tagged.tags == (Tag("classic"), Tag("lisp"))

    def test_duplicate_tags_fail(self, make_file):
        """Duplicate tags are a caller error, not silently dropped."""
        entry = Entry.construct(make_file("novel.pdf"))

        with pytest.raises(DuplicateTagError) as exc_info:
            entry.attach_tags(["fiction", "fiction"])

        assert exc_info.value.keyword == "fiction"
        assert entry.tags == ()

    def test_empty_tags(self, make_file):
        """An empty tag list is allowed."""
        entry = Entry.construct(make_file("sicp.pdf"))
        assert entry.attach_tags([]).tags == ()


class TestResolveBibliographyMetadata:
    """Test reading the bibliography record."""

    def test_no_bibliography_returns_none(self, make_file):
        """Entries without a bibliography resolve to None."""
        entry = Entry.construct(make_file("sicp.pdf"))
        assert entry.resolve_bibliography_metadata() is None

    def test_resolves_record_by_file_stem(self, make_file, bib_file):
        """The record whose key matches the file name is returned."""
        entry = Entry.construct(make_file("texbook.pdf")).attach_bibliography(
            bib_file
        )

        record = entry.resolve_bibliography_metadata()

        assert isinstance(record, BibRecord)
        assert record.key == "knuth1984"
        assert record.type == "book"
        assert record.title == "The {TeX}book"
        assert record.authors == ("Donald E. Knuth",)

    def test_unknown_cite_key(self, make_file, sample_bibtex):
        """A bibliography without a matching record fails."""
        bib = make_file("someone2000.bib", sample_bibtex)
        entry = Entry.construct(make_file("texbook.pdf")).attach_bibliography(bib)

        with pytest.raises(UnknownCiteKeyError) as exc_info:
            entry.resolve_bibliography_metadata()

        assert exc_info.value.key == "someone2000"

    def test_vanished_bibliography(self, make_file, bib_file):
        """A bibliography deleted after attaching is unreadable."""
        entry = Entry.construct(make_file("texbook.pdf")).attach_bibliography(
            bib_file
        )
        bib_file.unlink()

        with pytest.raises(UnreadableBibliographyError):
            entry.resolve_bibliography_metadata()

    def test_malformed_bibliography(self, make_file):
        """Unbalanced braces make the bibliography unparsable."""
        bib = make_file("knuth1984.bib", "@book{knuth1984,\n  title = {Unclosed\n")
        entry = Entry.construct(make_file("texbook.pdf")).attach_bibliography(bib)

        with pytest.raises(UnparsableBibliographyError):
            entry.resolve_bibliography_metadata()

    def test_reads_file_on_every_call(self, make_file, bib_file):
        """The record is not cached on the entry."""
        entry = Entry.construct(make_file("texbook.pdf")).attach_bibliography(
            bib_file
        )
        assert entry.resolve_bibliography_metadata().year == "1984"

        bib_file.write_text("@book{knuth1984, title = {Updated}, year = {1986}}")

        assert entry.resolve_bibliography_metadata().year == "1986"
