"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Isolate environment variables for each test.

    Config and data directories point into the test's temporary
    directory so no test touches the real user configuration.
    """
    original_env = os.environ.copy()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.delenv("BOOKSHELF_DB", raising=False)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def library_dir(tmp_path) -> Path:
    """Directory holding the documents used by a test."""
    path = tmp_path / "library"
    path.mkdir()
    return path


@pytest.fixture
def make_file(library_dir):
    """Factory creating a document inside ``library_dir``."""

    def _make_file(name: str, content: str = "%PDF-1.4\n") -> Path:
        path = library_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _make_file


@pytest.fixture
def sample_bibtex() -> str:
    """BibTeX content whose record key matches ``knuth1984.bib``."""
    return """
% The TeXbook
@book{knuth1984,
    author = {Donald E. Knuth},
    title = {The {TeX}book},
    publisher = {Addison-Wesley},
    year = {1984}
}

@article{lamport1986,
    author = "Leslie Lamport",
    title = "{LaTeX}: A Document Preparation System",
    year = 1986
}
"""


@pytest.fixture
def bib_file(make_file, sample_bibtex) -> Path:
    """A readable bibliography named after its record's cite key."""
    return make_file("knuth1984.bib", sample_bibtex)
