"""Pytest configuration and fixtures for CLI tests."""

from pathlib import Path
from unittest.mock import Mock

import pytest
from click.testing import CliRunner
from rich.console import Console

from bookshelf.cli.config import Config
from bookshelf.library import Library
from bookshelf.storage.catalog import Catalog


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "data" / "shelf.db"


@pytest.fixture
def config_path(tmp_path) -> Path:
    return tmp_path / "config" / "config.yaml"


@pytest.fixture
def cli_runner(db_path, config_path):
    """Click CLI test runner pointed at a temporary catalog."""

    class BookshelfCliRunner(CliRunner):
        def invoke(self, args, *rest, **kwargs):  # type: ignore
            from bookshelf.cli.main import cli

            if isinstance(args, list):
                args = ["--config", str(config_path), "--db", str(db_path), *args]
                return super().invoke(cli, args, **kwargs)
            return super().invoke(args, *rest, **kwargs)

    return BookshelfCliRunner()


@pytest.fixture
def opener() -> Mock:
    return Mock()


@pytest.fixture
def library(db_path, opener) -> Library:
    """Library over a temporary catalog with a mocked viewer."""
    config = Config(db=str(db_path))
    return Library(config, Catalog.open_or_init(db_path), opener=opener)


@pytest.fixture
def capture_console():
    """Rich console writing into a string buffer."""
    from io import StringIO

    string_io = StringIO()
    console = Console(file=string_io, width=120, color_system=None)
    console.get_output = string_io.getvalue  # type: ignore[attr-defined]
    return console
