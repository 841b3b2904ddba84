"""Display formatting for entries."""

import logging

from rich.table import Table

from bookshelf.core.exceptions import BibliographyError
from bookshelf.core.models import Entry

logger = logging.getLogger(__name__)


def entry_name(entry: Entry) -> str:
    """Human-readable name of an entry.

    Uses the bibliography record's title, prefixed with the first
    author's name, when the entry has a readable bibliography. Falls
    back to the file name otherwise.
    """
    try:
        record = entry.resolve_bibliography_metadata()
    except BibliographyError as e:
        logger.debug(f"Falling back to file name for {entry.location}: {e}")
        record = None

    if record is None or not record.title:
        return entry.display_name

    title = record.title.replace("{", "").replace("}", "")
    if record.authors:
        return f"{record.authors[0]}: {title}"
    return title


def format_entry(index: int, entry: Entry) -> str:
    """Format an entry as ``"<index> - <name>"``."""
    return f"{index} - {entry_name(entry)}"


def format_tags(entry: Entry) -> str:
    return ", ".join(tag.keyword for tag in entry.tags)


def entries_table(entries: list[tuple[int, Entry]]) -> Table:
    """Build a Rich table with one row per entry."""
    table = Table(title="Bookshelf", show_lines=False)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Location", overflow="fold")
    table.add_column("Bibliography", overflow="fold", style="dim")
    table.add_column("Tags", style="magenta")

    for index, entry in entries:
        table.add_row(
            str(index),
            entry_name(entry),
            str(entry.location),
            str(entry.bibliography) if entry.bibliography else "",
            format_tags(entry),
        )

    return table
