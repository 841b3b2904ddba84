"""Interactive entry browser.

Shows the catalog as a navigable list. The browser never holds entries
itself: after every command it pulls a fresh positional snapshot from
the library and addresses entries by the highlighted position.

Keys:
    j / down        next entry          k / up          previous entry
    J / end         last entry          K / home        first entry
    l / enter / ->  open entry          d / delete      remove entry
    a               add a file          q / esc         quit
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

import click
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from bookshelf.cli.formatters import format_entry
from bookshelf.core.exceptions import BookshelfError
from bookshelf.core.models import Entry
from bookshelf.library import Library

T = TypeVar("T")

# Escape sequences returned by click.getchar()
KEYS = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[3~": "delete",
    "\r": "enter",
    "\n": "enter",
    "\x1b": "escape",
    "\x7f": "backspace",
    "\x08": "backspace",
}


class EntryList(Generic[T]):
    """List of display items with an optional selection.

    Moving past either end wraps around. Selection is 0-based.
    """

    def __init__(self, items: list[T] | None = None):
        self.items: list[T] = items or []
        self.selected: int | None = None

    def deselect(self) -> None:
        self.selected = None

    def next(self) -> None:
        if not self.items:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected + 1) % len(self.items)

    def previous(self) -> None:
        if not self.items:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected - 1) % len(self.items)

    def first(self) -> None:
        if self.items:
            self.selected = 0

    def last(self) -> None:
        if self.items:
            self.selected = len(self.items) - 1


@dataclass
class BrowserState:
    """Mutable state of the browser between key presses."""

    title: str = "Bookshelf"
    entries: EntryList[str] = field(default_factory=EntryList)
    editing_prompt: bool = False
    prompt: str = ""
    status: str = ""
    should_exit: bool = False


class Browser:
    """Keyboard-driven front end over a Library."""

    def __init__(self, library: Library, console: Console | None = None):
        self.library = library
        self.console = console or Console()
        self.state = BrowserState()
        self.refresh()

    def refresh(self) -> None:
        """Re-pull the entry snapshot from the library."""
        self.state.entries.items = [
            format_entry(index, entry) for index, entry in self.library.list_entries()
        ]
        entries = self.state.entries
        if not entries.items:
            entries.deselect()
        elif entries.selected is not None and entries.selected >= len(entries.items):
            entries.last()

    @property
    def selected_position(self) -> int | None:
        """1-based catalog position of the highlighted entry."""
        selected = self.state.entries.selected
        return None if selected is None else selected + 1

    def handle_key(self, key: str) -> None:
        """Apply one key press to the browser state."""
        key = KEYS.get(key, key)

        if self.state.editing_prompt:
            self._handle_prompt_key(key)
            return

        entries = self.state.entries
        if key in ("up", "k"):
            entries.previous()
        elif key in ("down", "j"):
            entries.next()
        elif key in ("home", "K"):
            entries.first()
        elif key in ("end", "J"):
            entries.last()
        elif key in ("enter", "right", "l"):
            self.open_selected()
        elif key in ("delete", "d"):
            self.remove_selected()
        elif key == "a":
            self.state.editing_prompt = True
            self.state.prompt = ""
            self.state.status = "Path of the file to add:"
        elif key in ("escape", "q"):
            self.state.should_exit = True

    def _handle_prompt_key(self, key: str) -> None:
        if key == "escape":
            self.state.editing_prompt = False
            self.state.prompt = ""
            self.state.status = ""
        elif key == "enter":
            self.submit_prompt()
        elif key == "backspace":
            self.state.prompt = self.state.prompt[:-1]
        elif len(key) == 1 and key.isprintable():
            self.state.prompt += key

    def submit_prompt(self) -> None:
        """Add the file typed into the prompt."""
        path = self.state.prompt.strip()
        self.state.editing_prompt = False
        self.state.prompt = ""
        if not path:
            self.state.status = ""
            return

        try:
            entry = Entry.construct(path)
            self.library.add_entry(entry)
        except BookshelfError as e:
            self.state.status = f"Couldn't add '{path}': {e}"
            return

        self.refresh()
        self.state.entries.last()
        self.state.status = f"Added '{format_entry(self.library.size(), entry)}'"

    def open_selected(self) -> None:
        position = self.selected_position
        if position is None:
            return

        try:
            entry = self.library.open_entry(position)
        except BookshelfError as e:
            self.state.status = f"Couldn't open entry {position}: {e}"
            return
        self.state.status = f"Opened '{format_entry(position, entry)}'"

    def remove_selected(self) -> None:
        position = self.selected_position
        if position is None:
            return

        try:
            entry = self.library.remove_entry(position)
        except BookshelfError as e:
            # a failed save still removed the entry in memory
            self.refresh()
            self.state.status = f"Couldn't remove entry {position}: {e}"
            return

        self.refresh()
        self.state.status = f"Removed '{format_entry(position, entry)}'"

    def render(self) -> Panel:
        """Build the renderable for the current state."""
        lines = []
        for index, item in enumerate(self.state.entries.items):
            if index == self.state.entries.selected:
                lines.append(Text(f"> {item}", style="reverse"))
            else:
                lines.append(Text(f"  {item}"))
        if not lines:
            lines.append(Text("No entries, press 'a' to add one", style="dim"))

        footer = Text(self.state.status, style="yellow")
        if self.state.editing_prompt:
            footer = Text(f"{self.state.status} {self.state.prompt}", style="bold")

        return Panel(
            Group(*lines, Text(""), footer),
            title=self.state.title,
            subtitle="j/k move, enter open, d remove, a add, q quit",
        )

    def run(self) -> None:
        """Run the browser until the user quits."""
        with Live(
            self.render(), console=self.console, screen=True, auto_refresh=False
        ) as live:
            while not self.state.should_exit:
                self.handle_key(click.getchar())
                live.update(self.render(), refresh=True)
