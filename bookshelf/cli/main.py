"""Main CLI entry point and application setup."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

import click
from click.exceptions import Exit
from rich.console import Console
from rich.markup import escape

from bookshelf import __version__
from bookshelf.cli.config import Config
from bookshelf.cli.formatters import entries_table, format_entry
from bookshelf.core.exceptions import (
    BibliographyError,
    BookshelfError,
    CatalogError,
    EntryError,
)
from bookshelf.core.models import Entry
from bookshelf.library import Library

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """CLI context that holds shared resources.

    The library is opened on first use, so ``--help`` on a subcommand
    never reads the config or touches the catalog.
    """

    console: Console
    config_path: Path | None = None
    db: Path | None = None
    debug: bool = False
    _library: Library | None = field(default=None, repr=False)

    @property
    def library(self) -> Library:
        if self._library is None:
            try:
                config = load_config(self.config_path, self.db)
                self._library = Library.from_config(config)
            except BookshelfError as e:
                if self.debug:
                    raise
                self.console.print(
                    f"[red]Error initializing bookshelf:[/red] {escape(str(e))}"
                )
                raise Exit(1) from e
        return self._library


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
        soft_wrap=True,
    )


def load_config(config_path: Path | None, db: Path | None) -> Config:
    """Resolve the configuration once: file, then environment, then flags."""
    config = Config.get_or_default(config_path)
    if db is not None:
        config = Config(db=str(db))
    return config


class BookshelfGroup(click.Group):
    """Custom group that handles KeyboardInterrupt and unexpected errors."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except Exception as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {escape(str(e))}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=BookshelfGroup, invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--db",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Override catalog file location",
)
@click.version_option(
    version=__version__, prog_name="bookshelf", message="bookshelf version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config_path: Path | None,
    db: Path | None,
) -> None:
    """Manage the books and articles on your disk.

    Run without a command to browse the bookshelf interactively.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    console = create_console(no_color=no_color)
    ctx.obj = Context(console=console, config_path=config_path, db=db, debug=debug)

    if ctx.invoked_subcommand is None:
        from bookshelf.cli.ui.browser import Browser

        Browser(ctx.obj.library, console).run()


@cli.command()
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--bib", "-b", type=click.Path(path_type=Path), help="Path to a BibTeX file"
)
@click.option("--tag", "-t", "tags", multiple=True, help="Tag the entry (repeatable)")
@click.pass_context
def add(ctx: click.Context, file: Path, bib: Path | None, tags: tuple[str, ...]) -> None:
    """Add a file to your bookshelf."""
    console = ctx.obj.console
    library = ctx.obj.library

    try:
        entry = Entry.construct(file)
        if bib is not None:
            entry = entry.attach_bibliography(bib)
        if tags:
            entry = entry.attach_tags(tags)
    except EntryError as e:
        console.print(f"[red]Couldn't add '{escape(str(file))}':[/red] {escape(str(e))}")
        ctx.exit(1)

    entry_name = escape(format_entry(library.size() + 1, entry))

    try:
        library.add_entry(entry)
    except BookshelfError as e:
        console.print(f"[red]Couldn't add '{entry_name}':[/red] {escape(str(e))}")
        ctx.exit(1)

    console.print(f"[green]✓[/green] Added '{entry_name}'")


@cli.command()
@click.argument("index", type=int)
@click.pass_context
def remove(ctx: click.Context, index: int) -> None:
    """Remove the entry at INDEX from your bookshelf."""
    console = ctx.obj.console
    library = ctx.obj.library

    try:
        entry = library.remove_entry(index)
    except BookshelfError as e:
        console.print(f"[red]Couldn't remove entry {index}:[/red] {escape(str(e))}")
        ctx.exit(1)

    console.print(f"[green]✓[/green] Removed '{escape(format_entry(index, entry))}'")


@cli.command(name="open")
@click.argument("index", type=int)
@click.option("--exec", "-e", "program", help="Program to open the entry with")
@click.pass_context
def open_cmd(ctx: click.Context, index: int, program: str | None) -> None:
    """Open the entry at INDEX in an external viewer."""
    console = ctx.obj.console
    library = ctx.obj.library

    try:
        entry = library.open_entry(index, program)
    except BookshelfError as e:
        console.print(f"[red]Couldn't open entry {index}:[/red] {escape(str(e))}")
        ctx.exit(1)

    message = f"[green]✓[/green] Opened '{escape(format_entry(index, entry))}'"
    if program:
        message += f" in {escape(program)}"
    console.print(message)


@cli.command(name="list")
@click.option("--verbose", "-v", is_flag=True, help="Show locations and tags")
@click.pass_context
def list_cmd(ctx: click.Context, verbose: bool) -> None:
    """List the entries on your bookshelf."""
    console = ctx.obj.console
    entries = ctx.obj.library.list_entries()

    if not entries:
        console.print("[dim]No entries[/dim]")
        return

    if verbose:
        console.print(entries_table(entries))
        return

    for index, entry in entries:
        console.print(escape(format_entry(index, entry)))


@cli.command()
@click.pass_context
def tags(ctx: click.Context) -> None:
    """List every tag used on your bookshelf."""
    console = ctx.obj.console
    all_tags = ctx.obj.library.tags()

    if not all_tags:
        console.print("[dim]No tags[/dim]")
        return

    for tag in all_tags:
        console.print(escape(tag.keyword))


@cli.command()
@click.argument("index", type=int)
@click.pass_context
def show(ctx: click.Context, index: int) -> None:
    """Show the entry at INDEX and its bibliography record."""
    console = ctx.obj.console
    library = ctx.obj.library

    try:
        entry = library.get_entry(index)
    except CatalogError as e:
        console.print(f"[red]Couldn't show entry {index}:[/red] {escape(str(e))}")
        ctx.exit(1)

    console.print(f"[bold]{escape(format_entry(index, entry))}[/bold]")
    console.print(f"Location: {escape(str(entry.location))}")
    if entry.tags:
        console.print(f"Tags: {escape(', '.join(t.keyword for t in entry.tags))}")
    if entry.bibliography is None:
        return

    console.print(f"Bibliography: {escape(str(entry.bibliography))}")
    try:
        record = entry.resolve_bibliography_metadata()
    except BibliographyError as e:
        console.print(f"[red]Couldn't read bibliography:[/red] {escape(str(e))}")
        ctx.exit(1)

    console.print(f"  @{record.type}{{{escape(record.key)}}}")
    for name, value in record.fields.items():
        console.print(f"  {name} = {escape(value)}")


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
