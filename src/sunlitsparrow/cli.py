# region Docstring
"""
sunlitsparrow.cli

Command-line interface for exploring Maccy's clipboard history database.

Commands:
- items:  List the most recent clipboard items (JSON, or a table with -t).
- pins:   List pinned clipboard items.
- export: Export every clipboard item to a JSON file.
- schema: Print the database schema, or export it as SQL with -o.

Global options:
- -v/--verbose: Repeat to raise verbosity (info, debug, trace).
- --db:         Use this store instead of searching the standard locations.
"""
# endregion
# region Imports
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree
from sqlite_utils import Database

from sunlitsparrow.config import CliSettings, LoggingSettings, StoreSettings, get_settings
from sunlitsparrow.db import DatabaseNotFoundError, open_maccy_db
from sunlitsparrow.export import ExportError, JSONExporter, dumps_records
from sunlitsparrow.history import HistoryError, HistoryPrinter, HistoryRecord, HistoryRepository
from sunlitsparrow.logger import configure_logging, get_logger
from sunlitsparrow.schema import SchemaExplorer

# endregion
# region App
app = typer.Typer(
    name="sunlitsparrow",
    help="Explore and query Maccy's clipboard history database.",
    no_args_is_help=True,
)


def _console(stderr: bool = False) -> Console:
    return Console(stderr=stderr, highlight=False)


def _fail(message: str) -> typer.Exit:
    _console(stderr=True).print(f"[bold red]Error:[/bold red] {escape(message)}")
    return typer.Exit(code=1)


@contextmanager
def _open_store(ctx: typer.Context) -> Iterator[Database]:
    try:
        db = open_maccy_db(
            settings=get_settings(StoreSettings), path=ctx.obj.get("db_path")
        )
    except (DatabaseNotFoundError, HistoryError) as e:
        raise _fail(f"Error opening database: {e}")
    try:
        yield db
    finally:
        db.conn.close()


def _render(records: Sequence[HistoryRecord], table: bool, empty_message: str) -> None:
    if not records:
        _console().print(empty_message)
        return
    if table:
        HistoryPrinter(records, console=_console()).print_items()
    else:
        typer.echo(dumps_records(records))


@app.callback()
def main(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase verbosity level."
    ),
    db: Optional[Path] = typer.Option(
        None, "--db", help="Path to a Maccy Storage.sqlite file.", dir_okay=False
    ),
) -> None:
    """Explore and query the SQLite database Maccy uses to store clipboard history."""
    log_settings = get_settings(LoggingSettings)
    configure_logging(verbose or log_settings.verbosity, log_settings.log_file)
    ctx.obj = {"db_path": db}


# endregion
# region Commands
@app.command(name="items", help="List clipboard items.")
def items(
    ctx: typer.Context,
    table: bool = typer.Option(
        False, "--table", "-t", help="Display output in table format instead of JSON."
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", min=0, help="Limit the number of items to display (0 for all)."
    ),
) -> None:
    if limit is None:
        limit = get_settings(CliSettings).items_limit
    with _open_store(ctx) as db:
        try:
            records = HistoryRepository(db, logger=get_logger("history")).fetch_recent(limit)
        except HistoryError as e:
            raise _fail(f"Error retrieving items: {e}")
    _render(records, table, "No items found.")


@app.command(name="pins", help="List pinned clipboard items.")
def pins(
    ctx: typer.Context,
    table: bool = typer.Option(
        False, "--table", "-t", help="Display output in table format instead of JSON."
    ),
) -> None:
    with _open_store(ctx) as db:
        try:
            records = HistoryRepository(db, logger=get_logger("history")).fetch_pinned()
        except HistoryError as e:
            raise _fail(f"Error retrieving pinned items: {e}")
    _render(records, table, "No pinned items found.")


@app.command(name="export", help="Export clipboard items to JSON.")
def export(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(None, help="Output file.", dir_okay=False),
) -> None:
    output = file or get_settings(CliSettings).export_file
    with _open_store(ctx) as db:
        try:
            records = HistoryRepository(db, logger=get_logger("history")).fetch_all()
        except HistoryError as e:
            raise _fail(f"Error retrieving items: {e}")
    try:
        JSONExporter(output).export(records)
    except ExportError as e:
        raise _fail(f"Error exporting items: {e}")
    typer.echo(f"Exported {len(records)} items to {output}")


@app.command(name="schema", help="Show database schema.")
def schema(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output schema to a SQLite-compatible file.", dir_okay=False
    ),
) -> None:
    with _open_store(ctx) as db:
        explorer = SchemaExplorer(db, logger=get_logger("schema"))
        if output is not None:
            try:
                explorer.export_to_file(output)
            except ExportError as e:
                raise _fail(f"Error exporting schema to file: {e}")
            typer.echo(f"Schema exported to {output}")
            return
        tables = explorer.describe()

    console = _console()
    for description in tables:
        tree = Tree(f"[bold]{escape(description.name)}[/bold]")
        for column in description.columns:
            tree.add(escape(column.describe()))
        for fk in description.foreign_keys:
            tree.add(escape(fk.describe()))
        for index in description.indexes:
            tree.add(escape(index.describe()))
        console.print(tree)
        console.print()


# endregion

if __name__ == "__main__":
    app()
