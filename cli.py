#!/usr/bin/env python3
"""
Note Board CLI.

Primary entry point for working with a persisted board outside the
presentation. Use --service to select what to run.

Usage:
    python cli.py --help
    python cli.py --service info
    python cli.py --service list --verbose
    python cli.py --service sort --order desc
    python cli.py --service export
    python cli.py --service quote --note-id note_1714550000000_1a2b3c4d
"""

import asyncio
import sys
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from noteboard.engine.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


def _open_store(logger, storage: str | None):
    """Build the JSON store, honouring --storage."""
    from noteboard.engine.storage.json_store import JsonFileStore

    try:
        return JsonFileStore.from_config(Path(storage) if storage else None)
    except Exception as e:
        logger.error("Failed to load persistence configuration", extra={"error": str(e)})
        click.echo(
            click.style("Error: Could not load config/settings/persistence.yaml.", fg="red"),
            err=True,
        )
        sys.exit(1)


def _load_board(logger, store):
    """Restore a BoardService from the store, exiting on unreadable data."""
    from noteboard.engine.core.exceptions import PersistenceError
    from noteboard.engine.services.board import BoardService

    board = BoardService(store=store)
    try:
        board.restore(store.load())
    except PersistenceError as e:
        logger.error("Failed to load notes", extra={"error": e.message, "path": str(store.path)})
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)
    return board


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["info", "config", "list", "sort", "export", "quote"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--order",
    type=click.Choice(["asc", "desc"]),
    default="asc",
    help="Sort order by creation time (sort only).",
)
@click.option(
    "--note-id",
    default=None,
    help="Note to augment with a quote (quote only).",
)
@click.option(
    "--storage",
    default=None,
    type=click.Path(dir_okay=False),
    help="Notes file to use instead of the configured one.",
)
def main(
    service: str,
    verbose: bool,
    debug: bool,
    order: str,
    note_id: str | None,
    storage: str | None,
) -> None:
    """
    Note Board CLI.

    Use --service to select what to run. Every command works on the
    persisted board file; commands that change notes save it back.

    \b
    Examples:
        python cli.py --service info
        python cli.py --service config
        python cli.py --service list --storage /tmp/notes.json
        python cli.py --service sort --order desc --verbose
        python cli.py --service export
        python cli.py --service quote --note-id note_1714550000000_1a2b3c4d
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "log_level": log_level})

    if service == "info":
        show_info(logger, storage)
    elif service == "config":
        show_config(logger)
    elif service == "list":
        list_notes(logger, storage)
    elif service == "sort":
        sort_notes(logger, storage, order)
    elif service == "export":
        export_notes(logger, storage)
    elif service == "quote":
        quote_note(logger, storage, note_id)


def list_notes(logger, storage: str | None) -> None:
    """Print every persisted note."""
    store = _open_store(logger, storage)
    board = _load_board(logger, store)
    notes = board.manager.all()

    if not notes:
        click.echo(f"No notes in {store.path}")
        return

    click.echo(f"{len(notes)} note(s) in {store.path}:\n")
    for note in notes:
        excerpt = note.content.replace("\n", " ")
        if len(excerpt) > 40:
            excerpt = excerpt[:37] + "..."
        click.echo(
            f"  {note.id}  {note.color:<11}  ({note.x:g}, {note.y:g})  "
            f"{note.format_timestamp()}  {excerpt}"
        )


def sort_notes(logger, storage: str | None, order: str) -> None:
    """Sort the persisted board by creation time and save the new layout."""
    store = _open_store(logger, storage)
    board = _load_board(logger, store)

    notes = board.sort(ascending=order == "asc")
    logger.info("Notes sorted", extra={"order": order, "count": len(notes)})

    if not asyncio.run(board.save()):
        click.echo(click.style(f"Error: Could not save {store.path}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Sorted {len(notes)} note(s) ({order}) and saved to {store.path}")


def export_notes(logger, storage: str | None) -> None:
    """Write an export file of the persisted board."""
    store = _open_store(logger, storage)
    board = _load_board(logger, store)

    if not asyncio.run(board.export()):
        click.echo(click.style("Error: Export failed", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Exported {len(board.manager)} note(s) to {store.last_export_path}")


def quote_note(logger, storage: str | None, note_id: str | None) -> None:
    """Fetch a quote into a persisted note and save the board."""
    from noteboard.engine.core.exceptions import ApplicationError, NotFoundError
    from noteboard.engine.services.board import BoardService
    from noteboard.engine.services.quotes import QuoteClient

    if not note_id:
        click.echo(click.style("Error: --note-id is required for quote.", fg="red"), err=True)
        sys.exit(2)

    store = _open_store(logger, storage)
    snapshots = _load_board(logger, store).manager.snapshot()

    async def _run() -> str:
        async with QuoteClient() as client:
            board = BoardService(store=store, retriever=client)
            board.restore(snapshots)
            text = await board.augment(note_id)
            if text is None:
                raise NotFoundError(f"Note not found: {note_id}")
            if not await board.save():
                raise ApplicationError(f"Could not save {store.path}")
            return text

    try:
        text = asyncio.run(_run())
    except ApplicationError as e:
        logger.error("Quote command failed", extra={"note_id": note_id, "code": e.code})
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Added to {note_id}: {text}")


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Note Board Configuration:\n")

    try:
        from noteboard.engine.core.config import get_app_config

        app_config = get_app_config()

        sections = [
            ("Application Settings", app_config.application),
            ("Logging Settings", app_config.logging),
            ("Board Settings", app_config.board),
            ("Persistence Settings", app_config.persistence),
            ("Quote Settings", app_config.quotes),
        ]
        for title, section in sections:
            click.echo(f"{title} (from YAML):")
            click.echo("-" * 40)
            for key, value in section.model_dump().items():
                if isinstance(value, dict):
                    click.echo(f"  {key}:")
                    for k, v in value.items():
                        click.echo(f"    {k}: {v}")
                else:
                    click.echo(f"  {key}: {value}")
            click.echo()

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def show_info(logger, storage: str | None) -> None:
    """Display application information."""
    click.echo("Note Board")
    click.echo("=" * 40)

    try:
        from noteboard.engine.core.config import get_app_config
        app_config = get_app_config()
        click.echo(f"Name: {app_config.application.name}")
        click.echo(f"Version: {app_config.application.version}")
        click.echo(f"Description: {app_config.application.description}")
    except Exception as e:
        logger.error(
            "Failed to load application configuration",
            extra={"error": str(e)},
        )
        click.echo(
            click.style(
                "Error: Could not load application.yaml configuration.",
                fg="red",
            ),
            err=True,
        )
        sys.exit(1)

    click.echo(f"Storage: {_open_store(logger, storage).path}")
    click.echo()
    click.echo("Services (--service):")
    click.echo("  info           Show this information")
    click.echo("  config         Display configuration")
    click.echo("  list           List persisted notes")
    click.echo("  sort           Sort by creation time and save (--order asc|desc)")
    click.echo("  export         Write an export file")
    click.echo("  quote          Append a quote to a note (--note-id ID)")
    click.echo()
    click.echo("Options:")
    click.echo("  --verbose, -v  Enable INFO level logging")
    click.echo("  --debug, -d    Enable DEBUG level logging")
    click.echo("  --storage      Use a different notes file")


if __name__ == "__main__":
    main()
