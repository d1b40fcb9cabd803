"""Initialize database command."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from cinedex.cli.utils.error_handler import handle_cli_error
from cinedex.config import get_settings_for_cli
from cinedex.database import connect, create_schema

console = Console()


def init_command(
    db_path: Annotated[
        Path | None,
        typer.Option(
            "--db-path",
            "-d",
            help="Path to the SQLite database file",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Force initialization, overwriting existing database",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (YAML, TOML, or JSON)",
        ),
    ] = None,
) -> None:
    """Create an empty cinedex catalogue.

    The database gets the catalogue tables but no data; loading the data is
    left to the ingestion pipeline. An existing database is left alone
    unless --force is given.
    """
    try:
        settings = get_settings_for_cli(
            config_file=config,
            cli_overrides={"database_path": db_path},
        )
        target = Path(settings.database_path)

        if target.exists():
            if not force:
                console.print(
                    f"[yellow]Database already exists at {target}[/yellow]\n"
                    "Use --force to recreate it."
                )
                raise typer.Exit(1)
            target.unlink()

        conn = connect(settings, read_only=False)
        try:
            create_schema(conn)
        finally:
            conn.close()

        console.print(f"[green]✓[/green] Database initialized at {target}")

    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e)
