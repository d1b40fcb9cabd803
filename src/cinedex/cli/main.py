"""Main CLI entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from cinedex import __version__
from cinedex.cli.commands import directives_command, init_command, search_command
from cinedex.cli.formatters import JsonFormatter
from cinedex.config import (
    configure_logging,
    get_logger,
    get_settings_for_cli,
    set_settings,
)

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="cinedex",
    help="Search a local movie, TV and actor catalogue",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="init")(init_command)
app.command(name="search")(search_command)
app.command(name="directives")(directives_command)


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show cinedex version."""
    version_info = {
        "name": "cinedex",
        "version": __version__,
        "description": "Search a local movie, TV and actor catalogue",
    }

    if json_output:
        print(JsonFormatter().format(version_info))
    else:
        console.print(f"cinedex v{version_info['version']}")


@app.callback()
def main_callback(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            envvar="CINEDEX_CONFIG",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure global options."""
    overrides: dict[str, object] = {}
    if debug:
        overrides.update(log_level="DEBUG", debug=True)
    elif verbose:
        overrides["log_level"] = "INFO"

    if config is None and not overrides:
        return

    try:
        settings = get_settings_for_cli(config_file=config, cli_overrides=overrides)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    set_settings(settings)
    configure_logging(settings)
    logger.debug("Global options applied", config=str(config))


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
