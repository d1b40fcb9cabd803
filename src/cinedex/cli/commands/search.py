"""Search command for cinedex CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from cinedex.cli.chooser import interactive_chooser
from cinedex.cli.formatters import JsonFormatter
from cinedex.cli.utils.error_handler import handle_cli_error
from cinedex.config import get_logger, get_settings_for_cli
from cinedex.database import open_store
from cinedex.entities import entity_for
from cinedex.search import ResultFormatter, query

logger = get_logger(__name__)
console = Console()


def search_command(
    query_words: Annotated[
        list[str],
        typer.Argument(
            metavar="QUERY...",
            help=(
                "Search query: free text mixed with {directives}, e.g. "
                "'{show:the simpsons} {seasons:1} {sort:rank desc}'"
            ),
        ),
    ],
    db_path: Annotated[
        Path | None,
        typer.Option(
            "--db-path",
            "-d",
            help="Path to the SQLite database file",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Path to configuration file (YAML, TOML, or JSON)",
        ),
    ] = None,
    pick_one: Annotated[
        bool,
        typer.Option(
            "--pick",
            "-p",
            help="Resolve the query to a single entity and show its record",
        ),
    ] = False,
    no_input: Annotated[
        bool,
        typer.Option(
            "--no-input",
            help="Never prompt; ambiguous matches take the first result",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show atoms, similarity scores and credits",
        ),
    ] = False,
) -> None:
    """Search the catalogue of movies, TV shows, episodes and actors.

    Examples:
        # Fuzzy search across every kind of entity
        cinedex search the matrix

        # Episodes of a show with enough votes, best first
        cinedex search "{show:the simpsons} {votes:500-} {sort:rank desc}"

        # Movies an actor appeared in during the 90s
        cinedex search "{movie} {cast:keanu reeves} {years:1990-1999}"

    Run 'cinedex directives' for the full list of directives.
    """
    try:
        settings = get_settings_for_cli(
            config_file=config,
            cli_overrides={"database_path": db_path},
        )
        text = " ".join(query_words)

        with open_store(settings) as store:
            searcher = query(
                store,
                text,
                limit=settings.search_limit,
                good_threshold=settings.search_good_threshold,
                similar_threshold=settings.search_similar_threshold,
            )
            if not no_input and not json_output:
                searcher.chooser(interactive_chooser(console))

            results = searcher.results()
            logger.info("Search completed", query=text, results=len(results))

            if pick_one:
                chosen = searcher.pick(results)
                if chosen is None:
                    if json_output:
                        print(JsonFormatter().format(None))
                    else:
                        console.print(
                            "[yellow]No results found for your search.[/yellow]"
                        )
                    raise typer.Exit(1)

                entity = entity_for(store, chosen)
                if json_output:
                    print(
                        JsonFormatter().format(
                            {"kind": entity.kind.value, "entity": entity}
                        )
                    )
                else:
                    console.print(f"[bold cyan]{escape(str(entity))}[/bold cyan]")
                    if entity.attrs:
                        console.print(f"[dim]{escape(entity.attrs)}[/dim]")
                    console.print(f"[dim]{entity.kind.value} #{entity.id}[/dim]")
                return

            if json_output:
                print(JsonFormatter().format(results))
            else:
                ResultFormatter(console).format_results(results, verbose=verbose)

    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e, verbose=verbose)
