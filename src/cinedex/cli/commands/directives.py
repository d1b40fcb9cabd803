"""List the directives understood by search queries."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cinedex.cli.formatters import JsonFormatter
from cinedex.search import describe_directives

console = Console()


def directives_command(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List every search directive with its synonyms and description."""
    rows = describe_directives()

    if json_output:
        print(
            JsonFormatter().format(
                [
                    {
                        "name": name,
                        "synonyms": list(synonyms),
                        "takes_argument": takes_argument,
                        "description": description,
                    }
                    for name, synonyms, takes_argument, description in rows
                ]
            )
        )
        return

    table = Table(title="Search directives", show_header=True, header_style="bold")
    table.add_column("Directive", style="cyan", no_wrap=True)
    table.add_column("Synonyms", style="magenta")
    table.add_column("Description")

    for name, synonyms, takes_argument, description in rows:
        usage = f"{{{name}:...}}" if takes_argument else f"{{{name}}}"
        table.add_row(escape(usage), ", ".join(synonyms), escape(description))

    console.print(table)
