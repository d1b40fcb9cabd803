"""Interactive chooser for ambiguous search results."""

from __future__ import annotations

from rich.console import Console
from rich.prompt import IntPrompt

from cinedex.search.formatter import ResultFormatter
from cinedex.search.models import Chooser, SearchResult


def interactive_chooser(console: Console) -> Chooser:
    """Build a chooser that asks the user to pick from the candidates.

    The candidates are listed with 1-based numbers; answering 0 picks
    nothing, which resolves the search to no results.
    """
    formatter = ResultFormatter(console)

    def choose(results: list[SearchResult], what: str) -> SearchResult | None:
        console.print(f"[bold]More than one {what} matches. Choose one:[/bold]")
        console.print(formatter.build_table(results))
        while True:
            choice = IntPrompt.ask(
                f"Pick a {what} (0 for none)", console=console, default=1
            )
            if choice == 0:
                return None
            if 1 <= choice <= len(results):
                return results[choice - 1]
            console.print(f"[red]Enter a number between 0 and {len(results)}.[/red]")

    return choose
