"""Result formatter for search functionality."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cinedex.search.models import SearchResult


class ResultFormatter:
    """Format search results for display."""

    def __init__(self, console: Console | None = None):
        """Initialize formatter.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()

    def format_results(
        self, results: list[SearchResult], verbose: bool = False
    ) -> None:
        """Display search results as a table.

        Args:
            results: Results in query order
            verbose: Also show atoms, similarity and credit details
        """
        if not results:
            self.console.print(
                "[yellow]No results found for your search.[/yellow]",
                style="bold",
            )
            return

        self.console.print(self.build_table(results, verbose))
        self.console.print(f"[dim]Found {len(results)} results[/dim]")

    def build_table(self, results: list[SearchResult], verbose: bool = False) -> Table:
        """Build the rich table used by :meth:`format_results`."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Kind", style="magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Year", justify="right")
        table.add_column("Details")
        table.add_column("Rank", justify="right", style="green")
        if verbose:
            table.add_column("Atom", justify="right", style="dim")
            table.add_column("Similarity", justify="right")
            table.add_column("Credit")

        for i, result in enumerate(results, 1):
            row = [
                str(i),
                result.entity.value,
                escape(result.name),
                str(result.year) if result.year > 0 else "",
                escape(result.attrs),
                self.format_rank(result),
            ]
            if verbose:
                row.extend(
                    [
                        str(result.id),
                        f"{result.similarity:.2f}" if result.has_similarity else "",
                        escape(self.format_credit(result)),
                    ]
                )
            table.add_row(*row)
        return table

    @staticmethod
    def format_rank(result: SearchResult) -> str:
        if not result.rank.is_rated:
            return ""
        return f"{result.rank.rank} ({result.rank.votes} votes)"

    @staticmethod
    def format_credit(result: SearchResult) -> str:
        credit = result.credit
        if credit is None:
            return ""
        parts = []
        if credit.character:
            parts.append(credit.character)
        if credit.position > 0:
            parts.append(f"<{credit.position}>")
        if credit.attrs:
            parts.append(credit.attrs)
        return " ".join(parts)

    def format_brief(self, results: list[SearchResult]) -> str:
        """Format results as plain text, one line per result.

        Args:
            results: Results in query order

        Returns:
            Brief text summary
        """
        if not results:
            return "No results found."

        lines = []
        for i, result in enumerate(results, 1):
            line = f"{i}. {result.entity.value}: {result.name}"
            if result.year > 0:
                line += f" ({result.year})"
            if result.attrs:
                line += f" {result.attrs}"
            lines.append(line)
        return "\n".join(lines)
