"""The search builder and its query-string entry point."""

from __future__ import annotations

from rich.console import Console

from cinedex.config import get_logger
from cinedex.database import Store
from cinedex.exceptions import DirectiveError, SearchError, SubSearchError
from cinedex.search.compiler import CompiledQuery, QueryCompiler
from cinedex.search.decoder import decode_rows
from cinedex.search.directives import apply_directive
from cinedex.search.models import (
    DEFAULT_GOOD_THRESHOLD,
    DEFAULT_LIMIT,
    DEFAULT_SIMILAR_THRESHOLD,
    WILDCARDS,
    Atom,
    Chooser,
    EntityKind,
    RangeFilter,
    SearchResult,
    SearchState,
    SortKey,
    SubSearchRole,
)
from cinedex.search.resolver import SubSearch, pick, resolve_subsearches
from cinedex.search.tokenizer import directive_parts, query_tokens

logger = get_logger(__name__)

# Diagnostic stream for {debug}; never mixed with result output
_debug_console = Console(stderr=True, markup=False, highlight=False, soft_wrap=True)


class Searcher:
    """Accumulates the parameters of one search and runs it.

    Every setter returns the searcher so calls can be chained::

        Searcher(store).text("simpsons").entity(EntityKind.TVSHOW).limit(5)

    A searcher belongs to a single logical query. It is not safe to share
    between threads, and :meth:`results` runs the search again on every
    call rather than caching rows.
    """

    def __init__(
        self,
        store: Store,
        limit: int = DEFAULT_LIMIT,
        good_threshold: float = DEFAULT_GOOD_THRESHOLD,
        similar_threshold: float = DEFAULT_SIMILAR_THRESHOLD,
    ) -> None:
        """Start an empty search against a store.

        Args:
            store: Catalogue to search
            limit: Initial result cap, -1 for none
            good_threshold: Similarity gap for automatic picks
            similar_threshold: Minimum similarity of a fuzzy match
        """
        self.store = store
        self.state = SearchState(
            limit=limit,
            fuzzy=store.fuzzy_enabled,
            good_threshold=good_threshold,
            similar_threshold=similar_threshold,
        )
        self.subsearches: dict[SubSearchRole, SubSearch] = {}

    def __repr__(self) -> str:
        return f"Searcher({self.state!r}, subsearches={list(self.subsearches)})"

    # Query-string front end

    def add_token(self, token: str) -> Searcher:
        """Apply one query token: a directive, or else a free-text word."""
        parts = directive_parts(token)
        if parts is None:
            return self.text(token)
        name, value = parts
        apply_directive(self, name, value)
        return self

    def sub_searcher(self, name: str, query_text: str) -> Searcher:
        """Build a nested search from the argument of a sub-search directive.

        Raises:
            DirectiveError: If the argument is empty
            SubSearchError: If the nested query itself is invalid
        """
        if not query_text:
            raise DirectiveError(message=f"No query found for '{name}'.")
        try:
            return query(self.store, query_text)
        except SearchError as e:
            raise SubSearchError(
                message=f"Error with sub-search for {name}: {e.message}",
                role=name,
            ) from e

    # Fluent front end

    def text(self, term: str) -> Searcher:
        """Add a free-text term. Wildcards turn fuzzy matching off."""
        self.state.terms.append(term)
        if any(w in term for w in WILDCARDS):
            self.state.fuzzy = False
        return self

    def entity(self, kind: EntityKind) -> Searcher:
        """Allow results of ``kind``. Repeat to allow several kinds."""
        if kind not in self.state.entities:
            self.state.entities.append(kind)
        return self

    def atom(self, atom: Atom) -> Searcher:
        """Only return the entity with this atom."""
        self.state.atom = atom
        return self

    def years(
        self, minimum: int | None = None, maximum: int | None = None
    ) -> Searcher:
        """Inclusive year range; ``None`` or -1 leaves a side open."""
        self.state.years = RangeFilter.from_bounds(minimum, maximum)
        return self

    def ranks(
        self, minimum: int | None = None, maximum: int | None = None
    ) -> Searcher:
        """Inclusive rank range on the 0 to 100 scale."""
        self.state.ranks = RangeFilter.from_bounds(minimum, maximum)
        return self

    def votes(
        self, minimum: int | None = None, maximum: int | None = None
    ) -> Searcher:
        """Inclusive range on the number of rating votes."""
        self.state.votes = RangeFilter.from_bounds(minimum, maximum)
        return self

    def billed(
        self, minimum: int | None = None, maximum: int | None = None
    ) -> Searcher:
        """Inclusive billing range, applied to credits of a cast or credits search."""
        self.state.billing = RangeFilter.from_bounds(minimum, maximum)
        return self

    def seasons(
        self, minimum: int | None = None, maximum: int | None = None
    ) -> Searcher:
        """Inclusive season range. Only episodes are filtered."""
        self.state.seasons = RangeFilter.from_bounds(minimum, maximum)
        return self

    def episodes(
        self, minimum: int | None = None, maximum: int | None = None
    ) -> Searcher:
        """Inclusive episode-number range. Only episodes are filtered."""
        self.state.episodes = RangeFilter.from_bounds(minimum, maximum)
        return self

    def no_tv_movies(self) -> Searcher:
        self.state.no_tv_movies = True
        return self

    def no_video_movies(self) -> Searcher:
        self.state.no_video_movies = True
        return self

    def no_case(self) -> Searcher:
        """Match text case-insensitively when fuzzy matching is off."""
        self.state.no_case = True
        return self

    def tvshow(self, sub: Searcher) -> Searcher:
        """Restrict results to episodes of the TV show ``sub`` resolves to."""
        return self._install(SubSearchRole.TVSHOW, sub)

    def credits(self, sub: Searcher) -> Searcher:
        """Restrict results to actors credited in the media ``sub`` resolves to."""
        return self._install(SubSearchRole.CREDITS, sub)

    def cast(self, sub: Searcher) -> Searcher:
        """Restrict results to media the actor ``sub`` resolves to appeared in."""
        return self._install(SubSearchRole.CAST, sub)

    def limit(self, n: int) -> Searcher:
        """Cap the number of results. -1 removes the cap."""
        self.state.limit = n
        return self

    def sort(self, column: str, order: str | None = None) -> Searcher:
        """Append a sort key. The column's default direction applies without ``order``.

        Raises:
            DirectiveError: For columns or directions that cannot be sorted on
        """
        self.state.sort_keys.append(SortKey.create(column, order))
        return self

    def chooser(self, chooser: Chooser | None) -> Searcher:
        """Set the callback that settles ambiguous picks."""
        self.state.chooser = chooser
        return self

    def good_threshold(self, diff: float) -> Searcher:
        """Set the similarity gap at which the first hit is picked outright.

        1.0 effectively always defers to the chooser.
        """
        self.state.good_threshold = diff
        return self

    def similar_threshold(self, threshold: float) -> Searcher:
        """Set the minimum similarity of a fuzzy match."""
        self.state.similar_threshold = threshold
        return self

    def debug(self, enabled: bool = True) -> Searcher:
        """Write compiled SQL to stderr when the search runs."""
        self.state.debug = enabled
        return self

    def _install(self, role: SubSearchRole, sub: Searcher) -> Searcher:
        # A role's kind replaces whatever kinds the nested search allowed
        if role.entity is not None:
            sub.state.entities = [role.entity]
        sub.state.label = role.label
        self.subsearches[role] = SubSearch(role=role, searcher=sub)
        return self

    # Execution

    def compile(self) -> CompiledQuery:
        """Compile the search. Nested searches must already be resolved."""
        return QueryCompiler().compile(self)

    def results(self) -> list[SearchResult]:
        """Resolve nested searches, then run the search.

        Returns:
            Matching results in query order

        Raises:
            SearchError: If a nested search or chooser fails
            sqlite3.Error: If the store rejects the query
        """
        resolve_subsearches(self)
        compiled = self.compile()
        logger.debug(
            "Compiled search query",
            label=self.state.label,
            params=len(compiled.params),
        )
        if self.state.debug:
            _debug_console.print(compiled.sql)
            _debug_console.print(compiled.params)

        rows = self.store.execute(compiled.sql, compiled.params)
        results = decode_rows(rows)
        logger.debug("Search finished", label=self.state.label, results=len(results))
        return results

    def pick(self, results: list[SearchResult]) -> SearchResult | None:
        """Choose one result with this search's threshold, chooser and label."""
        return pick(
            results,
            good_threshold=self.state.good_threshold,
            chooser=self.state.chooser,
            label=self.state.label,
        )


def query(
    store: Store,
    text: str,
    limit: int = DEFAULT_LIMIT,
    good_threshold: float = DEFAULT_GOOD_THRESHOLD,
    similar_threshold: float = DEFAULT_SIMILAR_THRESHOLD,
) -> Searcher:
    """Build a search from a query string.

    Equivalent to creating a :class:`Searcher` and chaining the fluent calls
    each token stands for.

    Args:
        store: Catalogue to search
        text: Query such as ``"{show:the simpsons} {seasons:1} {sort:rank}"``
        limit: Result cap before any ``{limit}`` directive
        good_threshold: Similarity gap for automatic picks
        similar_threshold: Minimum fuzzy similarity before any ``{similar}``

    Raises:
        DirectiveError: If a directive is unknown or malformed
        SubSearchError: If a nested query is invalid
    """
    searcher = Searcher(
        store,
        limit=limit,
        good_threshold=good_threshold,
        similar_threshold=similar_threshold,
    )
    for token in query_tokens(text):
        searcher.add_token(token)
    return searcher
