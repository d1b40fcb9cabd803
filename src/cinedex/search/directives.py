"""Directives accepted in query strings.

A directive is written ``{name}`` or ``{name:value}``. Each one maps onto a
fluent method of :class:`~cinedex.search.searcher.Searcher`, so a query
string and the equivalent chain of method calls produce the same search.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cinedex.exceptions import DirectiveError
from cinedex.search.models import SORT_DEFAULTS, EntityKind, RangeFilter

if TYPE_CHECKING:
    from cinedex.search.searcher import Searcher


@dataclass(frozen=True)
class Directive:
    """A single query directive and how it changes a search."""

    name: str
    description: str
    apply: Callable[[Searcher, str], None]
    takes_argument: bool
    synonyms: tuple[str, ...] = ()

    @property
    def keys(self) -> tuple[str, ...]:
        return (self.name, *self.synonyms)


def _entity(kind: EntityKind) -> Callable[[Searcher, str], None]:
    def apply(searcher: Searcher, _value: str) -> None:
        searcher.entity(kind)

    return apply


def _range(method: str) -> Callable[[Searcher, str], None]:
    def apply(searcher: Searcher, value: str) -> None:
        bounds = RangeFilter.parse(value)
        getattr(searcher, method)(bounds.min, bounds.max)

    return apply


def _parse_integer(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise DirectiveError(
            message=f"Invalid integer '{value}' for {what}",
        ) from e


def _apply_show(searcher: Searcher, value: str) -> None:
    searcher.tvshow(searcher.sub_searcher("show", value))


def _apply_credits(searcher: Searcher, value: str) -> None:
    searcher.credits(searcher.sub_searcher("credits", value))


def _apply_cast(searcher: Searcher, value: str) -> None:
    searcher.cast(searcher.sub_searcher("cast", value))


def _apply_atom(searcher: Searcher, value: str) -> None:
    searcher.atom(_parse_integer(value, "atom id"))


def _apply_similar(searcher: Searcher, value: str) -> None:
    try:
        threshold = float(value)
    except ValueError as e:
        raise DirectiveError(message=f"Invalid float '{value}' for similar") from e
    if not 0.0 <= threshold <= 1.0:
        raise DirectiveError(
            message=f"Similarity threshold {threshold} is out of range",
            hint="Use a value between 0 and 1",
        )
    searcher.similar_threshold(threshold)


def _apply_limit(searcher: Searcher, value: str) -> None:
    limit = _parse_integer(value, "limit")
    if limit < -1:
        raise DirectiveError(
            message=f"Invalid limit {limit}",
            hint="Use a non-negative limit, or -1 for no limit",
        )
    searcher.limit(limit)


def _apply_sort(searcher: Searcher, value: str) -> None:
    fields = value.split()
    if not 1 <= len(fields) <= 2:
        raise DirectiveError(
            message=f"Invalid sort format '{value}'",
            hint="Use a field and an optional order, e.g. {sort:rank desc}",
        )
    searcher.sort(fields[0], fields[1] if len(fields) == 2 else None)


_SORT_FIELDS = ", ".join(sorted(SORT_DEFAULTS))

DIRECTIVES: tuple[Directive, ...] = (
    Directive(
        "movie",
        "Restricts results to movies. May be combined with other entity "
        "directives to allow several kinds.",
        _entity(EntityKind.MOVIE),
        takes_argument=False,
    ),
    Directive(
        "tvshow",
        "Restricts results to TV shows. May be combined with other entity "
        "directives to allow several kinds.",
        _entity(EntityKind.TVSHOW),
        takes_argument=False,
    ),
    Directive(
        "episode",
        "Restricts results to episodes. May be combined with other entity "
        "directives to allow several kinds.",
        _entity(EntityKind.EPISODE),
        takes_argument=False,
    ),
    Directive(
        "actor",
        "Restricts results to actors. May be combined with other entity "
        "directives to allow several kinds.",
        _entity(EntityKind.ACTOR),
        takes_argument=False,
    ),
    Directive(
        "show",
        "A sub-search for a TV show that restricts results to episodes of "
        "that show. e.g., {show:the simpsons}.",
        _apply_show,
        takes_argument=True,
        synonyms=("tv",),
    ),
    Directive(
        "credits",
        "A sub-search for a movie or episode that restricts results to the "
        "actors credited in it.",
        _apply_credits,
        takes_argument=True,
    ),
    Directive(
        "cast",
        "A sub-search for an actor that restricts results to the media the "
        "actor appeared in.",
        _apply_cast,
        takes_argument=True,
    ),
    Directive(
        "id",
        "Selects the single entity with the given atom identifier. Atoms can "
        "change when the database is rebuilt, so do not rely on them.",
        _apply_atom,
        takes_argument=True,
        synonyms=("atom",),
    ),
    Directive(
        "years",
        "Only shows results from the year or years given. e.g., "
        "{years:1990-1999} only shows results from the 90s.",
        _range("years"),
        takes_argument=True,
        synonyms=("year",),
    ),
    Directive(
        "rank",
        "Only shows results with a rank in the range given, on a scale of "
        "0 to 100. e.g., {rank:70-} shows entities ranked 70 or better.",
        _range("ranks"),
        takes_argument=True,
        synonyms=("rating",),
    ),
    Directive(
        "votes",
        "Only shows results whose rank has a vote count in the range given. "
        "e.g., {votes:10000-}.",
        _range("votes"),
        takes_argument=True,
    ),
    Directive(
        "billed",
        "Only shows credits with a billing position in the range given. "
        "e.g., {billed:1-5} keeps the top five billed credits. Only applies "
        "together with {cast:...} or {credits:...}.",
        _range("billed"),
        takes_argument=True,
        synonyms=("billing",),
    ),
    Directive(
        "seasons",
        "Only shows episodes from the season or seasons given. Movies and "
        "TV shows are not filtered.",
        _range("seasons"),
        takes_argument=True,
        synonyms=("s", "season"),
    ),
    Directive(
        "episodes",
        "Only shows episodes with an episode number in the range given. "
        "Movies and TV shows are not filtered.",
        _range("episodes"),
        takes_argument=True,
        synonyms=("e",),
    ),
    Directive(
        "notv",
        "Removes 'made for TV' movies from the results.",
        lambda searcher, _value: searcher.no_tv_movies(),
        takes_argument=False,
    ),
    Directive(
        "novideo",
        "Removes 'made for video' movies from the results.",
        lambda searcher, _value: searcher.no_video_movies(),
        takes_argument=False,
    ),
    Directive(
        "nocase",
        "Matches the search text case-insensitively when fuzzy matching is "
        "unavailable.",
        lambda searcher, _value: searcher.no_case(),
        takes_argument=False,
    ),
    Directive(
        "similar",
        "Sets the minimum similarity, between 0 and 1, of a fuzzy text "
        "match. Lower values return more results and are slower.",
        _apply_similar,
        takes_argument=True,
    ),
    Directive(
        "limit",
        "Limits the number of results returned. -1 returns everything.",
        _apply_limit,
        takes_argument=True,
    ),
    Directive(
        "sort",
        "Sorts results by the field given, optionally followed by asc or "
        "desc. May be repeated. Fuzzy searches always sort by similarity "
        "first. Valid sort fields: " + _SORT_FIELDS + ".",
        _apply_sort,
        takes_argument=True,
    ),
    Directive(
        "debug",
        "Writes the SQL query used by the search to stderr.",
        lambda searcher, _value: searcher.debug(),
        takes_argument=False,
    ),
)

_LOOKUP: dict[str, Directive] = {
    key: directive for directive in DIRECTIVES for key in directive.keys
}


def get_directive(name: str) -> Directive | None:
    """Look up a directive by its name or one of its synonyms."""
    return _LOOKUP.get(name)


def apply_directive(searcher: Searcher, name: str, value: str) -> None:
    """Apply the directive ``name`` with ``value`` to a search.

    Raises:
        DirectiveError: For unknown directives or a wrong argument count
    """
    directive = get_directive(name)
    if directive is None:
        raise DirectiveError(
            message=f"Unrecognized search directive: {name}",
            hint="Run 'cinedex directives' to list the available directives",
        )
    if directive.takes_argument and not value:
        raise DirectiveError(message=f"The {name} directive requires an argument.")
    if not directive.takes_argument and value:
        raise DirectiveError(
            message=f"The {name} directive does not take an argument."
        )
    directive.apply(searcher, value)


def describe_directives() -> list[tuple[str, tuple[str, ...], bool, str]]:
    """List every directive as (name, synonyms, takes_argument, description)."""
    return sorted(
        (d.name, d.synonyms, d.takes_argument, d.description) for d in DIRECTIVES
    )
