"""Data models for search functionality."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cinedex.exceptions import DecodeError, DirectiveError, SearchError

Atom = int

NO_ATOM: Atom = 0
# Bound in place of an unresolved sub-search so the parent matches no rows
IMPOSSIBLE_ATOM: Atom = -1

DEFAULT_LIMIT = 30
DEFAULT_GOOD_THRESHOLD = 0.25
DEFAULT_SIMILAR_THRESHOLD = 0.3
DEFAULT_LABEL = "entity"

WILDCARDS = ("%", "_")


class EntityKind(str, Enum):
    """Kinds of catalogue entity, in cascade order."""

    MOVIE = "movie"
    TVSHOW = "tvshow"
    EPISODE = "episode"
    ACTOR = "actor"

    @property
    def cascade_index(self) -> int:
        """Position of this kind in the entity cascade."""
        return list(EntityKind).index(self)

    # Comparisons follow declaration order, not the string values
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, EntityKind):
            return NotImplemented
        return self.cascade_index < other.cascade_index

    def __le__(self, other: object) -> bool:
        if not isinstance(other, EntityKind):
            return NotImplemented
        return self.cascade_index <= other.cascade_index

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, EntityKind):
            return NotImplemented
        return self.cascade_index > other.cascade_index

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, EntityKind):
            return NotImplemented
        return self.cascade_index >= other.cascade_index

    @classmethod
    def from_string(cls, value: str) -> EntityKind:
        """Map a discriminator string to its kind.

        Raises:
            DecodeError: If the discriminator is not a known kind
        """
        try:
            return cls(value)
        except ValueError as e:
            raise DecodeError(
                message=f"Unknown entity discriminator {value!r}",
                hint="The search query produced a row outside the entity cascade",
                details={"expected": [kind.value for kind in cls]},
            ) from e


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive integer range; a ``None`` bound leaves that side open."""

    min: int | None = None
    max: int | None = None

    @classmethod
    def from_bounds(cls, minimum: int | None, maximum: int | None) -> RangeFilter:
        """Build a range from fluent-style bounds where -1 means open."""
        return cls(
            min=minimum if minimum is not None and minimum >= 0 else None,
            max=maximum if maximum is not None and maximum >= 0 else None,
        )

    @classmethod
    def parse(cls, text: str) -> RangeFilter:
        """Parse ``"1990-1999"``, ``"70-"``, ``"-5"`` or ``"1999"``.

        Raises:
            DirectiveError: If either side is not an integer
        """
        text = text.strip()
        if not text:
            return cls()
        if "-" not in text:
            value = _parse_int(text)
            return cls.from_bounds(value, value)

        start, _, end = text.partition("-")
        start, end = start.strip(), end.strip()
        return cls.from_bounds(
            _parse_int(start) if start else None,
            _parse_int(end) if end else None,
        )

    @property
    def is_unbounded(self) -> bool:
        """True when neither side constrains anything."""
        return self.min is None and self.max is None

    def condition(self, column: str, params: dict[str, Any], key: str) -> str:
        """Render a SQL predicate on ``column``, binding bounds into ``params``."""
        parts = []
        if self.min is not None:
            params[f"{key}_min"] = self.min
            parts.append(f"{column} >= :{key}_min")
        if self.max is not None:
            params[f"{key}_max"] = self.max
            parts.append(f"{column} <= :{key}_max")
        if not parts:
            return "1 = 1"
        return "(" + " AND ".join(parts) + ")"


def _parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError as e:
        raise DirectiveError(
            message=f"Could not parse '{text}' as an integer",
            hint="Ranges look like 1990-1999, 70-, -5 or 1999",
        ) from e


@dataclass(frozen=True)
class UserRank:
    """Rating data for an entity. Unrated entities have zero votes and rank."""

    votes: int = 0
    rank: int = 0

    @property
    def is_rated(self) -> bool:
        return self.votes > 0 or self.rank > 0


@dataclass(frozen=True)
class Credit:
    """Credit row joined onto a result, identified by atoms."""

    actor_id: Atom
    media_id: Atom
    character: str = ""
    position: int = 0
    attrs: str = ""

    @property
    def is_valid(self) -> bool:
        """True when the credit links a real actor to real media."""
        return self.actor_id > 0 and self.media_id > 0


@dataclass(frozen=True)
class SearchResult:
    """Individual search result."""

    entity: EntityKind
    id: Atom
    name: str
    year: int
    attrs: str = ""
    similarity: float = -1.0
    rank: UserRank = field(default_factory=UserRank)
    credit: Credit | None = None

    @property
    def has_similarity(self) -> bool:
        """Whether ``similarity`` holds a real score."""
        return self.similarity > -1


Chooser = Callable[[list[SearchResult], str], SearchResult | None]


# Default direction per sortable column. Keys are the only accepted columns.
SORT_DEFAULTS: dict[str, str] = {
    "entity": "asc",
    "atom_id": "asc",
    "name": "asc",
    "year": "desc",
    "attrs": "asc",
    "similarity": "desc",
    "season": "asc",
    "episode_num": "asc",
    "rank": "desc",
    "votes": "desc",
    "billing": "asc",
}

SORT_ALIASES: dict[str, str] = {"episode": "episode_num"}


@dataclass(frozen=True)
class SortKey:
    """One ordering criterion of a search."""

    column: str
    order: str

    @classmethod
    def create(cls, column: str, order: str | None = None) -> SortKey:
        """Validate a column and direction, filling in the column default.

        Raises:
            DirectiveError: For unknown columns or directions
        """
        name = column.strip().lower()
        name = SORT_ALIASES.get(name, name)
        if name not in SORT_DEFAULTS:
            raise DirectiveError(
                message=f"Cannot sort by '{column}'",
                hint="Valid sort fields: " + ", ".join(sorted(SORT_DEFAULTS)),
            )
        if order is None:
            return cls(name, SORT_DEFAULTS[name])
        direction = order.strip().lower()
        if direction not in ("asc", "desc"):
            raise DirectiveError(
                message=f"Invalid sort order '{order}'",
                hint="Sort order must be 'asc' or 'desc'",
            )
        return cls(name, direction)


class SubSearchRole(str, Enum):
    """Roles a nested search can play, in resolution order."""

    TVSHOW = "tvshow"
    CREDITS = "credits"
    CAST = "cast"

    @property
    def label(self) -> str:
        """Short noun phrase shown to choosers."""
        return _ROLE_LABELS[self]

    @property
    def entity(self) -> EntityKind | None:
        """Kind the nested search is restricted to, if any."""
        return _ROLE_ENTITIES[self]


_ROLE_LABELS = {
    SubSearchRole.TVSHOW: "TV show",
    SubSearchRole.CREDITS: "credits",
    SubSearchRole.CAST: "actor",
}

_ROLE_ENTITIES = {
    SubSearchRole.TVSHOW: EntityKind.TVSHOW,
    SubSearchRole.CREDITS: None,
    SubSearchRole.CAST: EntityKind.ACTOR,
}


class ResolutionState(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a nested search to a single atom."""

    state: ResolutionState
    atom: Atom = NO_ATOM

    @classmethod
    def resolved(cls, atom: Atom) -> Resolution:
        return cls(ResolutionState.RESOLVED, atom)

    @property
    def bound_atom(self) -> Atom:
        """Atom to bind into the parent query.

        Raises:
            SearchError: If the nested search has not run yet
        """
        if self.state is ResolutionState.RESOLVED:
            return self.atom
        if self.state is ResolutionState.UNRESOLVED:
            return IMPOSSIBLE_ATOM
        raise SearchError(
            message="Sub-search has not been resolved",
            hint="Call results() so nested searches run before compiling",
        )


PENDING = Resolution(ResolutionState.PENDING)
UNRESOLVED = Resolution(ResolutionState.UNRESOLVED)


class MatchStrategy(str, Enum):
    """How free text is compared against names."""

    EXACT = "exact"
    PATTERN = "pattern"
    SIMILARITY = "similarity"


@dataclass
class SearchState:
    """Everything a search accumulates before it is compiled."""

    terms: list[str] = field(default_factory=list)
    entities: list[EntityKind] = field(default_factory=list)
    atom: Atom = NO_ATOM
    years: RangeFilter | None = None
    ranks: RangeFilter | None = None
    votes: RangeFilter | None = None
    billing: RangeFilter | None = None
    seasons: RangeFilter | None = None
    episodes: RangeFilter | None = None
    no_tv_movies: bool = False
    no_video_movies: bool = False
    no_case: bool = False
    sort_keys: list[SortKey] = field(default_factory=list)
    limit: int = DEFAULT_LIMIT
    fuzzy: bool = False
    good_threshold: float = DEFAULT_GOOD_THRESHOLD
    similar_threshold: float = DEFAULT_SIMILAR_THRESHOLD
    debug: bool = False
    label: str = DEFAULT_LABEL
    chooser: Chooser | None = field(default=None, compare=False, repr=False)

    @property
    def text(self) -> str:
        """Free-text terms joined the way they are matched."""
        return " ".join(self.terms)

    @property
    def has_wildcard(self) -> bool:
        return any(w in self.text for w in WILDCARDS)

    @property
    def match_strategy(self) -> MatchStrategy:
        if self.fuzzy:
            return MatchStrategy.SIMILARITY
        if self.has_wildcard or self.no_case:
            return MatchStrategy.PATTERN
        return MatchStrategy.EXACT

    @property
    def ranks_by_similarity(self) -> bool:
        """True when the similarity column holds real scores."""
        return self.fuzzy and bool(self.terms)
