"""Typed catalogue records loaded by atom.

Search results only carry an atom and a few display columns. These records
hold the full row for each kind of entity, and their ``attrs`` properties
format the same details the search query shows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from cinedex.exceptions import EntityNotFoundError
from cinedex.search.models import Atom, EntityKind

if TYPE_CHECKING:
    from cinedex.database import Store
    from cinedex.search.models import SearchResult


def _year_or_unknown(year: int) -> str:
    return str(year) if year > 0 else "????"


@dataclass(frozen=True)
class Movie:
    id: Atom
    title: str
    year: int
    sequence: str = ""
    tv: bool = False
    video: bool = False

    kind = EntityKind.MOVIE

    @property
    def attrs(self) -> str:
        flags = []
        if self.tv:
            flags.append("(TV)")
        if self.video:
            flags.append("(V)")
        return " ".join(flags)

    def __str__(self) -> str:
        return f"{self.title} ({_year_or_unknown(self.year)})"


@dataclass(frozen=True)
class TvShow:
    id: Atom
    title: str
    year: int
    sequence: str = ""
    year_start: int = 0
    year_end: int = 0

    kind = EntityKind.TVSHOW

    @property
    def attrs(self) -> str:
        return f"{_year_or_unknown(self.year_start)}-{_year_or_unknown(self.year_end)}"

    def __str__(self) -> str:
        return f'"{self.title}" ({_year_or_unknown(self.year)})'


@dataclass(frozen=True)
class Episode:
    """A single episode; ``tvshow_title`` is the parent show's name."""

    id: Atom
    tvshow_id: Atom
    title: str
    year: int
    season: int = 0
    episode_num: int = 0
    tvshow_title: str = ""

    kind = EntityKind.EPISODE

    @property
    def attrs(self) -> str:
        numbering = ""
        if self.season > 0 and self.episode_num > 0:
            numbering = f", #{self.season}.{self.episode_num}"
        return f"(TV show: {self.tvshow_title}{numbering})"

    def tvshow(self, store: Store) -> TvShow:
        """Load the show this episode belongs to."""
        return cast(TvShow, load_entity(store, EntityKind.TVSHOW, self.tvshow_id))

    def __str__(self) -> str:
        return f"{self.title} {self.attrs}"


@dataclass(frozen=True)
class Actor:
    id: Atom
    full_name: str
    sequence: str = ""

    kind = EntityKind.ACTOR

    @property
    def attrs(self) -> str:
        return ""

    def __str__(self) -> str:
        if self.sequence:
            return f"{self.full_name} ({self.sequence})"
        return self.full_name


Entity = Movie | TvShow | Episode | Actor

_QUERIES: dict[EntityKind, str] = {
    EntityKind.MOVIE: """
        SELECT m.atom_id, n.name, m.year, m.sequence, m.tv, m.video
        FROM movie AS m
        JOIN name AS n ON n.atom_id = m.atom_id
        WHERE m.atom_id = ?
    """,
    EntityKind.TVSHOW: """
        SELECT t.atom_id, n.name, t.year, t.sequence, t.year_start, t.year_end
        FROM tvshow AS t
        JOIN name AS n ON n.atom_id = t.atom_id
        WHERE t.atom_id = ?
    """,
    EntityKind.EPISODE: """
        SELECT e.atom_id, e.tvshow_atom_id, n.name, e.year, e.season,
               e.episode_num, COALESCE(tn.name, '')
        FROM episode AS e
        JOIN name AS n ON n.atom_id = e.atom_id
        LEFT JOIN name AS tn ON tn.atom_id = e.tvshow_atom_id
        WHERE e.atom_id = ?
    """,
    EntityKind.ACTOR: """
        SELECT a.atom_id, n.name, a.sequence
        FROM actor AS a
        JOIN name AS n ON n.atom_id = a.atom_id
        WHERE a.atom_id = ?
    """,
}


def load_entity(store: Store, kind: EntityKind, atom: Atom) -> Entity:
    """Load the full record of an entity.

    Args:
        store: Catalogue to read from
        kind: Kind of entity the atom belongs to
        atom: Atom of the entity

    Returns:
        The typed record

    Raises:
        EntityNotFoundError: If no entity of that kind has the atom
    """
    rows = store.execute(_QUERIES[kind], (atom,))
    if not rows:
        raise EntityNotFoundError(
            message=f"No {kind.value} with atom {atom}",
            hint="Atoms can change when the catalogue is rebuilt; search again",
            details={"kind": kind.value, "atom": atom},
        )
    row = tuple(rows[0])
    if kind is EntityKind.MOVIE:
        return Movie(row[0], row[1], row[2], row[3], bool(row[4]), bool(row[5]))
    if kind is EntityKind.TVSHOW:
        return TvShow(*row)
    if kind is EntityKind.EPISODE:
        return Episode(*row)
    return Actor(*row)


def entity_for(store: Store, result: SearchResult) -> Entity:
    """Load the full record behind a search result."""
    return load_entity(store, result.entity, result.id)
