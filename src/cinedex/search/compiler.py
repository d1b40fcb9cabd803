"""Compile search state into a single SQL query over every entity kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cinedex.search.models import (
    EntityKind,
    MatchStrategy,
    RangeFilter,
    SearchState,
    SubSearchRole,
)

if TYPE_CHECKING:
    from cinedex.search.resolver import SubSearch
    from cinedex.search.searcher import Searcher

# Table alias holding each kind. Iteration order is the cascade order.
KIND_ALIASES: dict[EntityKind, str] = {
    EntityKind.MOVIE: "m",
    EntityKind.TVSHOW: "t",
    EntityKind.EPISODE: "e",
    EntityKind.ACTOR: "a",
}

ATOM_COLUMN = "COALESCE(m.atom_id, t.atom_id, e.atom_id, a.atom_id)"
YEAR_COLUMN = "COALESCE(m.year, t.year, e.year, 0)"

MOVIE_ATTRS = (
    "trim("
    "CASE WHEN m.tv THEN '(TV) ' ELSE '' END"
    " || CASE WHEN m.video THEN '(V)' ELSE '' END"
    ")"
)
TVSHOW_ATTRS = (
    "CASE WHEN t.year_start > 0 THEN CAST(t.year_start AS TEXT) ELSE '????' END"
    " || '-' || "
    "CASE WHEN t.year_end > 0 THEN CAST(t.year_end AS TEXT) ELSE '????' END"
)
EPISODE_ATTRS = (
    "'(TV show: ' || COALESCE(et.name, '')"
    " || CASE WHEN e.season > 0 AND e.episode_num > 0"
    " THEN ', #' || CAST(e.season AS TEXT) || '.' || CAST(e.episode_num AS TEXT)"
    " ELSE '' END"
    " || ')'"
)
ACTOR_ATTRS = "''"

KIND_ATTRS: dict[EntityKind, str] = {
    EntityKind.MOVIE: MOVIE_ATTRS,
    EntityKind.TVSHOW: TVSHOW_ATTRS,
    EntityKind.EPISODE: EPISODE_ATTRS,
    EntityKind.ACTOR: ACTOR_ATTRS,
}

# Column expression behind each sort field
SORT_COLUMNS: dict[str, str] = {
    "entity": "entity",
    "atom_id": "atom_id",
    "name": "name.name",
    "year": "year",
    "attrs": "attrs",
    "similarity": "similarity",
    "season": "e.season",
    "episode_num": "e.episode_num",
    "rank": "rating.rank",
    "votes": "rating.votes",
    "billing": "c.position",
}

NO_CREDIT_COLUMNS = """0 AS c_actor_id,
    0 AS c_media_id,
    '' AS c_character,
    0 AS c_position,
    '' AS c_attrs"""

CREDIT_COLUMNS = """COALESCE(c.actor_atom_id, 0) AS c_actor_id,
    COALESCE(c.media_atom_id, 0) AS c_media_id,
    COALESCE(c.character, '') AS c_character,
    COALESCE(c.position, 0) AS c_position,
    COALESCE(c.attrs, '') AS c_attrs"""

# ON clause contributed by each credit role to the shared credit join
CREDIT_JOIN_CONDITIONS: dict[SubSearchRole, str] = {
    SubSearchRole.CREDITS: (
        "c.actor_atom_id = a.atom_id AND c.media_atom_id = :credits_atom"
    ),
    SubSearchRole.CAST: (
        "c.media_atom_id = name.atom_id AND c.actor_atom_id = :cast_atom"
    ),
}

QUERY_TEMPLATE = """SELECT
    {entity} AS entity,
    {atom} AS atom_id,
    name.name AS name,
    {year} AS year,
    {similarity} AS similarity,
    {attrs} AS attrs,
    COALESCE(rating.votes, 0) AS votes,
    COALESCE(rating.rank, 0) AS rank,
    {credit_columns}
FROM name
LEFT JOIN movie AS m ON name.atom_id = m.atom_id
LEFT JOIN tvshow AS t ON name.atom_id = t.atom_id
LEFT JOIN episode AS e ON name.atom_id = e.atom_id
LEFT JOIN name AS et ON e.tvshow_atom_id = et.atom_id
LEFT JOIN actor AS a ON name.atom_id = a.atom_id
LEFT JOIN rating ON name.atom_id = rating.atom_id{credit_join}
WHERE {where}{order_by}{limit}"""


def _cascade(values: dict[EntityKind, str], default: str) -> str:
    """First-match CASE over the entity tables in cascade order."""
    branches = "\n".join(
        f"        WHEN {KIND_ALIASES[kind]}.atom_id IS NOT NULL THEN {values[kind]}"
        for kind in EntityKind
    )
    return f"CASE\n{branches}\n        ELSE {default}\n    END"


ENTITY_COLUMN = _cascade({kind: f"'{kind.value}'" for kind in EntityKind}, "''")
ATTRS_COLUMN = _cascade(KIND_ATTRS, "''")


@dataclass
class CompiledQuery:
    """SQL text plus its named parameters."""

    sql: str
    params: dict[str, Any] = field(default_factory=dict)


class QueryCompiler:
    """Build the polymorphic result query for a search."""

    def compile(self, searcher: Searcher) -> CompiledQuery:
        """Compile a search whose nested searches have been resolved.

        Args:
            searcher: Search to compile

        Returns:
            Executable query with named parameters

        Raises:
            SearchError: If a nested search is still pending
        """
        state = searcher.state
        params: dict[str, Any] = {}
        credit_roles = [
            role
            for role in (SubSearchRole.CREDITS, SubSearchRole.CAST)
            if role in searcher.subsearches
        ]

        if state.terms:
            params["text"] = state.text

        sql = QUERY_TEMPLATE.format(
            entity=ENTITY_COLUMN,
            atom=ATOM_COLUMN,
            year=YEAR_COLUMN,
            similarity=self._similarity_column(state),
            attrs=ATTRS_COLUMN,
            credit_columns=CREDIT_COLUMNS if credit_roles else NO_CREDIT_COLUMNS,
            credit_join=self._credit_join(searcher.subsearches, credit_roles, params),
            where=self._where(searcher, bool(credit_roles), params),
            order_by=self._order_by(state, bool(credit_roles)),
            limit=self._limit(state, params),
        )
        return CompiledQuery(sql=sql, params=params)

    def _similarity_column(self, state: SearchState) -> str:
        if state.ranks_by_similarity:
            return "similarity(name.name, :text)"
        return "-1.0"

    def _credit_join(
        self,
        subsearches: dict[SubSearchRole, SubSearch],
        roles: list[SubSearchRole],
        params: dict[str, Any],
    ) -> str:
        if not roles:
            return ""
        conditions = []
        for role in roles:
            params[f"{role.value}_atom"] = subsearches[role].resolution.bound_atom
            conditions.append(f"({CREDIT_JOIN_CONDITIONS[role]})")
        return "\nLEFT JOIN credit AS c ON " + " AND ".join(conditions)

    def _where(
        self,
        searcher: Searcher,
        credit_joined: bool,
        params: dict[str, Any],
    ) -> str:
        state = searcher.state
        conj = [f"{ATOM_COLUMN} IS NOT NULL"]

        if credit_joined:
            conj.append("c.actor_atom_id IS NOT NULL")
            if state.billing is not None:
                conj.append(state.billing.condition("c.position", params, "billing"))

        if state.entities:
            names = []
            for i, kind in enumerate(state.entities):
                params[f"entity_{i}"] = kind.value
                names.append(f":entity_{i}")
            conj.append(f"{ENTITY_COLUMN} IN ({', '.join(names)})")

        tvshow = searcher.subsearches.get(SubSearchRole.TVSHOW)
        if tvshow is not None:
            params["tvshow_atom"] = tvshow.resolution.bound_atom
            conj.append("e.tvshow_atom_id = :tvshow_atom")

        if state.atom > 0:
            params["atom"] = state.atom
            conj.append("name.atom_id = :atom")

        ranges: list[tuple[RangeFilter | None, str, str]] = [
            (state.years, YEAR_COLUMN, "year"),
            (state.ranks, "rating.rank", "rank"),
            (state.votes, "rating.votes", "votes"),
        ]
        for bounds, column, key in ranges:
            if bounds is not None:
                conj.append(bounds.condition(column, params, key))

        episode_ranges: list[tuple[RangeFilter | None, str, str]] = [
            (state.seasons, "e.season", "season"),
            (state.episodes, "e.episode_num", "episode"),
        ]
        for bounds, column, key in episode_ranges:
            if bounds is not None:
                cond = bounds.condition(column, params, key)
                conj.append(f"(e.atom_id IS NULL OR {cond})")

        if state.no_tv_movies:
            conj.append("(m.atom_id IS NULL OR m.tv = 0)")
        if state.no_video_movies:
            conj.append("(m.atom_id IS NULL OR m.video = 0)")

        if state.terms:
            conj.append(self._text_predicate(state, params))

        return "\n    AND ".join(conj)

    def _text_predicate(self, state: SearchState, params: dict[str, Any]) -> str:
        strategy = state.match_strategy
        if strategy is MatchStrategy.SIMILARITY:
            params["min_similarity"] = state.similar_threshold
            return "similarity(name.name, :text) >= :min_similarity"
        if strategy is MatchStrategy.PATTERN:
            return "name.name LIKE :text"
        return "name.name = :text"

    def _order_by(self, state: SearchState, credit_joined: bool) -> str:
        keys = []
        if state.ranks_by_similarity:
            keys.append("similarity DESC NULLS LAST")
        for key in state.sort_keys:
            if key.column == "billing" and not credit_joined:
                continue
            keys.append(f"{SORT_COLUMNS[key.column]} {key.order.upper()} NULLS LAST")
        if not keys:
            return ""
        return "\nORDER BY " + ", ".join(keys)

    def _limit(self, state: SearchState, params: dict[str, Any]) -> str:
        if state.limit < 0:
            return ""
        params["limit"] = state.limit
        return "\nLIMIT :limit"
