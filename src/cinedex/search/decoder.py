"""Map compiled-query rows onto search results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from cinedex.exceptions import DecodeError
from cinedex.search.models import Credit, EntityKind, SearchResult, UserRank

ROW_WIDTH = 13


def decode_row(row: Sequence[Any]) -> SearchResult:
    """Decode one row of the compiled search query.

    Columns are read by position, in the order the compiler selects them.

    Raises:
        DecodeError: If the row has the wrong shape or an unknown entity kind
    """
    values = tuple(row)
    if len(values) != ROW_WIDTH:
        raise DecodeError(
            message=f"Expected {ROW_WIDTH} columns in a result row, got {len(values)}",
        )
    (
        entity,
        atom_id,
        name,
        year,
        similarity,
        attrs,
        votes,
        rank,
        actor_id,
        media_id,
        character,
        position,
        credit_attrs,
    ) = values

    credit = Credit(
        actor_id=int(actor_id or 0),
        media_id=int(media_id or 0),
        character=character or "",
        position=int(position or 0),
        attrs=credit_attrs or "",
    )
    return SearchResult(
        entity=EntityKind.from_string(entity),
        id=int(atom_id),
        name=name,
        year=int(year or 0),
        attrs=attrs or "",
        similarity=float(similarity),
        rank=UserRank(votes=int(votes or 0), rank=int(rank or 0)),
        credit=credit if credit.is_valid else None,
    )


def decode_rows(rows: Sequence[Sequence[Any]]) -> list[SearchResult]:
    return [decode_row(row) for row in rows]
