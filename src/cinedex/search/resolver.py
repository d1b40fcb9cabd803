"""Nested search resolution and result disambiguation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cinedex.config import get_logger
from cinedex.exceptions import SearchError, SubSearchError
from cinedex.search.models import (
    DEFAULT_GOOD_THRESHOLD,
    DEFAULT_LABEL,
    PENDING,
    UNRESOLVED,
    Chooser,
    Resolution,
    SearchResult,
    SubSearchRole,
)

if TYPE_CHECKING:
    from cinedex.search.searcher import Searcher

logger = get_logger(__name__)


@dataclass
class SubSearch:
    """A nested search installed on a parent for one role."""

    role: SubSearchRole
    searcher: Searcher
    resolution: Resolution = PENDING


def pick(
    results: list[SearchResult],
    good_threshold: float = DEFAULT_GOOD_THRESHOLD,
    chooser: Chooser | None = None,
    label: str = DEFAULT_LABEL,
) -> SearchResult | None:
    """Choose the single best result from a list of candidates.

    With two or more candidates, the first one wins outright when both of
    the top two carry a similarity score and they are at least
    ``good_threshold`` apart. Otherwise the chooser decides, and without a
    chooser the first candidate is taken. Whatever the chooser returns or
    raises is passed through.

    Args:
        results: Candidates in ranked order
        good_threshold: Similarity gap that makes the first hit a clear winner
        chooser: Callback for ambiguous candidates
        label: Short noun phrase describing what is being chosen

    Returns:
        The chosen result, or None when there is nothing to choose
    """
    if not results:
        return None
    if len(results) == 1:
        return results[0]

    first, second = results[0], results[1]
    if first.has_similarity and second.has_similarity:
        if first.similarity - second.similarity >= good_threshold:
            return first

    if chooser is None:
        return first
    return chooser(results, label)


def resolve_subsearch(parent: Searcher, sub: SubSearch) -> None:
    """Run one nested search and record the atom it resolves to."""
    child = sub.searcher
    child.state.good_threshold = parent.state.good_threshold
    child.state.chooser = parent.state.chooser
    child.state.debug = parent.state.debug
    label = sub.role.label

    try:
        candidates = child.results()
    except SearchError as e:
        raise SubSearchError(
            message=f"Error with {label} sub-search: {e.message}",
            role=label,
        ) from e

    try:
        chosen = child.pick(candidates)
    except Exception as e:
        raise SubSearchError(
            message=f"Error picking {label} result: {e}",
            role=label,
        ) from e

    sub.resolution = UNRESOLVED if chosen is None else Resolution.resolved(chosen.id)
    logger.debug(
        "Resolved sub-search",
        role=sub.role.value,
        candidates=len(candidates),
        state=sub.resolution.state.value,
        atom=sub.resolution.atom,
    )


def resolve_subsearches(parent: Searcher) -> None:
    """Resolve every installed nested search in role order.

    TV show first, then credited media, then cast.
    """
    for role in SubSearchRole:
        sub = parent.subsearches.get(role)
        if sub is not None:
            resolve_subsearch(parent, sub)
