"""Search module for cinedex."""

from .compiler import CompiledQuery, QueryCompiler
from .decoder import decode_row
from .directives import DIRECTIVES, Directive, describe_directives, get_directive
from .formatter import ResultFormatter
from .models import (
    IMPOSSIBLE_ATOM,
    NO_ATOM,
    Atom,
    Chooser,
    Credit,
    EntityKind,
    MatchStrategy,
    RangeFilter,
    Resolution,
    ResolutionState,
    SearchResult,
    SearchState,
    SortKey,
    SubSearchRole,
    UserRank,
)
from .resolver import SubSearch, pick, resolve_subsearches
from .searcher import Searcher, query
from .tokenizer import directive_parts, query_tokens

__all__ = [
    "DIRECTIVES",
    "IMPOSSIBLE_ATOM",
    "NO_ATOM",
    "Atom",
    "Chooser",
    "CompiledQuery",
    "Credit",
    "Directive",
    "EntityKind",
    "MatchStrategy",
    "QueryCompiler",
    "RangeFilter",
    "Resolution",
    "ResolutionState",
    "ResultFormatter",
    "SearchResult",
    "SearchState",
    "Searcher",
    "SortKey",
    "SubSearch",
    "SubSearchRole",
    "UserRank",
    "decode_row",
    "describe_directives",
    "directive_parts",
    "get_directive",
    "pick",
    "query",
    "query_tokens",
    "resolve_subsearches",
]
