"""cinedex database package.

Provides the store handle the search engine queries, the fuzzy similarity
function registered on SQLite connections, and the catalogue schema.
"""

from .connection import Store, connect, open_store, register_similarity, similarity
from .schema import TABLES, create_schema

__all__ = [
    "TABLES",
    "Store",
    "connect",
    "create_schema",
    "open_store",
    "register_similarity",
    "similarity",
]
