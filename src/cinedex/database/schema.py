"""Relational shape of the cinedex catalogue.

Every entity is keyed by its atom. Names live in their own table so one
lookup covers movies, TV shows, episodes and actors alike; the search
compiler joins the per-kind tables onto ``name`` and lets exactly one of
them match for any atom.

This module only creates the tables. Filling them is the job of the
ingestion pipeline, and there is no migration mechanism.
"""

import sqlite3

from cinedex.config import get_logger

logger = get_logger(__name__)

TABLES = ("name", "movie", "tvshow", "episode", "actor", "rating", "credit")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS name (
    atom_id INTEGER PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS movie (
    atom_id INTEGER PRIMARY KEY,
    year INTEGER NOT NULL DEFAULT 0,
    sequence TEXT NOT NULL DEFAULT '',
    tv BOOLEAN NOT NULL DEFAULT 0,
    video BOOLEAN NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS tvshow (
    atom_id INTEGER PRIMARY KEY,
    year INTEGER NOT NULL DEFAULT 0,
    sequence TEXT NOT NULL DEFAULT '',
    year_start INTEGER NOT NULL DEFAULT 0,
    year_end INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS episode (
    atom_id INTEGER PRIMARY KEY,
    tvshow_atom_id INTEGER NOT NULL,
    year INTEGER NOT NULL DEFAULT 0,
    season INTEGER NOT NULL DEFAULT 0,
    episode_num INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS actor (
    atom_id INTEGER PRIMARY KEY,
    sequence TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS rating (
    atom_id INTEGER PRIMARY KEY,
    votes INTEGER NOT NULL DEFAULT 0,
    rank INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS credit (
    actor_atom_id INTEGER NOT NULL,
    media_atom_id INTEGER NOT NULL,
    character TEXT NOT NULL DEFAULT '',
    position INTEGER NOT NULL DEFAULT 0,
    attrs TEXT NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_name_name ON name(name);
CREATE INDEX IF NOT EXISTS idx_episode_tvshow ON episode(tvshow_atom_id);
CREATE INDEX IF NOT EXISTS idx_credit_actor ON credit(actor_atom_id);
CREATE INDEX IF NOT EXISTS idx_credit_media ON credit(media_atom_id);
"""


def create_schema(connection: sqlite3.Connection) -> None:
    """Create the catalogue tables if they do not exist yet.

    Args:
        connection: Writable SQLite connection
    """
    connection.executescript(SCHEMA_SQL)
    connection.commit()
    logger.debug("Catalogue schema ensured", tables=list(TABLES))
