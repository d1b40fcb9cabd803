"""Pytest configuration and fixtures."""

import sqlite3
from pathlib import Path

import pytest

from cinedex.config import CinedexSettings, reset_settings, set_settings
from cinedex.database import Store, create_schema, register_similarity
from tests.catalogue_data import CATALOGUE_SQL


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a scratch database and reset global state."""
    db_path = tmp_path / "isolated_cinedex.db"
    monkeypatch.setenv("CINEDEX_DATABASE_PATH", str(db_path))
    reset_settings()
    set_settings(CinedexSettings(database_path=db_path))

    yield

    reset_settings()


@pytest.fixture
def catalogue_path(tmp_path) -> Path:
    """Create a small catalogue database on disk."""
    db_path = tmp_path / "catalogue.db"
    conn = sqlite3.connect(db_path)
    create_schema(conn)
    conn.executescript(CATALOGUE_SQL)
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def store(catalogue_path):
    """Store with fuzzy similarity available."""
    conn = sqlite3.connect(catalogue_path)
    register_similarity(conn)
    yield Store(conn)
    conn.close()


@pytest.fixture
def plain_store(catalogue_path):
    """Store without the similarity function, so matching is exact or LIKE."""
    conn = sqlite3.connect(catalogue_path)
    yield Store(conn)
    conn.close()


@pytest.fixture
def catalogue_settings(catalogue_path) -> CinedexSettings:
    return CinedexSettings(database_path=catalogue_path)
