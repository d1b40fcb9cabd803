"""Store handle and connection helpers for the cinedex catalogue."""

from __future__ import annotations

import sqlite3
from collections.abc import Generator, Mapping, Sequence
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Any

from rapidfuzz import fuzz

from cinedex.config import CinedexSettings, get_logger
from cinedex.exceptions import DatabaseError

logger = get_logger(__name__)

SIMILARITY_FUNCTION = "similarity"


def similarity(left: str | None, right: str | None) -> float:
    """Case-insensitive similarity of two names in the range [0, 1]."""
    if left is None or right is None:
        return 0.0
    return fuzz.ratio(left.lower(), right.lower()) / 100.0


def register_similarity(connection: sqlite3.Connection) -> None:
    """Make ``similarity(a, b)`` available to SQL run on this connection."""
    connection.create_function(
        SIMILARITY_FUNCTION, 2, similarity, deterministic=True
    )


class Store:
    """A catalogue handle the search engine runs its queries against.

    The store owns nothing but the connection. Whether it can score fuzzy
    matches is probed on first use and remembered for the life of the
    handle.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        """Wrap an open SQLite connection.

        Args:
            connection: Connection to a database with the catalogue tables
        """
        connection.row_factory = sqlite3.Row
        self.connection = connection
        self._fuzzy: bool | None = None

    @property
    def fuzzy_enabled(self) -> bool:
        """Whether the connection exposes the similarity function."""
        if self._fuzzy is None:
            try:
                self.connection.execute(
                    f"SELECT {SIMILARITY_FUNCTION}('', '')"
                ).fetchone()
            except sqlite3.OperationalError:
                self._fuzzy = False
            else:
                self._fuzzy = True
            logger.debug("Probed fuzzy matching support", enabled=self._fuzzy)
        return self._fuzzy

    def execute(
        self,
        sql: str,
        params: Mapping[str, Any] | Sequence[Any] = (),
    ) -> list[sqlite3.Row]:
        """Run a parameterized query and return every row.

        Errors raised by SQLite propagate unchanged.
        """
        cursor = self.connection.execute(sql, params)
        try:
            return cursor.fetchall()
        finally:
            cursor.close()

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()


def connect(
    settings: CinedexSettings,
    read_only: bool = True,
) -> sqlite3.Connection:
    """Open a configured SQLite connection to the catalogue.

    Args:
        settings: Settings providing the database path and pragmas
        read_only: Open the file in read-only URI mode

    Returns:
        Open connection using ``sqlite3.Row`` rows

    Raises:
        DatabaseError: If a read-only database does not exist or cannot be opened
    """
    db_path = Path(settings.database_path)
    if read_only and not db_path.exists():
        raise DatabaseError(
            message=f"Database not found at {db_path}",
            hint="Run 'cinedex init' or point --db-path at an existing catalogue",
            details={"path": str(db_path)},
        )

    try:
        if read_only:
            conn = sqlite3.connect(
                f"file:{db_path.resolve()}?mode=ro",
                uri=True,
                timeout=settings.database_timeout,
                check_same_thread=False,
            )
        else:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(
                str(db_path),
                timeout=settings.database_timeout,
                check_same_thread=False,
            )
    except sqlite3.Error as e:
        raise DatabaseError(
            message=f"Could not open database: {e}",
            hint="Check that the file is a SQLite database and is readable",
            details={"path": str(db_path)},
        ) from e

    if read_only:
        conn.execute("PRAGMA query_only = ON")
    conn.execute(f"PRAGMA cache_size = {settings.database_cache_size}")
    conn.execute(f"PRAGMA temp_store = {settings.database_temp_store}")
    conn.row_factory = sqlite3.Row

    if settings.fuzzy_matching:
        register_similarity(conn)
    return conn


@contextmanager
def open_store(
    settings: CinedexSettings,
    read_only: bool = True,
) -> Generator[Store, None, None]:
    """Open a store for the duration of a ``with`` block.

    Args:
        settings: Settings providing the database path and pragmas
        read_only: Open the file in read-only URI mode

    Yields:
        Store wrapping the open connection
    """
    conn = connect(settings, read_only=read_only)
    logger.debug(
        "Opened catalogue",
        path=str(settings.database_path),
        read_only=read_only,
        fuzzy=settings.fuzzy_matching,
    )
    try:
        yield Store(conn)
    finally:
        with suppress(sqlite3.Error):
            conn.close()
