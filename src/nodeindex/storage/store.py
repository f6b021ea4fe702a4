"""SQLite node store: location, opening, and schema."""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING, Any

from nodeindex.errors import StoreUnavailableError

if TYPE_CHECKING:
    from nodeindex.config import Config

logger = logging.getLogger(__name__)

__all__ = ["NodeStore", "find_database_path", "DEFAULT_DB_NAME"]

DEFAULT_DB_NAME = "nodes.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS nodes (
    node_type        TEXT PRIMARY KEY,
    package_name     TEXT,
    display_name     TEXT NOT NULL,
    source_type      TEXT NOT NULL DEFAULT 'official',
    source_path      TEXT,
    is_ai_tool       INTEGER NOT NULL DEFAULT 0,
    is_trigger       INTEGER NOT NULL DEFAULT 0,
    is_tool_variant  INTEGER NOT NULL DEFAULT 0,
    tool_variant_of  TEXT,
    has_tool_variant INTEGER NOT NULL DEFAULT 0,
    data             TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_nodes_source_type ON nodes(source_type);
"""


def find_database_path(config: Config | None = None, cwd: str | Path | None = None) -> str:
    """Locate an existing node database file.

    Checks ``store.path`` from config first, then ``<cwd>/data/nodes.db``,
    then ``data/nodes.db`` next to the project root.

    Raises:
        StoreUnavailableError: If none of the candidates exists.
    """
    candidates: list[Path] = []
    configured = config.get("store.path") if config is not None else None
    if configured:
        candidates.append(Path(configured))
    base = Path(cwd) if cwd is not None else Path.cwd()
    candidates.append(base / "data" / DEFAULT_DB_NAME)
    candidates.append(Path(__file__).resolve().parents[3] / "data" / DEFAULT_DB_NAME)

    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)

    raise StoreUnavailableError(
        message=(
            f"Database {DEFAULT_DB_NAME} not found (checked: {', '.join(str(c) for c in candidates)}). "
            "Build the node database first."
        )
    )


class NodeStore:
    """An open handle on a SQLite node database."""

    def __init__(self, connection: sqlite3.Connection, path: str) -> None:
        self._connection = connection
        self.path = path
        self._closed = False

    @classmethod
    def open(cls, path: str | Path) -> NodeStore:
        """Open an existing node database.

        Raises:
            StoreUnavailableError: If the file is missing or is not a usable
                SQLite database.
        """
        path = str(path)
        if not os.path.isfile(path):
            raise StoreUnavailableError(message=f"Node database not found: {path}", store_path=path)

        connection = sqlite3.connect(path)
        try:
            connection.execute("PRAGMA schema_version").fetchone()
            connection.executescript(_SCHEMA)
        except sqlite3.DatabaseError as e:
            connection.close()
            raise StoreUnavailableError(
                message=f"Cannot open node database {path}: {e}", store_path=path, cause=e
            ) from e
        logger.debug("Opened node database %s", path)
        return cls(connection, path)

    @classmethod
    def create(cls, path: str | Path) -> NodeStore:
        """Create (or open) a node database, initialising its schema."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(str(path))
        connection.executescript(_SCHEMA)
        return cls(connection, str(path))

    @property
    def connection(self) -> sqlite3.Connection:
        if self._closed:
            raise StoreUnavailableError(message=f"Node database is closed: {self.path}", store_path=self.path)
        return self._connection

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if not self._closed:
            self._connection.close()
            self._closed = True

    def __enter__(self) -> NodeStore:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
