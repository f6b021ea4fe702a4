"""SQLite persistence for node records."""

from __future__ import annotations

from nodeindex.storage.repository import NodeRepository
from nodeindex.storage.store import DEFAULT_DB_NAME, NodeStore, find_database_path

__all__ = ["DEFAULT_DB_NAME", "NodeRepository", "NodeStore", "find_database_path"]
