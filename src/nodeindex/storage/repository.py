"""Persistence of NodeRecords in the node store."""

from __future__ import annotations

import json
import logging
import sqlite3

from nodeindex.errors import RepositoryError
from nodeindex.parser import NodeRecord
from nodeindex.storage.store import NodeStore
from nodeindex.types import SourceType

logger = logging.getLogger(__name__)

__all__ = ["NodeRepository"]


class NodeRepository:
    """Reads and writes node records; upserts by node_type."""

    def __init__(self, store: NodeStore) -> None:
        self._store = store

    def save_node(self, record: NodeRecord) -> None:
        """Insert or replace ``record``.

        Raises:
            RepositoryError: If the record has no node_type or display_name,
                or the write fails.
        """
        if not record.node_type or not record.display_name:
            raise RepositoryError(message="Record requires node_type and display_name")

        source_type = record.source_type or SourceType.OFFICIAL
        data = record.model_dump_json()
        conn = self._store.connection
        try:
            with conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO nodes (
                        node_type, package_name, display_name, source_type, source_path,
                        is_ai_tool, is_trigger, is_tool_variant, tool_variant_of,
                        has_tool_variant, data
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.node_type,
                        record.package_name,
                        record.display_name,
                        SourceType(source_type).value,
                        record.source_path,
                        int(record.is_ai_tool),
                        int(record.is_trigger),
                        int(record.is_tool_variant),
                        record.tool_variant_of,
                        int(record.has_tool_variant),
                        data,
                    ),
                )
        except sqlite3.Error as e:
            raise RepositoryError(message=f"Failed to save {record.node_type}: {e}", cause=e) from e

    def delete_custom_nodes(self) -> int:
        """Delete every custom record in one statement. Returns the count removed."""
        conn = self._store.connection
        try:
            with conn:
                cursor = conn.execute("DELETE FROM nodes WHERE source_type = ?", (SourceType.CUSTOM.value,))
        except sqlite3.Error as e:
            raise RepositoryError(message=f"Failed to delete custom nodes: {e}", cause=e) from e
        return cursor.rowcount

    def get_node(self, node_type: str) -> NodeRecord | None:
        """Return the record stored for ``node_type``, or None."""
        row = self._store.connection.execute("SELECT data FROM nodes WHERE node_type = ?", (node_type,)).fetchone()
        if row is None:
            return None
        return NodeRecord.model_validate(json.loads(row[0]))

    def list_nodes(self, source_type: SourceType | str | None = None) -> list[NodeRecord]:
        """Return stored records ordered by node_type, optionally filtered by provenance."""
        conn = self._store.connection
        if source_type is None:
            rows = conn.execute("SELECT data FROM nodes ORDER BY node_type").fetchall()
        else:
            rows = conn.execute(
                "SELECT data FROM nodes WHERE source_type = ? ORDER BY node_type",
                (SourceType(source_type).value,),
            ).fetchall()
        return [NodeRecord.model_validate(json.loads(row[0])) for row in rows]

    def count_nodes(self, source_type: SourceType | str | None = None) -> int:
        conn = self._store.connection
        if source_type is None:
            row = conn.execute("SELECT COUNT(*) FROM nodes").fetchone()
        else:
            row = conn.execute("SELECT COUNT(*) FROM nodes WHERE source_type = ?", (SourceType(source_type).value,)).fetchone()
        return int(row[0])
