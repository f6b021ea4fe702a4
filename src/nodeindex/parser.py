"""Metadata extraction from loaded node classes."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from nodeindex.errors import NodeParseError
from nodeindex.types import SourceType

logger = logging.getLogger(__name__)

__all__ = ["NodeRecord", "NodeParser"]


class NodeRecord(BaseModel):
    """Structured, persistable metadata for one node type.

    Unknown fields are kept as-is and persisted with the record.
    """

    model_config = ConfigDict(extra="allow")

    node_type: str | None = None
    display_name: str | None = None
    package_name: str | None = None
    description: str = ""
    version: str = "1"
    is_ai_tool: bool = False
    is_trigger: bool = False
    is_tool_variant: bool = False
    tool_variant_of: str | None = None
    has_tool_variant: bool = False
    source_type: SourceType | None = None
    source_path: str | None = None
    properties: list[dict[str, Any]] = Field(default_factory=list)


class NodeParser:
    """Builds NodeRecords from the ``description`` mapping of a node class."""

    def parse(self, node_class: Any, package_name: str) -> NodeRecord:
        """Extract a NodeRecord from a node class.

        Raises:
            NodeParseError: If the class exposes no description mapping.
        """
        desc = self._description_of(node_class)
        name = desc.get("name")
        group = desc.get("group") or []
        if isinstance(group, str):
            group = [group]

        version = desc.get("version", "1")
        if isinstance(version, list):
            version = str(max(version)) if version else "1"

        extra = {k: v for k, v in desc.items() if k not in _KNOWN_KEYS}
        return NodeRecord(
            node_type=f"{package_name}.{name}" if name else None,
            display_name=desc.get("display_name"),
            package_name=package_name,
            description=desc.get("description") or "",
            version=str(version),
            is_ai_tool=bool(desc.get("usable_as_tool", False)),
            is_trigger="trigger" in group or (isinstance(name, str) and name.endswith("Trigger")),
            properties=list(desc.get("properties") or []),
            **extra,
        )

    @staticmethod
    def _description_of(node_class: Any) -> Mapping[str, Any]:
        label = getattr(node_class, "__name__", repr(node_class))
        desc = getattr(node_class, "description", None)

        # Description set in __init__ only
        if desc is None and inspect.isclass(node_class):
            try:
                desc = getattr(node_class(), "description", None)
            except Exception as e:
                raise NodeParseError(node_name=label, reason=f"cannot instantiate: {e}") from e

        if isinstance(desc, BaseModel):
            desc = desc.model_dump()
        if not isinstance(desc, Mapping):
            raise NodeParseError(node_name=label, reason="missing 'description' mapping")
        return desc


_KNOWN_KEYS = frozenset(
    {
        "name",
        "display_name",
        "description",
        "version",
        "group",
        "usable_as_tool",
        "properties",
        # NodeRecord fields owned by the pipeline
        "node_type",
        "package_name",
        "is_ai_tool",
        "is_trigger",
        "is_tool_variant",
        "tool_variant_of",
        "has_tool_variant",
        "source_type",
        "source_path",
    }
)
