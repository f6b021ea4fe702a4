"""Pipeline types: SourceType, LoadedNode, CustomNodeSource, RefreshResult."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

__all__ = [
    "SourceType",
    "LoadedNode",
    "CustomNodeSource",
    "RefreshResult",
]


class SourceType(str, Enum):
    """Provenance of a node implementation."""

    OFFICIAL = "official"
    COMMUNITY = "community"
    CUSTOM = "custom"


@dataclass
class LoadedNode:
    """A node class imported from disk, prior to metadata extraction."""

    package_name: str
    node_name: str
    node_class: Any
    source_type: SourceType = SourceType.OFFICIAL
    source_path: str | None = None


@dataclass
class CustomNodeSource:
    """A resolved custom package directory that held a manifest when resolved."""

    name: str
    path: str


@dataclass
class RefreshResult:
    """Summary of one refresh run."""

    deleted: int = 0
    loaded: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"deleted": self.deleted, "loaded": self.loaded, "errors": list(self.errors)}
