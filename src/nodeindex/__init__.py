"""nodeindex - Discovery, hot reload, and indexing of node packages."""

from __future__ import annotations

# Core
from nodeindex.loader import NodeLoader, resolve_custom_paths
from nodeindex.refresh import NodeRefresher, refresh_custom_nodes
from nodeindex.types import CustomNodeSource, LoadedNode, RefreshResult, SourceType

# Collaborators
from nodeindex.parser import NodeParser, NodeRecord
from nodeindex.storage import NodeRepository, NodeStore, find_database_path
from nodeindex.variants import ToolVariantGenerator

# Config
from nodeindex.config import Config, parse_custom_node_paths

# Errors
from nodeindex.errors import (
    ConfigError,
    EntryFileMissingError,
    ErrorCodes,
    ManifestError,
    NodeIndexError,
    NodeLoadError,
    NodeParseError,
    NoValidExportError,
    RepositoryError,
    StoreUnavailableError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "NodeLoader",
    "NodeRefresher",
    "refresh_custom_nodes",
    "resolve_custom_paths",
    # Types
    "CustomNodeSource",
    "LoadedNode",
    "RefreshResult",
    "SourceType",
    # Collaborators
    "NodeParser",
    "NodeRecord",
    "NodeRepository",
    "NodeStore",
    "ToolVariantGenerator",
    "find_database_path",
    # Config
    "Config",
    "parse_custom_node_paths",
    # Errors
    "ErrorCodes",
    "NodeIndexError",
    "ConfigError",
    "ManifestError",
    "EntryFileMissingError",
    "NodeLoadError",
    "NoValidExportError",
    "NodeParseError",
    "StoreUnavailableError",
    "RepositoryError",
]
