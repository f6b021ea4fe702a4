"""Node package discovery and loading.

Usage::

    from nodeindex.loader import NodeLoader

    loader = NodeLoader()
    nodes = loader.load_custom_nodes(["/srv/custom-nodes/*"])
"""

from __future__ import annotations

from nodeindex.loader.cache import evict_file, invalidate_package_cache
from nodeindex.loader.entry_point import derive_node_name, import_node_file, resolve_node_class, select_export
from nodeindex.loader.manifest import declared_nodes, load_manifest, package_name_from_manifest
from nodeindex.loader.node_loader import CORE_PACKAGES, NodeLoader
from nodeindex.loader.paths import is_wildcard_path, resolve_custom_paths

__all__ = [
    "CORE_PACKAGES",
    "NodeLoader",
    "declared_nodes",
    "derive_node_name",
    "evict_file",
    "import_node_file",
    "invalidate_package_cache",
    "is_wildcard_path",
    "load_manifest",
    "package_name_from_manifest",
    "resolve_custom_paths",
    "resolve_node_class",
    "select_export",
]
