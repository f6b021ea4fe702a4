"""Loading of node classes from core and custom node packages."""

from __future__ import annotations

import importlib.util
import logging
import os
from typing import Any, Sequence

from nodeindex.errors import EntryFileMissingError, NodeIndexError, NoValidExportError
from nodeindex.loader.cache import evict_file, invalidate_package_cache
from nodeindex.loader.entry_point import derive_node_name, resolve_node_class
from nodeindex.loader.manifest import declared_nodes, load_manifest, package_name_from_manifest
from nodeindex.loader.paths import resolve_custom_paths
from nodeindex.types import CustomNodeSource, LoadedNode, SourceType

logger = logging.getLogger(__name__)

__all__ = ["NodeLoader", "CORE_PACKAGES"]

CORE_PACKAGES: tuple[str, ...] = ("nodeindex_nodes_base", "nodeindex_nodes_langchain")


def _describe(exc: Exception) -> str:
    return exc.message if isinstance(exc, NodeIndexError) else str(exc)


class NodeLoader:
    """Imports node classes declared by package manifests."""

    def __init__(self, core_packages: Sequence[str] | None = None) -> None:
        """Initialize the loader.

        Args:
            core_packages: Importable package names scanned by
                load_all_nodes(). Defaults to CORE_PACKAGES.
        """
        self.core_packages: tuple[str, ...] = tuple(core_packages) if core_packages is not None else CORE_PACKAGES

    # ----- Core packages -----

    def load_all_nodes(self) -> list[LoadedNode]:
        """Load every node declared by the core packages.

        A core package that cannot be found or read contributes no nodes;
        the others still load.
        """
        results: list[LoadedNode] = []
        for package in self.core_packages:
            try:
                package_dir = self._locate_package(package)
                logger.info("Loading package %s from %s", package, package_dir)
                manifest = load_manifest(package_dir)
                nodes = self._load_package_nodes(package, package_dir, manifest)
            except Exception as e:
                logger.error("Failed to load %s: %s", package, _describe(e))
                continue
            results.extend(nodes)
        return results

    @staticmethod
    def _locate_package(package: str) -> str:
        spec = importlib.util.find_spec(package)
        if spec is None:
            raise ModuleNotFoundError(f"No module named '{package}'")
        if spec.submodule_search_locations:
            return os.path.abspath(list(spec.submodule_search_locations)[0])
        if spec.origin:
            return os.path.dirname(os.path.abspath(spec.origin))
        raise ModuleNotFoundError(f"Package '{package}' has no importable location")

    def _load_package_nodes(self, package_name: str, package_dir: str, manifest: dict[str, Any]) -> list[LoadedNode]:
        declared = declared_nodes(manifest) or []
        if isinstance(declared, dict):
            entries = [(str(name), path) for name, path in declared.items()]
        elif isinstance(declared, list):
            entries = [(None, path) for path in declared]
        else:
            logger.warning("Unsupported node declaration in %s: %r", package_name, type(declared).__name__)
            return []
        logger.info("Found %d nodes in %s manifest", len(entries), package_name)

        nodes: list[LoadedNode] = []
        for declared_name, entry_path in entries:
            node = self._load_entry(
                package_name=package_name,
                package_dir=package_dir,
                entry_path=entry_path,
                node_name=declared_name,
                source_type=SourceType.OFFICIAL,
            )
            if node is not None:
                nodes.append(node)
        return nodes

    # ----- Custom packages -----

    def load_custom_nodes(self, paths: Sequence[str], errors: list[str] | None = None) -> list[LoadedNode]:
        """Load nodes from custom package directories.

        Args:
            paths: Path specifications, each a package directory or a parent
                directory suffixed with ``/*``.
            errors: Optional accumulator; a package that fails as a whole
                appends one message to it.

        Returns:
            Loaded nodes tagged custom, in source then declaration order.
        """
        results: list[LoadedNode] = []
        sources = resolve_custom_paths(paths)
        logger.info("Loading custom nodes from %d packages", len(sources))

        for source in sources:
            try:
                nodes = self._load_custom_package(source)
            except Exception as e:
                message = f"Failed to load custom package {source.name}: {_describe(e)}"
                logger.error(message)
                if errors is not None:
                    errors.append(message)
                continue
            results.extend(nodes)
        return results

    def _load_custom_package(self, source: CustomNodeSource) -> list[LoadedNode]:
        self.clear_cache(source.path)

        manifest = load_manifest(source.path)
        package_name = package_name_from_manifest(manifest, source.path)
        declared = declared_nodes(manifest)
        if not isinstance(declared, list) or not declared:
            logger.warning("No n8n.nodes list found in %s/package.json", package_name)
            return []

        logger.info("Loading custom package: %s", package_name)
        nodes: list[LoadedNode] = []
        for entry_path in declared:
            node = self._load_entry(
                package_name=package_name,
                package_dir=source.path,
                entry_path=entry_path,
                node_name=None,
                source_type=SourceType.CUSTOM,
                source_path=source.path,
            )
            if node is not None:
                nodes.append(node)
        return nodes

    def clear_cache(self, package_path: str) -> int:
        """Evict cached modules under ``package_path`` so the next load reads disk."""
        return invalidate_package_cache(package_path)

    # ----- Shared -----

    def _load_entry(
        self,
        package_name: str,
        package_dir: str,
        entry_path: Any,
        node_name: str | None,
        source_type: SourceType,
        source_path: str | None = None,
    ) -> LoadedNode | None:
        """Load a single declared entry; failures are logged and yield None."""
        if not isinstance(entry_path, str) or not entry_path.strip():
            logger.warning("Skipping invalid node entry %r in %s", entry_path, package_name)
            return None
        if node_name is None:
            node_name = derive_node_name(entry_path)

        full_path = os.path.abspath(os.path.join(package_dir, entry_path))
        try:
            if not os.path.isfile(full_path):
                raise EntryFileMissingError(file_path=full_path)
            if source_type is SourceType.CUSTOM:
                evict_file(full_path)
            node_class = resolve_node_class(full_path, node_name, package_name, package_dir)
        except (EntryFileMissingError, NoValidExportError) as e:
            logger.warning("%s", e.message)
            return None
        except Exception as e:
            logger.error("Failed to load node from %s/%s: %s", package_name, entry_path, _describe(e))
            return None

        logger.info("Loaded %s from %s", node_name, package_name)
        return LoadedNode(
            package_name=package_name,
            node_name=node_name,
            node_class=node_class,
            source_type=source_type,
            source_path=source_path,
        )
