"""Refresh of custom nodes without a full database rebuild.

A refresh deletes every persisted custom record, re-imports the configured
custom packages from disk, and persists freshly parsed records for them.
Failures of individual packages or nodes are collected in the returned
RefreshResult; only an unavailable store aborts the run.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Callable, Protocol, Sequence

from nodeindex.config import Config
from nodeindex.errors import ConfigError, NodeIndexError, StoreUnavailableError
from nodeindex.loader import NodeLoader
from nodeindex.parser import NodeParser, NodeRecord
from nodeindex.storage import NodeRepository, NodeStore, find_database_path
from nodeindex.types import LoadedNode, RefreshResult, SourceType
from nodeindex.variants import ToolVariantGenerator

logger = logging.getLogger(__name__)

__all__ = ["NodeRefresher", "refresh_custom_nodes", "main"]


class Parser(Protocol):
    def parse(self, node_class: Any, package_name: str) -> NodeRecord: ...


class Repository(Protocol):
    def delete_custom_nodes(self) -> int: ...

    def save_node(self, record: NodeRecord) -> None: ...


class VariantGenerator(Protocol):
    def generate_tool_variant(self, record: NodeRecord) -> NodeRecord | None: ...


class Store(Protocol):
    def close(self) -> None: ...


class Loader(Protocol):
    def load_custom_nodes(self, paths: Sequence[str], errors: list[str] | None = None) -> list[LoadedNode]: ...


def _describe(exc: Exception) -> str:
    return exc.message if isinstance(exc, NodeIndexError) else str(exc)


class NodeRefresher:
    """Orchestrates the delete, reload, persist cycle for custom nodes."""

    def __init__(
        self,
        config: Config | None = None,
        loader: Loader | None = None,
        parser: Parser | None = None,
        variant_generator: VariantGenerator | None = None,
        locate_store: Callable[[], str] | None = None,
        open_store: Callable[[str], Store] | None = None,
        repository_factory: Callable[[Any], Repository] | None = None,
    ) -> None:
        """Initialize the refresher.

        Args:
            config: Source of ``custom_nodes.paths`` and ``store.path``.
                Defaults to Config.from_env().
            loader: Custom node loader. Defaults to NodeLoader().
            parser: Metadata extractor. Defaults to NodeParser().
            variant_generator: Tool variant generator. Defaults to
                ToolVariantGenerator().
            locate_store: Returns the store path. Defaults to
                find_database_path(config).
            open_store: Opens a store handle for a path. Defaults to
                NodeStore.open.
            repository_factory: Builds a repository over an open store.
                Defaults to NodeRepository.
        """
        self._config = config if config is not None else Config.from_env()
        self._loader = loader if loader is not None else NodeLoader()
        self._parser = parser if parser is not None else NodeParser()
        self._variant_generator = variant_generator if variant_generator is not None else ToolVariantGenerator()
        self._locate_store = locate_store if locate_store is not None else (lambda: find_database_path(self._config))
        self._open_store = open_store if open_store is not None else NodeStore.open
        self._repository_factory = repository_factory if repository_factory is not None else NodeRepository

    def refresh(self, override_paths: Sequence[str] | None = None) -> RefreshResult:
        """Run one refresh.

        Args:
            override_paths: Paths to use instead of the configured ones. An
                explicit empty sequence refreshes nothing.

        Returns:
            Counts of deleted and loaded records plus one error string per
            failed item.

        Raises:
            StoreUnavailableError: If the node store cannot be located or opened.
        """
        paths = list(override_paths) if override_paths is not None else self._config.custom_node_paths()
        if not paths:
            logger.info("No custom node paths configured. Set CUSTOM_NODE_PATHS to enable custom nodes.")
            return RefreshResult()

        logger.info("Refreshing custom nodes from: %s", ", ".join(paths))
        db_path = self._locate_store()
        logger.info("Using database: %s", db_path)
        store = self._open_store(db_path)

        result = RefreshResult()
        try:
            repository = self._repository_factory(store)

            try:
                result.deleted = repository.delete_custom_nodes()
            except Exception as e:
                result.errors.append(f"Failed to delete existing custom nodes: {_describe(e)}")
                logger.error("Failed to delete existing custom nodes: %s", _describe(e))
            logger.info("Deleted %d custom nodes", result.deleted)

            try:
                nodes = self._loader.load_custom_nodes(paths, errors=result.errors)
            except Exception as e:
                result.errors.append(f"Failed to load custom nodes: {_describe(e)}")
                logger.error("Failed to load custom nodes: %s", _describe(e))
                nodes = []
            logger.info("Found %d custom nodes", len(nodes))

            if not nodes:
                logger.warning("No custom nodes found in the specified paths")

            for node in nodes:
                self._process_node(node, repository, result)
        finally:
            store.close()

        self._log_summary(result)
        return result

    def _process_node(self, node: LoadedNode, repository: Repository, result: RefreshResult) -> None:
        """Parse and persist one node (plus its Tool variant); failures go to ``result.errors``."""
        try:
            record = self._parser.parse(node.node_class, node.package_name)

            if not record.node_type or not record.display_name:
                result.errors.append(f"Missing required fields for {node.node_name}")
                logger.warning("Missing required fields for %s", node.node_name)
                return

            record.source_type = node.source_type
            record.source_path = node.source_path

            if record.is_ai_tool and not record.is_trigger:
                variant = self._variant_generator.generate_tool_variant(record)
                if variant is not None:
                    record.has_tool_variant = True
                    variant.source_type = SourceType.CUSTOM
                    variant.source_path = node.source_path
                    try:
                        repository.save_node(variant)
                        result.loaded += 1
                        logger.info("Saved %s (Tool variant)", variant.node_type)
                    except Exception as e:
                        result.errors.append(f"Failed to save Tool variant for {node.node_name}: {_describe(e)}")
                        logger.error("Failed to save Tool variant for %s: %s", node.node_name, _describe(e))

            repository.save_node(record)
            result.loaded += 1
            logger.info("Saved %s", record.node_type)
        except Exception as e:
            result.errors.append(f"Failed to process {node.node_name}: {_describe(e)}")
            logger.error("Failed to process %s: %s", node.node_name, _describe(e))

    @staticmethod
    def _log_summary(result: RefreshResult) -> None:
        logger.info("Refresh complete: deleted %d, loaded %d, errors %d", result.deleted, result.loaded, len(result.errors))
        for error in result.errors:
            logger.info("  - %s", error)


def refresh_custom_nodes(override_paths: Sequence[str] | None = None, **kwargs: Any) -> RefreshResult:
    """Run a refresh with a NodeRefresher built from ``kwargs``."""
    return NodeRefresher(**kwargs).refresh(override_paths)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nodeindex-refresh",
        description="Reload custom node packages into the node database",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Custom package directory or parent directory ending in /* (overrides CUSTOM_NODE_PATHS)",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="YAML configuration file; CUSTOM_NODE_PATHS and NODE_DB_PATH override its values",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the refresh result as JSON",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry: ``python -m nodeindex [--config FILE] [PATH ...]``.

    Returns 0 on success, 1 if the node store is unavailable and 2 if the
    configuration file is invalid.
    """
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        base = Config.from_file(args.config) if args.config else None
        config = Config.from_env(base=base)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e.message)
        return 2

    try:
        result = refresh_custom_nodes(args.paths or None, config=config)
    except StoreUnavailableError as e:
        logger.error("Refresh failed: %s", e.message)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    return 0
