"""Resolution of custom node path specifications into package directories."""

from __future__ import annotations

import logging
import os
from typing import Sequence

from nodeindex.loader.manifest import MANIFEST_FILENAME
from nodeindex.types import CustomNodeSource

logger = logging.getLogger(__name__)

__all__ = ["resolve_custom_paths", "is_wildcard_path"]

_WILDCARD_SUFFIXES = ("/*", os.sep + "*")


def is_wildcard_path(path: str) -> bool:
    """Return True if ``path`` asks for its immediate child packages."""
    return path.endswith(_WILDCARD_SUFFIXES)


def _has_manifest(directory: str) -> bool:
    return os.path.isfile(os.path.join(directory, MANIFEST_FILENAME))


def _scan_children(parent_dir: str) -> list[CustomNodeSource]:
    sources: list[CustomNodeSource] = []
    with os.scandir(parent_dir) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError as e:
            logger.warning("OS error accessing %s: %s", entry.path, e)
            continue
        if not is_dir:
            continue

        full_path = os.path.join(parent_dir, entry.name)
        if _has_manifest(full_path):
            sources.append(CustomNodeSource(name=entry.name, path=full_path))
        else:
            logger.warning("Skipping %s: no %s found", entry.name, MANIFEST_FILENAME)
    return sources


def resolve_custom_paths(raw_paths: Sequence[str]) -> list[CustomNodeSource]:
    """Turn path specifications into package directories that hold a manifest.

    A specification ending in ``/*`` expands to every immediate child
    directory of its parent that contains a manifest. Anything else must be a
    package directory itself. Invalid specifications are logged and skipped;
    they never abort resolution of the remaining ones.

    Returned paths are absolute. Wildcard children are ordered by name.
    """
    sources: list[CustomNodeSource] = []

    for raw in raw_paths:
        trimmed = raw.strip()
        if not trimmed:
            continue

        if is_wildcard_path(trimmed):
            parent_dir = os.path.abspath(trimmed[:-2] or os.sep)
            if not os.path.isdir(parent_dir):
                logger.warning("Parent directory does not exist: %s", parent_dir)
                continue
            try:
                sources.extend(_scan_children(parent_dir))
            except OSError as e:
                logger.warning("Failed to scan directory %s: %s", parent_dir, e)
            continue

        package_dir = os.path.abspath(trimmed)
        if not os.path.exists(package_dir):
            logger.warning("Path does not exist: %s", package_dir)
            continue
        if not _has_manifest(package_dir):
            logger.warning("No %s found in: %s", MANIFEST_FILENAME, package_dir)
            continue
        sources.append(CustomNodeSource(name=os.path.basename(package_dir), path=package_dir))

    return sources
