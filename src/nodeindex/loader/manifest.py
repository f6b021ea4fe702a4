"""Package manifest (package.json) reading for node packages."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from nodeindex.errors import ManifestError

__all__ = [
    "MANIFEST_FILENAME",
    "MANIFEST_SECTION",
    "load_manifest",
    "package_name_from_manifest",
    "declared_nodes",
]

MANIFEST_FILENAME = "package.json"
MANIFEST_SECTION = "n8n"


def load_manifest(package_dir: str | Path) -> dict[str, Any]:
    """Read and parse the manifest of a package directory.

    Raises:
        ManifestError: If the file is missing, unreadable, not valid JSON,
            or not a JSON object.
    """
    manifest_path = Path(package_dir) / MANIFEST_FILENAME
    try:
        content = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ManifestError(str(manifest_path), "file not found") from e
    except OSError as e:
        raise ManifestError(str(manifest_path), f"cannot read file: {e}") from e

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestError(str(manifest_path), f"invalid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ManifestError(str(manifest_path), "manifest must be a JSON object")
    return parsed


def package_name_from_manifest(manifest: dict[str, Any], package_dir: str | Path) -> str:
    """Return the declared package name, or the directory name if absent."""
    name = manifest.get("name")
    if isinstance(name, str) and name.strip():
        return name
    return os.path.basename(os.path.normpath(str(package_dir)))


def declared_nodes(manifest: dict[str, Any]) -> Any:
    """Return the raw node declaration of the manifest's platform section.

    The value is either a list of relative entry paths or a mapping of node
    name to relative entry path. Callers check the shape they accept.
    Returns None when the section or its ``nodes`` key is absent.
    """
    section = manifest.get(MANIFEST_SECTION)
    if not isinstance(section, dict):
        return None
    return section.get("nodes")
