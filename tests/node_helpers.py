"""Helpers for writing node packages in tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

NODE_TEMPLATE = '''\
class {class_name}:
    description = {{
        "name": "{name}",
        "display_name": "{display_name}",
        "description": "{class_name} node",
        "version": 1,
        "group": {group!r},
        "usable_as_tool": {usable_as_tool},
    }}
'''


def node_source(
    class_name: str,
    name: str | None = None,
    display_name: str | None = None,
    group: list[str] | None = None,
    usable_as_tool: bool = False,
) -> str:
    """Return the source of a node file defining one node class."""
    return NODE_TEMPLATE.format(
        class_name=class_name,
        name=name or class_name[0].lower() + class_name[1:],
        display_name=display_name or class_name,
        group=group or ["transform"],
        usable_as_tool=usable_as_tool,
    )


def write_package(
    root: Path,
    dir_name: str,
    files: dict[str, str],
    name: str | None = None,
    nodes: Any = None,
) -> Path:
    """Write a node package directory with a package.json manifest.

    Args:
        root: Parent directory.
        dir_name: Package directory name.
        files: Relative file path -> source.
        name: Manifest package name (omitted when None).
        nodes: Manifest ``n8n.nodes`` value; defaults to the list of ``files``.
    """
    package_dir = root / dir_name
    package_dir.mkdir(parents=True, exist_ok=True)
    for rel, source in files.items():
        path = package_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)

    manifest: dict[str, Any] = {"version": "1.0.0"}
    if name is not None:
        manifest["name"] = name
    manifest["n8n"] = {"nodes": list(files) if nodes is None else nodes}
    (package_dir / "package.json").write_text(json.dumps(manifest))
    return package_dir
