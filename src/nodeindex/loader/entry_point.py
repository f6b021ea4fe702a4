"""Import of node files and selection of the exported node class."""

from __future__ import annotations

import hashlib
import importlib.machinery
import importlib.util
import inspect
import os
import re
import sys
from types import ModuleType
from typing import Any

from nodeindex.errors import NodeLoadError, NoValidExportError

__all__ = [
    "DEFAULT_EXPORT",
    "NODE_FILE_SUFFIX",
    "derive_node_name",
    "import_node_file",
    "select_export",
    "resolve_node_class",
]

# Module attribute a node file may set to name its node class explicitly
DEFAULT_EXPORT = "node_class"
NODE_FILE_SUFFIX = ".node.py"

# "nodes/Slack/Slack.node.py" -> "Slack"
_NODE_NAME_RE = re.compile(r"[/\\]([^/\\]+)\.node\.py$")
_UNSAFE_CHARS_RE = re.compile(r"\W")


def derive_node_name(entry_path: str) -> str:
    """Derive the short node name from a declared entry path."""
    match = _NODE_NAME_RE.search(entry_path)
    if match:
        return match.group(1)
    return os.path.basename(entry_path).removesuffix(NODE_FILE_SUFFIX)


class _SourceOnlyLoader(importlib.machinery.SourceFileLoader):
    """Source loader that always compiles from disk, never from __pycache__."""

    def get_code(self, fullname: str) -> Any:
        return self.source_to_code(self.get_data(self.path), self.path)


def _package_name_for(package_dir: str) -> str:
    digest = hashlib.sha1(package_dir.encode("utf-8")).hexdigest()[:12]
    return f"nodeindex_node_pkg_{digest}"


def _ensure_package(name: str, directory: str, created: list[str]) -> None:
    """Register an empty package for ``directory`` so submodules resolve against it."""
    existing = sys.modules.get(name)
    if existing is not None and directory in list(getattr(existing, "__path__", None) or []):
        return
    spec = importlib.machinery.ModuleSpec(name, None, is_package=True)
    spec.submodule_search_locations = [directory]
    sys.modules[name] = importlib.util.module_from_spec(spec)
    created.append(name)


def _parent_package(file_path: str, package_dir: str | None, created: list[str]) -> str:
    """Register one package per directory from the package root down to the file's directory.

    Returns the name of the innermost package, which becomes the node
    module's parent so ``from .helpers import x`` and ``from ..shared import y``
    resolve inside the node package.
    """
    file_dir = os.path.dirname(file_path)
    root = os.path.abspath(package_dir) if package_dir else file_dir
    rel = os.path.relpath(file_dir, root)
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        root, rel = file_dir, os.curdir

    name = _package_name_for(root)
    directory = root
    _ensure_package(name, directory, created)
    if rel != os.curdir:
        for part in rel.split(os.sep):
            directory = os.path.join(directory, part)
            name = f"{name}.{_UNSAFE_CHARS_RE.sub('_', part)}"
            _ensure_package(name, directory, created)
    return name


def import_node_file(file_path: str, package_dir: str | None = None) -> ModuleType:
    """Import a node file by path and return the module object.

    The module is imported as a submodule of a synthetic package rooted at
    ``package_dir`` (the file's own directory when omitted), so relative
    imports of sibling helper modules work. Everything registered in
    ``sys.modules`` is removed again if execution fails.
    """
    file_path = os.path.abspath(file_path)
    created: list[str] = []
    parent = _parent_package(file_path, package_dir, created)
    stem = _UNSAFE_CHARS_RE.sub("_", os.path.basename(file_path).removesuffix(".py"))
    module_name = f"{parent}.{stem}"

    spec = importlib.util.spec_from_file_location(
        module_name, file_path, loader=_SourceOnlyLoader(module_name, file_path)
    )
    if spec is None or spec.loader is None:
        for name in created:
            sys.modules.pop(name, None)
        raise NodeLoadError(file_path=file_path, reason="cannot create import spec")

    mod = importlib.util.module_from_spec(spec)
    mod.__package__ = parent
    sys.modules[module_name] = mod
    try:
        spec.loader.exec_module(mod)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        for name in created:
            sys.modules.pop(name, None)
        raise NodeLoadError(file_path=file_path, reason=f"{type(exc).__name__}: {exc}") from exc
    return mod


def _first_export(mod: ModuleType) -> Any:
    exported = getattr(mod, "__all__", None)
    if exported is not None:
        for name in exported:
            value = getattr(mod, name, None)
            if value is not None:
                return value
        return None

    for name, value in vars(mod).items():
        if name.startswith("_"):
            continue
        if inspect.isclass(value) and value.__module__ == mod.__name__:
            return value
    return None


def select_export(mod: ModuleType, node_name: str) -> Any:
    """Pick the node class a module exports.

    Preference: the ``node_class`` attribute, then an attribute named
    ``node_name``, then the first export (first ``__all__`` entry, or the
    first public class defined in the module). Returns None if none match.
    """
    for candidate in (DEFAULT_EXPORT, node_name):
        value = getattr(mod, candidate, None)
        if value is not None:
            return value
    return _first_export(mod)


def resolve_node_class(file_path: str, node_name: str, package_name: str, package_dir: str | None = None) -> Any:
    """Import ``file_path`` and return its node class.

    Raises:
        NodeLoadError: If the file cannot be imported.
        NoValidExportError: If the module exports nothing usable.
    """
    mod = import_node_file(file_path, package_dir)
    node_class = select_export(mod, node_name)
    if node_class is None:
        raise NoValidExportError(node_name=node_name, package_name=package_name)
    return node_class
