"""Shared fixtures: on-disk node packages and module cache hygiene."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest

from node_helpers import write_package


@pytest.fixture
def pkgs_dir(tmp_path: Path) -> Path:
    """Parent directory for test node packages."""
    root = tmp_path / "pkgs"
    root.mkdir()
    return root


@pytest.fixture
def make_package(pkgs_dir: Path) -> Callable[..., Path]:
    """Factory writing node packages under ``pkgs_dir``."""

    def factory(dir_name: str, files: dict[str, str], **kwargs: Any) -> Path:
        return write_package(pkgs_dir, dir_name, files, **kwargs)

    return factory


@pytest.fixture(autouse=True)
def _drop_imported_nodes() -> Any:
    """Remove node modules imported by a test from sys.modules afterwards."""
    before = set(sys.modules)
    yield
    for name in list(sys.modules):
        if name not in before and name.startswith("nodeindex_node"):
            sys.modules.pop(name, None)
