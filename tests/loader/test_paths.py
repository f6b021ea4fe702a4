"""Tests for custom path resolution: resolve_custom_paths()."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from nodeindex.loader.paths import is_wildcard_path, resolve_custom_paths


def _package(path: Path) -> Path:
    path.mkdir(parents=True)
    (path / "package.json").write_text("{}")
    return path


# === Direct paths ===


class TestDirectPaths:
    def test_package_directory_resolved(self, tmp_path: Path) -> None:
        """A directory holding a manifest becomes one source named after it."""
        pkg = _package(tmp_path / "n8n-nodes-foo")
        result = resolve_custom_paths([str(pkg)])
        assert len(result) == 1
        assert result[0].name == "n8n-nodes-foo"
        assert result[0].path == str(pkg)

    def test_missing_path_skipped(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A path that does not exist is skipped with a warning."""
        with caplog.at_level(logging.WARNING):
            result = resolve_custom_paths([str(tmp_path / "nope")])
        assert result == []
        assert "Path does not exist" in caplog.text

    def test_directory_without_manifest_excluded(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """An existing directory without package.json is excluded."""
        (tmp_path / "bare").mkdir()
        with caplog.at_level(logging.WARNING):
            result = resolve_custom_paths([str(tmp_path / "bare")])
        assert result == []
        assert "No package.json found" in caplog.text

    def test_paths_are_trimmed_and_blanks_dropped(self, tmp_path: Path) -> None:
        """Surrounding whitespace is ignored; empty specs contribute nothing."""
        pkg = _package(tmp_path / "pkg")
        result = resolve_custom_paths(["", "   ", f"  {pkg}  "])
        assert [s.path for s in result] == [str(pkg)]

    def test_relative_path_made_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Relative specs resolve against the working directory."""
        _package(tmp_path / "rel")
        monkeypatch.chdir(tmp_path)
        result = resolve_custom_paths(["rel"])
        assert result[0].path == str(tmp_path / "rel")
        assert os.path.isabs(result[0].path)


# === Wildcard paths ===


class TestWildcardPaths:
    def test_children_with_manifest_resolved(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Only children holding a manifest are returned; others warn."""
        _package(tmp_path / "pkgs" / "a")
        (tmp_path / "pkgs" / "b").mkdir()
        with caplog.at_level(logging.WARNING):
            result = resolve_custom_paths([f"{tmp_path / 'pkgs'}/*"])
        assert [s.name for s in result] == ["a"]
        assert "Skipping b" in caplog.text

    def test_missing_parent_yields_nothing(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A wildcard whose parent does not exist contributes nothing and does not raise."""
        with caplog.at_level(logging.WARNING):
            result = resolve_custom_paths([f"{tmp_path / 'missing'}/*"])
        assert result == []
        assert "Parent directory does not exist" in caplog.text

    def test_children_sorted_by_name(self, tmp_path: Path) -> None:
        """Wildcard children are returned in name order."""
        for name in ("zeta", "alpha", "mid"):
            _package(tmp_path / "pkgs" / name)
        result = resolve_custom_paths([f"{tmp_path / 'pkgs'}/*"])
        assert [s.name for s in result] == ["alpha", "mid", "zeta"]

    def test_files_in_parent_ignored(self, tmp_path: Path) -> None:
        """Plain files next to packages are not candidates."""
        _package(tmp_path / "pkgs" / "a")
        (tmp_path / "pkgs" / "package.json").write_text("{}")
        result = resolve_custom_paths([f"{tmp_path / 'pkgs'}/*"])
        assert [s.name for s in result] == ["a"]

    def test_scan_failure_does_not_abort_other_specs(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """An unreadable parent is logged; later specs still resolve."""
        (tmp_path / "locked").mkdir()
        pkg = _package(tmp_path / "ok")
        with patch("nodeindex.loader.paths.os.scandir", side_effect=PermissionError("denied")):
            with caplog.at_level(logging.WARNING):
                result = resolve_custom_paths([f"{tmp_path / 'locked'}/*", str(pkg)])
        assert [s.path for s in result] == [str(pkg)]
        scan_records = [r for r in caplog.records if "Failed to scan directory" in r.getMessage()]
        assert [r.levelno for r in scan_records] == [logging.WARNING]


# === Ordering ===


class TestOrdering:
    def test_spec_order_preserved(self, tmp_path: Path) -> None:
        """Sources follow the order of the given specifications."""
        b = _package(tmp_path / "b")
        _package(tmp_path / "group" / "a")
        result = resolve_custom_paths([str(b), f"{tmp_path / 'group'}/*"])
        assert [s.name for s in result] == ["b", "a"]

    def test_every_result_has_manifest(self, tmp_path: Path) -> None:
        """Each returned path contains package.json at resolution time."""
        _package(tmp_path / "g" / "x")
        _package(tmp_path / "g" / "y")
        (tmp_path / "g" / "z").mkdir()
        for source in resolve_custom_paths([f"{tmp_path / 'g'}/*"]):
            assert (Path(source.path) / "package.json").is_file()


class TestIsWildcardPath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [("/a/b/*", True), ("/a/b", False), ("/a/b*", False), ("*", False)],
    )
    def test_detection(self, path: str, expected: bool) -> None:
        assert is_wildcard_path(path) is expected
