"""Tests for Config and custom path parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from nodeindex.config import Config, parse_custom_node_paths
from nodeindex.errors import ConfigError


class TestParseCustomNodePaths:
    @pytest.mark.parametrize("value", [None, "", "   \t\n  "])
    def test_blank_is_empty(self, value: str | None) -> None:
        assert parse_custom_node_paths(value) == []

    def test_single_path(self) -> None:
        assert parse_custom_node_paths("/path/to/nodes") == ["/path/to/nodes"]

    def test_multiple_paths_trimmed(self) -> None:
        assert parse_custom_node_paths("  /one  ,  /two  ") == ["/one", "/two"]

    def test_empty_segments_dropped(self) -> None:
        assert parse_custom_node_paths("/one,,/two,  ,/three") == ["/one", "/two", "/three"]

    def test_wildcards_kept(self) -> None:
        assert parse_custom_node_paths("/custom-nodes/*,/other/*") == ["/custom-nodes/*", "/other/*"]


class TestConfig:
    def test_dot_path_get(self) -> None:
        config = Config({"store": {"path": "/db"}})
        assert config.get("store.path") == "/db"
        assert config.get("store.missing", "x") == "x"

    def test_set_creates_intermediate(self) -> None:
        config = Config()
        config.set("custom_nodes.paths", "/a")
        assert config.get("custom_nodes.paths") == "/a"

    def test_from_env(self) -> None:
        config = Config.from_env({"CUSTOM_NODE_PATHS": "/a/*, /b", "NODE_DB_PATH": "/data/nodes.db"})
        assert config.custom_node_paths() == ["/a/*", "/b"]
        assert config.get("store.path") == "/data/nodes.db"

    def test_from_env_blank_does_not_override_base(self) -> None:
        base = Config({"custom_nodes": {"paths": ["/from/file"]}})
        config = Config.from_env({"CUSTOM_NODE_PATHS": "  "}, base=base)
        assert config.custom_node_paths() == ["/from/file"]

    def test_from_env_does_not_mutate_base(self) -> None:
        base = Config({"custom_nodes": {"paths": "/x"}})
        Config.from_env({"CUSTOM_NODE_PATHS": "/y"}, base=base)
        assert base.get("custom_nodes.paths") == "/x"

    def test_from_env_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CUSTOM_NODE_PATHS", "/env/path")
        assert Config.from_env().custom_node_paths() == ["/env/path"]

    def test_custom_node_paths_absent(self) -> None:
        assert Config().custom_node_paths() == []

    def test_custom_node_paths_invalid_type(self) -> None:
        with pytest.raises(ConfigError):
            Config({"custom_nodes": {"paths": 5}}).custom_node_paths()


class TestConfigFromFile:
    def test_yaml_file(self, tmp_path: Path) -> None:
        f = tmp_path / "nodeindex.yaml"
        f.write_text("custom_nodes:\n  paths:\n    - /srv/nodes/*\n    - ' '\nstore:\n  path: /srv/nodes.db\n")
        config = Config.from_file(f)
        assert config.custom_node_paths() == ["/srv/nodes/*"]
        assert config.get("store.path") == "/srv/nodes.db"

    def test_empty_file(self, tmp_path: Path) -> None:
        f = tmp_path / "empty.yaml"
        f.write_text("")
        assert Config.from_file(f).custom_node_paths() == []

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "bad.yaml"
        f.write_text("a: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            Config.from_file(f)

    def test_non_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            Config.from_file(f)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            Config.from_file(tmp_path / "absent.yaml")
