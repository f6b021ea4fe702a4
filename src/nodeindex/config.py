"""Configuration loading for the refresh pipeline."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from nodeindex.errors import ConfigError

__all__ = ["Config", "parse_custom_node_paths", "ENV_CUSTOM_NODE_PATHS", "ENV_NODE_DB_PATH"]

ENV_CUSTOM_NODE_PATHS = "CUSTOM_NODE_PATHS"
ENV_NODE_DB_PATH = "NODE_DB_PATH"

# Environment variable -> dot-path key
_ENV_KEYS: dict[str, str] = {
    ENV_CUSTOM_NODE_PATHS: "custom_nodes.paths",
    ENV_NODE_DB_PATH: "store.path",
}


def parse_custom_node_paths(value: str | None) -> list[str]:
    """Split a comma-separated path list, dropping blank segments."""
    if not value or not value.strip():
        return []
    return [p.strip() for p in value.split(",") if p.strip()]


class Config:
    """Configuration accessor with dot-path key support."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load configuration from a YAML mapping file."""
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(message=f"Cannot read config file {path}: {e}") from e
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in config file: {path}") from e

        if parsed is None:
            return cls()
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Config file must be a YAML mapping: {path}")
        return cls(parsed)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, base: Config | None = None) -> Config:
        """Build a Config from environment variables, overlaying ``base`` if given.

        Only variables that are present and non-empty override ``base``.
        """
        environ = os.environ if environ is None else environ
        data = copy.deepcopy(base._data) if base is not None else {}
        config = cls(data)
        for env_name, key in _ENV_KEYS.items():
            value = environ.get(env_name)
            if value is not None and value.strip():
                config.set(key, value)
        return config

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-path key, creating intermediate mappings."""
        parts = key.split(".")
        current = self._data
        for part in parts[:-1]:
            nxt = current.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                current[part] = nxt
            current = nxt
        current[parts[-1]] = value

    def custom_node_paths(self) -> list[str]:
        """Return the configured custom node paths as a list.

        Accepts either a comma-separated string (the environment form) or a
        YAML list.
        """
        raw = self.get("custom_nodes.paths")
        if raw is None:
            return []
        if isinstance(raw, str):
            return parse_custom_node_paths(raw)
        if isinstance(raw, list):
            return [str(p).strip() for p in raw if str(p).strip()]
        raise ConfigError(message="custom_nodes.paths must be a string or a list")
