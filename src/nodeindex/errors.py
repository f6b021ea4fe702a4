"""Error hierarchy for the nodeindex pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "NodeIndexError",
    "ConfigError",
    "ManifestError",
    "EntryFileMissingError",
    "NodeLoadError",
    "NoValidExportError",
    "NodeParseError",
    "StoreUnavailableError",
    "RepositoryError",
    "ErrorCodes",
]


class NodeIndexError(Exception):
    """Base error for all nodeindex errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigError(NodeIndexError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class ManifestError(NodeIndexError):
    """Raised when a package manifest is missing, unreadable, or malformed."""

    def __init__(self, manifest_path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="MANIFEST_INVALID",
            message=f"Invalid manifest '{manifest_path}': {reason}",
            details={"manifest_path": manifest_path, "reason": reason},
            **kwargs,
        )

    @property
    def manifest_path(self) -> str:
        """Path of the offending manifest file."""
        return self.details["manifest_path"]


class EntryFileMissingError(NodeIndexError):
    """Raised when a declared node entry file does not exist on disk."""

    def __init__(self, file_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="ENTRY_FILE_MISSING",
            message=f"Node file not found: {file_path}",
            details={"file_path": file_path},
            **kwargs,
        )


class NodeLoadError(NodeIndexError):
    """Raised when a node file cannot be imported."""

    def __init__(self, file_path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="NODE_LOAD_ERROR",
            message=f"Failed to load node file '{file_path}': {reason}",
            details={"file_path": file_path, "reason": reason},
            **kwargs,
        )


class NoValidExportError(NodeIndexError):
    """Raised when an imported node file exports nothing usable."""

    def __init__(self, node_name: str, package_name: str, **kwargs: Any) -> None:
        super().__init__(
            code="NO_VALID_EXPORT",
            message=f"No valid export found for {node_name} in {package_name}",
            details={"node_name": node_name, "package_name": package_name},
            **kwargs,
        )


class NodeParseError(NodeIndexError):
    """Raised when metadata cannot be extracted from a node class."""

    def __init__(self, node_name: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="NODE_PARSE_ERROR",
            message=f"Cannot parse node '{node_name}': {reason}",
            details={"node_name": node_name, "reason": reason},
            **kwargs,
        )


class StoreUnavailableError(NodeIndexError):
    """Raised when the persisted node store cannot be located or opened."""

    def __init__(self, message: str, store_path: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            code="STORE_UNAVAILABLE",
            message=message,
            details={"store_path": store_path},
            **kwargs,
        )

    @property
    def store_path(self) -> str | None:
        """The store path that failed, if one was resolved."""
        return self.details["store_path"]


class RepositoryError(NodeIndexError):
    """Raised when a node record cannot be written or deleted."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="REPOSITORY_ERROR", message=message, **kwargs)


class ErrorCodes:
    """All nodeindex error codes as constants.

    Example:
        if error.code == ErrorCodes.STORE_UNAVAILABLE:
            run_rebuild()
    """

    CONFIG_INVALID = "CONFIG_INVALID"
    MANIFEST_INVALID = "MANIFEST_INVALID"
    ENTRY_FILE_MISSING = "ENTRY_FILE_MISSING"
    NODE_LOAD_ERROR = "NODE_LOAD_ERROR"
    NO_VALID_EXPORT = "NO_VALID_EXPORT"
    NODE_PARSE_ERROR = "NODE_PARSE_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    REPOSITORY_ERROR = "REPOSITORY_ERROR"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
