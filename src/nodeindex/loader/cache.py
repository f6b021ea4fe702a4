"""Module cache invalidation for hot-reloading node packages."""

from __future__ import annotations

import importlib
import logging
import os
import sys
from types import ModuleType

logger = logging.getLogger(__name__)

__all__ = ["invalidate_package_cache", "evict_file"]


def _module_origin(module: ModuleType | None) -> str | None:
    """Return the source file a cached module was loaded from, if any."""
    if module is None:
        return None
    origin = getattr(module, "__file__", None)
    if origin is None:
        spec = getattr(module, "__spec__", None)
        origin = getattr(spec, "origin", None)
    if not isinstance(origin, str):
        # Directory-only packages, such as those registered for node files
        search_path = getattr(module, "__path__", None)
        if isinstance(search_path, list) and search_path:
            origin = search_path[0]
    if not isinstance(origin, str) or not os.path.isabs(origin):
        return None
    return origin


def _evict(predicate) -> int:
    # Snapshot: sys.modules must not change size during iteration
    snapshot = list(sys.modules.items())
    doomed = {name for name, mod in snapshot if predicate(_module_origin(mod))}
    # Submodules go with their package
    prefixes = tuple(f"{name}." for name in doomed)
    if prefixes:
        doomed.update(name for name, _ in snapshot if name.startswith(prefixes))
    for name in doomed:
        sys.modules.pop(name, None)
    return len(doomed)


def invalidate_package_cache(package_path: str) -> int:
    """Drop every cached module whose source file lies under ``package_path``.

    Mutates the process-wide ``sys.modules``; must finish before the
    package's files are imported again.

    Returns:
        Number of evicted modules.
    """
    root = os.path.abspath(package_path)
    prefix = root.rstrip(os.sep) + os.sep

    def under_root(origin: str | None) -> bool:
        return origin is not None and (origin == root or origin.startswith(prefix))

    count = _evict(under_root)
    importlib.invalidate_caches()
    if count:
        logger.debug("Evicted %d cached modules under %s", count, root)
    return count


def evict_file(file_path: str) -> int:
    """Drop cached modules loaded from exactly ``file_path``."""
    target = os.path.abspath(file_path)
    return _evict(lambda origin: origin == target)
