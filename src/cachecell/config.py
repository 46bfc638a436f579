"""Cache directory resolution.

Every :class:`~cachecell.cache.CacheCell` stores its file under one root
directory, resolved here:

1. ``$XDG_CACHE_HOME`` when set and non-empty, used verbatim.
2. ``~/AppData/Local/CacheCell`` on Windows.
3. ``~/.cache/cachecell`` everywhere else.

:func:`get_cache_dir` is pure: it reads the environment and the platform
but never touches the filesystem, so the CLI can report the root without
creating it. :func:`ensure_dir` does the creation, and is what a cell
calls at the start of every read.
"""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path

from cachecell.exceptions import DirectoryCreationError

logger = logging.getLogger(__name__)

_APP_NAME = "cachecell"
_WINDOWS_APP_NAME = "CacheCell"
CACHE_DIR_ENV_VAR = "XDG_CACHE_HOME"
"""Environment variable naming an explicit cache root."""


def _is_windows_platform() -> bool:
    """Return True on the Windows family of platforms."""
    return platform.system() == "Windows"


def _xdg_cache_home() -> str:
    return os.environ.get(CACHE_DIR_ENV_VAR, "")


def get_cache_dir() -> Path:
    """Return the cache root directory without creating it.

    Returns:
        The override from ``$XDG_CACHE_HOME`` if present, otherwise the
        platform default under the user's home directory.
    """
    override = _xdg_cache_home()
    if override:
        return Path(override)
    if _is_windows_platform():
        return Path.home() / "AppData" / "Local" / _WINDOWS_APP_NAME
    return Path.home() / ".cache" / _APP_NAME


def ensure_dir(path: Path) -> Path:
    """Create *path* (and parents) if missing.

    Creation is idempotent: another process creating the directory first is
    not an error.

    Raises:
        DirectoryCreationError: If the directory cannot be created, or a
            non-directory already occupies the path.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationError(
            f"Cannot create cache directory {path}: {exc}", path=path
        ) from exc
    logger.debug("Cache directory ready: %s", path)
    return path
