"""cachecell -- disk-backed memoisation for slow or unreliable lookups.

A :class:`~cachecell.cache.CacheCell` wraps one refresh operation (a network
call, a slow subprocess) and persists its result as JSON in the user's cache
directory. Reads return the fresh value when the refresh works, the last
stored value when it does not, and a bootstrap seed when nothing has been
stored yet.

Typical use::

    from cachecell import CacheCell

    cell = CacheCell(fetch_versions, "versions.json", ttl_ms=3_600_000)
    versions = await cell.read()

Modules:
    cache: The :class:`~cachecell.cache.CacheCell` implementation.
    config: Cache root directory resolution.
    models: Pydantic models for cell configuration and diagnostics.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes for the ``cachecell`` command.
    app: Typer command-line interface for inspecting and clearing cells.
    output: stdout/stderr formatting for the command-line interface.
"""

__version__ = "0.1.0"

import logging  # noqa: E402

logging.getLogger(__name__).addHandler(logging.NullHandler())

from cachecell.cache import CacheCell, is_stale  # noqa: E402
from cachecell.config import get_cache_dir  # noqa: E402
from cachecell.exceptions import (  # noqa: E402
    BootstrapImportError,
    CacheCellError,
    CacheUnavailableError,
    ConfigError,
    DirectoryCreationError,
    ReadDecodeError,
    RefreshError,
    WriteError,
)
from cachecell.models import CacheSource, CacheStatus, CellConfig, ReadDiagnostics  # noqa: E402

__all__ = [
    "BootstrapImportError",
    "CacheCell",
    "CacheCellError",
    "CacheSource",
    "CacheStatus",
    "CacheUnavailableError",
    "CellConfig",
    "ConfigError",
    "DirectoryCreationError",
    "ReadDecodeError",
    "ReadDiagnostics",
    "RefreshError",
    "WriteError",
    "get_cache_dir",
    "is_stale",
]
