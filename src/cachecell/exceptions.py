"""Exception hierarchy for cachecell.

All exceptions inherit from :class:`CacheCellError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`cachecell.exit_codes`.
The top-level error handler in :func:`cachecell.app.main` catches
``CacheCellError`` and exits with the appropriate code.

Only two of these ever escape :meth:`~cachecell.cache.CacheCell.read`:
:class:`DirectoryCreationError` and :class:`CacheUnavailableError`. The rest
are captured while the cell walks its fallback chain and are exposed on
:attr:`~cachecell.cache.CacheCell.diagnostics`.

Subclass hierarchy::

    CacheCellError (exit 1)
    +-- ConfigError             (exit 2)
    +-- DirectoryCreationError  (exit 3)
    +-- CacheUnavailableError   (exit 4)
    +-- RefreshError            (exit 5)
    +-- ReadDecodeError         (exit 6)
    +-- WriteError              (exit 6)
    +-- BootstrapImportError    (exit 6)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from cachecell.exit_codes import (
    EXIT_CACHE_UNAVAILABLE,
    EXIT_DIRECTORY_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_IO_ERROR,
    EXIT_REFRESH_ERROR,
)


class CacheCellError(Exception):
    """Base exception for all cachecell errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`cachecell.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        path: The cache file (or directory) the error concerns, if any.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        exit_code: int | None = None,
    ):
        super().__init__(message)
        self.path = path
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(CacheCellError):
    """Raised for invalid cell configuration (empty or absolute file name, negative TTL)."""

    exit_code = EXIT_INVALID_USAGE


class DirectoryCreationError(CacheCellError):
    """Raised when the cache root cannot be created. Always fatal."""

    exit_code = EXIT_DIRECTORY_ERROR


class RefreshError(CacheCellError):
    """The refresher raised.

    Refreshers may raise this themselves; any other exception they raise is
    wrapped in one, with the original kept as ``__cause__``.
    """

    exit_code = EXIT_REFRESH_ERROR


class ReadDecodeError(CacheCellError):
    """The backing file was missing, unreadable, or not valid JSON."""

    exit_code = EXIT_IO_ERROR


class WriteError(CacheCellError):
    """A value could not be serialised or persisted, or the file could not be removed."""

    exit_code = EXIT_IO_ERROR


class BootstrapImportError(CacheCellError):
    """The bootstrap file could not be copied into the cache. Always swallowed."""

    exit_code = EXIT_IO_ERROR


class CacheUnavailableError(CacheCellError):
    """Raised by ``read()`` when no refreshed, cached, or bootstrapped value exists.

    Attributes:
        phase: ``"refresh"`` when a refresh was attempted and failed,
            ``"read"`` when the final disk read was what failed.
        cause: The captured :class:`RefreshError` or :class:`ReadDecodeError`.
    """

    exit_code = EXIT_CACHE_UNAVAILABLE

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        phase: str = "read",
        cause: Optional[CacheCellError] = None,
    ):
        super().__init__(message, path=path)
        self.phase = phase
        self.cause = cause
