"""Pydantic models shared across cachecell.

**Configuration** -- :class:`CellConfig` describes one cache cell (file
name, TTL, bootstrap file) and validates it before the cell touches disk.

**Reporting** -- :class:`ReadDiagnostics` records what happened during the
last ``read()`` or ``clear()`` on a cell, including every error that was
captured instead of raised. :class:`CacheStatus` is the freshness report
produced by ``status()``.
"""

from __future__ import annotations

import enum
from datetime import datetime
from pathlib import Path, PurePath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cachecell.exceptions import (
    BootstrapImportError,
    ReadDecodeError,
    RefreshError,
    WriteError,
)


class CellConfig(BaseModel):
    """Construction parameters for a :class:`~cachecell.cache.CacheCell`.

    Example::

        CellConfig(file_name="versions.json", ttl_ms=60_000,
                   bootstrap_file="/opt/app/seed/versions.json")
    """

    model_config = ConfigDict(frozen=True)

    file_name: str = Field(description="File name relative to the cache root")
    ttl_ms: int = Field(
        default=0,
        ge=0,
        description="Milliseconds a file stays fresh; 0 refreshes on every read",
    )
    bootstrap_file: Optional[Path] = Field(
        default=None,
        description="File whose raw bytes seed the cache when it is empty",
    )

    @field_validator("file_name")
    @classmethod
    def _relative_file_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("file_name must not be empty")
        pure = PurePath(value)
        if pure.is_absolute() or pure.anchor:
            raise ValueError(f"file_name must be relative, got {value!r}")
        if ".." in pure.parts:
            raise ValueError(f"file_name must stay inside the cache root, got {value!r}")
        return value


class CacheSource(str, enum.Enum):
    """Where the value returned by ``read()`` came from."""

    REFRESH = "refresh"
    DISK = "disk"


class ReadDiagnostics(BaseModel):
    """Outcome of the most recent operation on a cell.

    Replaced wholesale at the start of each ``read()`` and ``clear()``, so
    errors never accumulate across calls.

    Attributes:
        source: Where the returned value came from, or ``None`` if nothing
            was returned.
        stale: Whether the freshness check asked for a refresh.
        bootstrapped: Whether the bootstrap file was copied in this call.
        refresh_error: The refresher's failure, if it ran and failed.
        read_error: Failure reading or decoding the backing file.
        write_error: Failure persisting a refreshed value, or removing the
            file in ``clear()``.
        bootstrap_error: Failure copying the bootstrap file.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: Optional[CacheSource] = None
    stale: bool = False
    bootstrapped: bool = False
    refresh_error: Optional[RefreshError] = None
    read_error: Optional[ReadDecodeError] = None
    write_error: Optional[WriteError] = None
    bootstrap_error: Optional[BootstrapImportError] = None


class CacheStatus(BaseModel):
    """Freshness report for a cell's backing file."""

    path: Path
    exists: bool
    modified_at: Optional[datetime] = None
    age_ms: Optional[int] = None
    ttl_ms: int
    stale: bool
