"""Disk-backed memoisation of a single fallible value.

A :class:`CacheCell` wraps a *refresher* -- a slow, rate-limited or
unreliable operation -- and keeps its last good result as JSON in one file
under the cache root. Reading a cell walks a fixed degradation chain:

1. If the file is older than the TTL (or missing), call the refresher and
   persist what it returns.
2. If that produced nothing, decode the file from disk.
3. If the file was missing to begin with, it may first be seeded from a
   bootstrap file shipped alongside the application.

Only two failures escape: :class:`~cachecell.exceptions.DirectoryCreationError`
when the cache root cannot be created, and
:class:`~cachecell.exceptions.CacheUnavailableError` when every source in the
chain came up empty. Everything else is recorded on
:attr:`CacheCell.diagnostics`.

The file's modification time is the only freshness signal, and nothing is
held in memory between calls, so separate cells (or processes) pointed at
the same file see each other's writes. There is no locking; concurrent
refreshes race and the last writer wins. Writes go through a temp file and
``os.replace`` so readers never observe a partially written file.

Example::

    async def fetch_versions() -> dict:
        async with httpx.AsyncClient() as client:
            return (await client.get(VERSIONS_URL)).json()

    versions = CacheCell(fetch_versions, "versions.json", ttl_ms=3_600_000,
                         bootstrap_file=SEED_DIR / "versions.json")
    data = await versions.read()
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

from pydantic import ValidationError

from cachecell.config import ensure_dir, get_cache_dir
from cachecell.exceptions import (
    BootstrapImportError,
    CacheCellError,
    CacheUnavailableError,
    ConfigError,
    ReadDecodeError,
    RefreshError,
    WriteError,
)
from cachecell.models import CacheSource, CacheStatus, CellConfig, ReadDiagnostics

logger = logging.getLogger(__name__)

T = TypeVar("T")

Refresher = Callable[[], Union[T, Awaitable[T]]]


def is_stale(mtime: Optional[float], ttl_ms: int, now: float) -> bool:
    """Return True when a file last modified at *mtime* needs refreshing.

    Args:
        mtime: Modification time in seconds since the epoch, or ``None``
            for a file that does not exist. A missing file is stale for
            every TTL.
        ttl_ms: Freshness window in milliseconds.
        now: Current time in seconds since the epoch.

    A file exactly ``ttl_ms`` old is still fresh.
    """
    if mtime is None:
        return True
    return (now - mtime) * 1000 > ttl_ms


def _atomic_write(path: Path, data: bytes) -> None:
    """Write *data* to *path* via a sibling temp file and ``os.replace``."""
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def _stat_mtime(path: Path) -> Optional[float]:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def _copy_bytes(source: Path, target: Path) -> None:
    _atomic_write(target, source.read_bytes())


def _is_async_callable(func: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(
        getattr(func, "__call__", None)
    )


def _load_json(path: Path) -> Any:
    return json.loads(path.read_bytes())


def _dump_json(path: Path, value: Any) -> None:
    data = json.dumps(value, indent=2, ensure_ascii=False).encode("utf-8")
    _atomic_write(path, data)


E = TypeVar("E", bound=CacheCellError)


def _captured(error_cls: type[E], message: str, path: Path, exc: BaseException) -> E:
    """Build a diagnostic error chained to *exc* without raising it."""
    error = error_cls(message, path=path)
    error.__cause__ = exc
    return error


class CacheCell(Generic[T]):
    """One cached value backed by one JSON file.

    Args:
        refresher: Zero-argument callable producing the value. May be a
            coroutine function or a plain function; may raise. A plain
            function runs in a worker thread.
        file_name: File name relative to the cache root.
        ttl_ms: How long (milliseconds) a written file stays fresh. ``0``
            or ``None`` means every read attempts a refresh.
        bootstrap_file: Optional file whose raw bytes are copied in when the
            cache file does not exist yet.
        cache_dir: Cache root. Defaults to :func:`~cachecell.config.get_cache_dir`,
            resolved once here.

    Raises:
        ConfigError: If *file_name* or *ttl_ms* are invalid.
    """

    def __init__(
        self,
        refresher: Refresher[T],
        file_name: str,
        ttl_ms: Optional[int] = None,
        bootstrap_file: Optional[str | Path] = None,
        cache_dir: Optional[str | Path] = None,
    ) -> None:
        try:
            config = CellConfig(
                file_name=file_name,
                ttl_ms=ttl_ms or 0,
                bootstrap_file=bootstrap_file,
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid cache cell {file_name!r}: {exc}") from exc
        self._refresher = refresher
        self._config = config
        self._cache_dir = Path(cache_dir) if cache_dir is not None else get_cache_dir()
        self._path = self._cache_dir / config.file_name
        self._diagnostics = ReadDiagnostics()

    @classmethod
    def from_config(
        cls,
        refresher: Refresher[T],
        config: CellConfig,
        cache_dir: Optional[str | Path] = None,
    ) -> CacheCell[T]:
        """Build a cell from a :class:`~cachecell.models.CellConfig`."""
        return cls(
            refresher,
            config.file_name,
            ttl_ms=config.ttl_ms,
            bootstrap_file=config.bootstrap_file,
            cache_dir=cache_dir,
        )

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def path(self) -> Path:
        """The backing file."""
        return self._path

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def ttl_ms(self) -> int:
        return self._config.ttl_ms

    @property
    def bootstrap_file(self) -> Optional[Path]:
        return self._config.bootstrap_file

    @property
    def diagnostics(self) -> ReadDiagnostics:
        """What happened during the most recent ``read()`` or ``clear()``."""
        return self._diagnostics

    @property
    def last_read_error(self) -> Optional[ReadDecodeError]:
        return self._diagnostics.read_error

    @property
    def last_write_error(self) -> Optional[WriteError]:
        return self._diagnostics.write_error

    def __repr__(self) -> str:
        return f"CacheCell(path={str(self._path)!r}, ttl_ms={self.ttl_ms})"

    # ------------------------------------------------------------------ #
    # Public operations
    # ------------------------------------------------------------------ #

    async def read(self) -> T:
        """Return the freshest value available.

        Returns:
            The refreshed value when the file is stale and the refresher
            succeeds, otherwise the value decoded from disk.

        Raises:
            DirectoryCreationError: If the cache directory cannot be created.
            CacheUnavailableError: If the refresh (when attempted) and the
                disk read both failed. ``phase`` tells which failure is
                reported.
        """
        diagnostics = ReadDiagnostics()
        self._diagnostics = diagnostics

        await asyncio.to_thread(ensure_dir, self._path.parent)

        mtime = await asyncio.to_thread(_stat_mtime, self._path)
        if mtime is None and self._config.bootstrap_file is not None:
            await self._import_bootstrap(self._config.bootstrap_file, diagnostics)

        has_candidate = False
        candidate: Any = None

        diagnostics.stale = is_stale(mtime, self._config.ttl_ms, time.time())
        if diagnostics.stale:
            logger.debug("%s is stale, refreshing", self._path)
            try:
                candidate = await self._refresh()
                has_candidate = True
            except RefreshError as exc:
                diagnostics.refresh_error = exc
                logger.warning("Refresh failed for %s, falling back to disk: %s", self._path, exc)
            else:
                diagnostics.source = CacheSource.REFRESH
                await self._persist(candidate, diagnostics)

        if not has_candidate:
            try:
                candidate = await asyncio.to_thread(_load_json, self._path)
                has_candidate = True
                diagnostics.source = CacheSource.DISK
            except (OSError, ValueError, RecursionError) as exc:
                diagnostics.read_error = _captured(
                    ReadDecodeError, f"Unable to read {self._path}: {exc}", self._path, exc
                )

        if has_candidate:
            return candidate

        if diagnostics.refresh_error is not None:
            raise CacheUnavailableError(
                f"Unable to perform cache refresh for {self._path}: {diagnostics.refresh_error}",
                path=self._path,
                phase="refresh",
                cause=diagnostics.refresh_error,
            )
        raise CacheUnavailableError(
            f"Unable to read {self._path}. {diagnostics.read_error}",
            path=self._path,
            phase="read",
            cause=diagnostics.read_error,
        )

    async def clear(self) -> None:
        """Delete the backing file.

        Never raises: a failure (including the file already being gone) is
        recorded in :attr:`last_write_error`.
        """
        diagnostics = ReadDiagnostics()
        self._diagnostics = diagnostics
        try:
            await asyncio.to_thread(self._path.unlink)
        except OSError as exc:
            diagnostics.write_error = _captured(
                WriteError, f"Unable to remove {self._path}: {exc}", self._path, exc
            )
        else:
            logger.debug("Cleared %s", self._path)

    async def status(self) -> CacheStatus:
        """Report the backing file's freshness without refreshing or writing."""
        mtime = await asyncio.to_thread(_stat_mtime, self._path)
        now = time.time()
        if mtime is None:
            return CacheStatus(path=self._path, exists=False, ttl_ms=self.ttl_ms, stale=True)
        return CacheStatus(
            path=self._path,
            exists=True,
            modified_at=datetime.fromtimestamp(mtime, tz=timezone.utc),
            age_ms=int((now - mtime) * 1000),
            ttl_ms=self.ttl_ms,
            stale=is_stale(mtime, self.ttl_ms, now),
        )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    async def _refresh(self) -> T:
        """Invoke the refresher, normalising every failure to :class:`RefreshError`."""
        try:
            if _is_async_callable(self._refresher):
                result = self._refresher()
            else:
                result = await asyncio.to_thread(self._refresher)
            if inspect.isawaitable(result):
                result = await result
        except RefreshError:
            raise
        except Exception as exc:
            raise RefreshError(f"{type(exc).__name__}: {exc}", path=self._path) from exc
        return result

    async def _persist(self, value: Any, diagnostics: ReadDiagnostics) -> None:
        try:
            await asyncio.to_thread(_dump_json, self._path, value)
        except (OSError, TypeError, ValueError, RecursionError) as exc:
            diagnostics.write_error = _captured(
                WriteError, f"Unable to write {self._path}: {exc}", self._path, exc
            )
            logger.warning("Could not persist refreshed value to %s: %s", self._path, exc)
        else:
            logger.debug("Persisted refreshed value to %s", self._path)

    async def _import_bootstrap(self, source: Path, diagnostics: ReadDiagnostics) -> None:
        try:
            await asyncio.to_thread(_copy_bytes, source, self._path)
        except OSError as exc:
            diagnostics.bootstrap_error = _captured(
                BootstrapImportError,
                f"Unable to import bootstrap file {source}: {exc}",
                self._path,
                exc,
            )
            logger.debug("Bootstrap import from %s failed: %s", source, exc)
        else:
            diagnostics.bootstrapped = True
            logger.debug("Seeded %s from %s", self._path, source)
