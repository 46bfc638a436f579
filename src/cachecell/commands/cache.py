"""Cache commands -- inspect and clear cache cells from the shell.

Each command builds a :class:`~cachecell.cache.CacheCell` for the given
file name under the active cache root (``--cache-dir`` or
:func:`~cachecell.config.get_cache_dir`). The command line has no refresher
to offer, so ``show`` always serves what is already on disk, or the
bootstrap file on a cold cache.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer

from cachecell.cache import CacheCell
from cachecell.config import get_cache_dir
from cachecell.exceptions import CacheCellError, CacheUnavailableError, RefreshError
from cachecell.output import (
    debug,
    error,
    info,
    print_data,
    print_table,
    print_value,
    success,
    warning,
)


def _no_refresh() -> NoReturn:
    raise RefreshError("no refresher is available from the command line")


def _cache_dir(ctx: typer.Context) -> Path:
    override = ctx.obj.get("cache_dir") if ctx.obj else None
    return Path(override) if override else get_cache_dir()


def _cell(
    ctx: typer.Context,
    name: str,
    ttl_ms: int = 0,
    bootstrap: Optional[Path] = None,
) -> CacheCell[Any]:
    try:
        return CacheCell(
            _no_refresh,
            name,
            ttl_ms=ttl_ms,
            bootstrap_file=bootstrap,
            cache_dir=_cache_dir(ctx),
        )
    except CacheCellError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def dir_command(ctx: typer.Context) -> None:
    """Print the cache root directory.

    The directory is not created. Set ``XDG_CACHE_HOME`` (or pass
    ``--cache-dir``) to move it.

    Example::

        cachecell dir
        ls "$(cachecell dir)"
    """
    print_data(str(_cache_dir(ctx)))


def show_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Cache file name, relative to the cache root."),
    bootstrap: Optional[Path] = typer.Option(
        None, "--bootstrap", "-b", help="Seed file copied in when the cache is empty."
    ),
) -> None:
    """Print the value stored in a cache file.

    Exits with code 4 when there is no cached value and no usable
    bootstrap file.

    Example::

        cachecell show versions.json
        cachecell --json show versions.json --bootstrap seed/versions.json
    """
    cell = _cell(ctx, name, bootstrap=bootstrap)
    try:
        value = asyncio.run(cell.read())
    except CacheUnavailableError as exc:
        error(f"No cached value at {cell.path}")
        debug(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except CacheCellError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if cell.diagnostics.bootstrapped:
        info(f"Seeded {cell.path} from {bootstrap}")
    print_value(value)


def status_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Cache file name, relative to the cache root."),
    ttl_ms: int = typer.Option(
        0, "--ttl-ms", min=0, help="Freshness window used to judge staleness."
    ),
) -> None:
    """Report whether a cache file exists and whether it is stale.

    Prints a one-row table; ``--json`` prints a one-element list of
    objects with ``path``, ``exists``, ``modified_at``, ``age_ms``,
    ``ttl_ms`` and ``stale``.

    Example::

        cachecell status versions.json --ttl-ms 3600000
    """
    cell = _cell(ctx, name, ttl_ms=ttl_ms)
    report = asyncio.run(cell.status()).model_dump(mode="json")
    print_table(list(report), [list(report.values())], title=name)


def clear_command(
    ctx: typer.Context,
    name: str = typer.Argument(help="Cache file name, relative to the cache root."),
) -> None:
    """Delete a cache file.

    Clearing a file that does not exist is not an error. Asks for
    confirmation unless ``--force`` is active.

    Example::

        cachecell clear versions.json
        cachecell --force clear versions.json
    """
    cell = _cell(ctx, name)
    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm(f"Delete {cell.path}?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    asyncio.run(cell.clear())
    failure = cell.last_write_error
    if failure is None:
        success(f"Cleared {cell.path}")
    elif isinstance(failure.__cause__, FileNotFoundError):
        info(f"Nothing to clear at {cell.path}")
    else:
        warning(str(failure))
