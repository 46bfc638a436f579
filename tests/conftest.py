"""Shared test fixtures for cachecell.

Provides an isolated cache root, helpers for writing cache files with a
chosen age, and output/logging resets so global state never leaks between
tests.
"""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable

import pytest

from cachecell.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner swaps those streams out and the
    test finishes, the cached references become stale.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers() -> None:
    """Remove the stderr handler ``--verbose`` attaches to the package logger."""
    yield
    logger = logging.getLogger("cachecell")
    for handler in list(logger.handlers):
        if handler.get_name() == "cachecell-cli":
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Cache root isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``XDG_CACHE_HOME`` at a fresh directory under tmp_path.

    The directory itself is not created, so tests also exercise the cell's
    own directory creation.
    """
    root = tmp_path / "cache"
    monkeypatch.setenv("XDG_CACHE_HOME", str(root))
    return root


@pytest.fixture
def write_cache_file() -> Callable[..., Path]:
    """Return a helper that writes JSON to a path and backdates its mtime.

    Usage::

        path = write_cache_file(cache_root / "x.json", {"v": 1}, age_seconds=120)
    """

    def _write(path: Path, data: Any, age_seconds: float = 0.0, raw: bool = False) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if raw:
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        if age_seconds:
            stamp = time.time() - age_seconds
            os.utime(path, (stamp, stamp))
        return path

    return _write


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
