"""Tests for cachecell.models and the exception hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cachecell.exceptions import (
    BootstrapImportError,
    CacheCellError,
    CacheUnavailableError,
    ConfigError,
    DirectoryCreationError,
    ReadDecodeError,
    RefreshError,
    WriteError,
)
from cachecell.models import CacheSource, CellConfig, ReadDiagnostics


class TestCellConfig:
    def test_defaults(self) -> None:
        config = CellConfig(file_name="versions.json")
        assert config.ttl_ms == 0
        assert config.bootstrap_file is None

    def test_bootstrap_coerced_to_path(self) -> None:
        config = CellConfig(file_name="a.json", bootstrap_file="/opt/seed.json")
        assert config.bootstrap_file == Path("/opt/seed.json")

    def test_nested_relative_name_allowed(self) -> None:
        assert CellConfig(file_name="schemas/v2.json").file_name == "schemas/v2.json"

    @pytest.mark.parametrize("name", ["", " ", "/abs.json", "../up.json"])
    def test_rejects_bad_names(self, name: str) -> None:
        with pytest.raises(ValidationError):
            CellConfig(file_name=name)

    def test_rejects_negative_ttl(self) -> None:
        with pytest.raises(ValidationError):
            CellConfig(file_name="a.json", ttl_ms=-5)

    def test_frozen(self) -> None:
        config = CellConfig(file_name="a.json")
        with pytest.raises(ValidationError):
            config.ttl_ms = 10


class TestReadDiagnostics:
    def test_empty_by_default(self) -> None:
        diagnostics = ReadDiagnostics()
        assert diagnostics.source is None
        assert diagnostics.stale is False
        assert diagnostics.refresh_error is None
        assert diagnostics.read_error is None
        assert diagnostics.write_error is None
        assert diagnostics.bootstrap_error is None

    def test_holds_captured_errors(self) -> None:
        error = RefreshError("boom")
        diagnostics = ReadDiagnostics(source=CacheSource.DISK, refresh_error=error)
        assert diagnostics.refresh_error is error
        assert diagnostics.source == "disk"


class TestExceptions:
    @pytest.mark.parametrize(
        ("cls", "code"),
        [
            (CacheCellError, 1),
            (ConfigError, 2),
            (DirectoryCreationError, 3),
            (CacheUnavailableError, 4),
            (RefreshError, 5),
            (ReadDecodeError, 6),
            (WriteError, 6),
            (BootstrapImportError, 6),
        ],
    )
    def test_exit_codes(self, cls: type[CacheCellError], code: int) -> None:
        assert cls("x").exit_code == code
        assert issubclass(cls, CacheCellError)

    def test_exit_code_override(self) -> None:
        assert RefreshError("x", exit_code=9).exit_code == 9

    def test_unavailable_carries_phase_and_cause(self) -> None:
        cause = ReadDecodeError("bad json", path=Path("/c/a.json"))
        err = CacheUnavailableError("nope", path=Path("/c/a.json"), phase="read", cause=cause)
        assert err.phase == "read"
        assert err.cause is cause
        assert err.path == Path("/c/a.json")
