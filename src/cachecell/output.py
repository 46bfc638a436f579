"""Terminal output for the ``cachecell`` command.

Cached values, status reports and the cache root are written to stdout so
that ``$(cachecell dir)`` and ``cachecell --json show NAME | jq`` work.
Everything else (confirmations, warnings, errors, debug traces) goes to
stderr.

Three renderings are available: ``json`` for scripts, ``plain`` for pipes
(tab separated, no markup) and ``rich`` for interactive terminals. ``auto``
picks ``rich`` only when stdout is a TTY and colour is allowed. ``NO_COLOR``
and ``TERM=dumb`` disable colour the same way ``--no-color`` does.

:func:`~cachecell.app.main_callback` installs one :class:`OutputManager`
per invocation with :func:`set_output`; the module-level helpers below
delegate to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How values and reports are rendered on stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# level -> (prefix, rich style, hidden by --quiet)
_LEVELS: dict[str, tuple[str, str, bool]] = {
    "info": ("", "", True),
    "success": ("", "green", True),
    "warning": ("Warning: ", "yellow", False),
    "error": ("Error: ", "bold red", False),
    "debug": ("[debug] ", "dim", False),
}


class OutputManager:
    """Renders cache values and reports, and writes diagnostics.

    Args:
        format: Requested rendering. ``AUTO`` is resolved once, here.
        no_color: Strip colour and markup from both streams.
        quiet: Hide info and success messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        rich_stdout = self._format == OutputFormat.RICH
        self._stdout = Console(file=sys.stdout, no_color=self._no_color, force_terminal=rich_stdout)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_value(self, value: Any) -> None:
        """Write one cached value.

        JSON mode prints the value as indented JSON. Plain mode prints a
        mapping as ``key<TAB>value`` lines, a list one item per line, and
        a scalar on its own. Rich mode prints highlighted JSON.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps(value, indent=2))
        elif self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(_dumps(value, indent=2), "json", word_wrap=True))
        elif isinstance(value, dict):
            for key, item in value.items():
                self.print_data(f"{key}\t{_cell_text(item)}")
        elif isinstance(value, list):
            for item in value:
                self.print_data(_cell_text(item))
        else:
            self.print_data(_cell_text(value))

    def print_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows of a report.

        JSON mode emits a list of objects keyed by ``headers`` and keeps
        each value's JSON type. Plain mode emits a header line and one tab
        separated line per row. Rich mode draws a table.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps([dict(zip(headers, row)) for row in rows], indent=2))
            return

        text_rows = [[_cell_text(item) for item in row] for row in rows]
        if self._format == OutputFormat.PLAIN:
            for line in [list(headers), *text_rows]:
                self.print_data("\t".join(line))
            return

        table = Table(*headers, title=title, header_style="bold cyan")
        for row in text_rows:
            table.add_row(*row)
        self._stdout.print(table)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        self._diagnostic("info", message)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def warning(self, message: str) -> None:
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        self._diagnostic("error", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic("debug", message)

    def _diagnostic(self, level: str, message: str) -> None:
        prefix, style, quietable = _LEVELS[level]
        if quietable and self._quiet:
            return
        if self._no_color or not style:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"{prefix}{message}", style=style, markup=False, highlight=False)


def _dumps(value: Any, indent: Optional[int] = None) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=False, default=str)


def _cell_text(value: Any) -> str:
    return value if isinstance(value, str) else _dumps(value)


def _is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to anything, or a dumb terminal."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def print_value(value: Any) -> None:
    get_output().print_value(value)


def print_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
