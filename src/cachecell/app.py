"""Typer application and CLI entry point for cachecell.

The ``cachecell`` command inspects and clears the cache files that
:class:`~cachecell.cache.CacheCell` instances maintain. It never refreshes
anything itself; refreshers belong to the applications that own the cells.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler, invokes the Typer app, and
maps :class:`~cachecell.exceptions.CacheCellError` to its exit code.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from cachecell import __version__
from cachecell.exit_codes import EXIT_GENERIC_FAILURE

_LOG_HANDLER_NAME = "cachecell-cli"

app = typer.Typer(
    name="cachecell",
    help="Inspect and clear disk-backed cache cells.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"cachecell {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send ``cachecell`` library logs to stderr when *verbose* is set."""
    if not verbose:
        return
    logger = logging.getLogger("cachecell")
    logger.setLevel(logging.DEBUG)
    if any(h.get_name() == _LOG_HANDLER_NAME for h in logger.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_LOG_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Cache root to use instead of the platform default."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~cachecell.output.OutputManager` and stores
    shared options (``cache_dir``, ``force``) in ``ctx.obj``.
    """
    from cachecell.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["cache_dir"] = cache_dir
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


from cachecell.commands.cache import (  # noqa: E402
    clear_command,
    dir_command,
    show_command,
    status_command,
)

app.command("dir")(dir_command)
app.command("show")(show_command)
app.command("status")(status_command)
app.command("clear")(clear_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``cachecell`` console script.

    Unhandled :class:`~cachecell.exceptions.CacheCellError` instances exit
    with the error's ``exit_code``; anything else exits with
    :data:`~cachecell.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from cachecell.exceptions import CacheCellError
        from cachecell.output import error

        error(str(exc))
        if isinstance(exc, CacheCellError):
            sys.exit(exc.exit_code)
        sys.exit(EXIT_GENERIC_FAILURE)
