"""Typer application and CLI entry point for tryout.

This module wires together the top-level Typer application and registers
the built-in commands (``info``, ``operations``, ``example``, ``curl``,
``call`` and the ``config`` group).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
A :class:`~tryout.exceptions.TryoutError` that escapes a command exits with
the error's ``exit_code``; any other exception is written to a crash log
under the data directory.

See Also:
    :mod:`tryout.config`: Global configuration and host selection.
    :mod:`tryout.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from tryout import __version__
from tryout.commands.config import config_app
from tryout.commands.inspect import example_command, info_command, operations_command
from tryout.commands.request import call_command, curl_command
from tryout.exit_codes import EXIT_GENERIC_FAILURE
from tryout.output import OutputFormat, OutputManager, set_output


app = typer.Typer(
    name="tryout",
    help="Render OpenAPI 3.0 operations as examples and curl commands, and try them out.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("info")(info_command)
app.command("operations")(operations_command)
app.command("example")(example_command)
app.command("curl")(curl_command)
app.command("call")(call_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"tryout {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~tryout.output.OutputManager` built from
    the CLI flags, falling back to ``output.format`` from the global config,
    and routes library logging to stderr.
    """
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    output.configure_logging()


def _configured_format() -> OutputFormat:
    """``output.format`` from the global config, or ``AUTO``.

    An unreadable config file is reported by the commands that need it.
    """
    from tryout.config import load_global_config
    from tryout.exceptions import ConfigError

    try:
        return OutputFormat(load_global_config().output.format)
    except (ConfigError, ValueError):
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from tryout.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``tryout`` console script.

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
        from tryout.exceptions import TryoutError
        from tryout.output import error

        if isinstance(exc, TryoutError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
