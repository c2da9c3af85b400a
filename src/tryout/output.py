"""Terminal output for tryout.

Two streams, kept apart (see `clig.dev <https://clig.dev/>`_):

* **stdout** carries only what a user might pipe: curl text, examples,
  response bodies and operation tables.
* **stderr** carries everything else: status lines, warnings, errors,
  suggestions and debug traces.

Rich rendering is used when stdout is a terminal and colour is allowed.
``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` all force plain text.

:func:`~tryout.app.main_callback` builds one :class:`OutputManager` and
installs it with :func:`set_output`; command code reaches it through
:func:`get_output` or the short module-level wrappers at the bottom of this
file.  Library modules use :mod:`logging` instead, and
:meth:`OutputManager.configure_logging` points the ``tryout`` logger at the
stderr console.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` picks ``RICH`` or ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# kind -> (plain template, Rich markup template, shown under --quiet)
_DIAGNOSTICS: dict[str, tuple[str, str, bool]] = {
    "info": ("{}", "{}", False),
    "success": ("{}", "[green]{}[/green]", False),
    "warning": ("Warning: {}", "[yellow]Warning:[/yellow] {}", True),
    "error": ("Error: {}", "[bold red]Error:[/bold red] {}", True),
    "suggest": ("→ {}", "[dim]→ {}[/dim]", False),
    "debug": ("[debug] {}", "[dim]\\[debug] {}[/dim]", True),
}


class OutputManager:
    """Owns the stdout and stderr consoles and the user's display flags.

    Args:
        format: Requested format for stdout data.
        no_color: Turn off colour and markup on both streams.
        quiet: Hide info, success and suggestion lines.
        verbose: Show debug lines and ``tryout.*`` debug log records.
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
        self._format = _resolve_format(format, self._no_color)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    def configure_logging(self) -> None:
        """Send ``tryout.*`` log records to stderr.

        Debug records are shown with ``--verbose``; otherwise only warnings
        and above get through.
        """
        logger = logging.getLogger("tryout")
        logger.handlers.clear()
        if self._no_color:
            handler: logging.Handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
        else:
            handler = RichHandler(console=self._stderr, show_time=False, show_path=False)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if self._verbose else logging.WARNING)
        logger.propagate = False

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any, content_type: str = "application/json") -> None:
        """Render an example or a response body on stdout.

        A string that parses as JSON is treated as structured data in JSON
        and Rich modes; plain mode prints strings untouched.
        """
        if self._format == OutputFormat.PLAIN:
            self.print_data(data if isinstance(data, str) else _dumps(data))
            return

        if isinstance(data, str):
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, TypeError):
                if self._format == OutputFormat.JSON:
                    self.print_data(data)
                else:
                    self._stdout.print(data, markup=False)
                return

        if self._format == OutputFormat.JSON:
            self.print_data(_dumps(data))
        else:
            self._stdout.print(Syntax(_dumps(data), "json", theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_code(self, text: str, lexer: str) -> None:
        """Print source text (a curl command, say) to stdout.

        Highlighted with *lexer* in Rich mode; verbatim otherwise, so that
        the text can be copied or piped unchanged.
        """
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(text, lexer, theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, a JSON array of objects, or TSV lines.

        *title* is only shown in Rich mode.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(
                json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False)
            )
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def suggest(self, message: str) -> None:
        """Print a next step for the user, e.g. the flag that fixes a warning."""
        self._emit("suggest", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit("debug", message)

    def _emit(self, kind: str, message: str) -> None:
        plain, markup, always = _DIAGNOSTICS[kind]
        if self._quiet and not always:
            return
        if self._no_color:
            print(plain.format(message), file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(message))


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    return OutputFormat.RICH if _is_tty() and not no_color else OutputFormat.PLAIN


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

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
    """Drop the installed instance; tests call this between cases."""
    global _output
    _output = None


def format_response(data: Any, content_type: str = "application/json") -> None:
    get_output().format_response(data, content_type)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
