"""Terminal output for the specscout CLI.

stdout carries results only: endpoint reports, document tables, JSON. In
``serve`` mode it carries MCP traffic and nothing else. Everything meant
for a human watching the process (status lines, warnings, log records)
goes to stderr.

Three formats are supported. ``rich`` is picked automatically for an
interactive terminal, ``plain`` when stdout is piped, and ``json`` on
request. ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` turn colour off.

:class:`OutputManager` is built once by the root Typer callback and
installed with :func:`set_output`; commands reach it through
:func:`get_output` or the thin module-level wrappers. Log records are
routed to the same stderr console by :func:`configure_logging`.
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
    """Output formats; ``AUTO`` becomes ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Holds the format preferences and the stdout/stderr consoles.

    Args:
        format: Requested format; ``AUTO`` is resolved on construction.
        no_color: Disable colour and Rich styling.
        quiet: Hide informational stderr messages (errors still show).
        verbose: Show debug messages on stderr.
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

        if format == OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def stderr_console(self) -> Console:
        """Console bound to stderr; log records are rendered here."""
        return self._stderr

    # ------------------------------------------------------------------ #
    # Results (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_report(self, text: str, **fields: Any) -> None:
        """Print an endpoint report.

        JSON mode emits ``{**fields, "report": text}``. The other modes
        print the text as-is; Rich markup is not interpreted because the
        report quotes raw YAML, which is full of square brackets.
        """
        if self._format == OutputFormat.JSON:
            self._print_json({**fields, "report": text})
        elif self._format == OutputFormat.RICH:
            self._stdout.print(text, markup=False, highlight=False)
        else:
            self.print_data(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, tab-separated lines, or a JSON array of objects."""
        if self._format == OutputFormat.JSON:
            self._print_json([dict(zip(headers, row)) for row in rows])
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def format_response(self, data: Any) -> None:
        """Print a dict/list: JSON text, ``key<TAB>value`` lines, or highlighted JSON."""
        if self._format == OutputFormat.JSON:
            self._print_json(data)
        elif self._format == OutputFormat.PLAIN:
            for line in _flatten(data):
                self.print_data(line)
        else:
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def _print_json(self, data: Any) -> None:
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, style="green")

    def warning(self, message: str) -> None:
        self._diagnostic(message, label="Warning:", style="yellow")

    def error(self, message: str) -> None:
        self._diagnostic(message, label="Error:", style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(message, label="[debug]", style="dim")

    def _diagnostic(self, message: str, label: str = "", style: str = "") -> None:
        text = f"{label} {message}" if label else message
        if self._no_color:
            print(text, file=sys.stderr, flush=True)
        elif style:
            self._stderr.print(text, style=style, markup=False, highlight=False)
        else:
            self._stderr.print(text, markup=False, highlight=False)


def _flatten(data: Any) -> list[str]:
    """Plain-mode lines for *data*; nested dicts become ``parent.child`` keys."""
    if isinstance(data, dict):
        lines = []
        for key, value in data.items():
            if isinstance(value, dict):
                lines.extend(f"{key}.{sub}\t{item}" for sub, item in value.items())
            else:
                lines.append(f"{key}\t{value}")
        return lines
    if isinstance(data, list):
        return [str(item) for item in data]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


def configure_logging(level: str = "info", console: Optional[Console] = None) -> None:
    """Send ``specscout.*`` log records to stderr through a :class:`RichHandler`.

    Args:
        level: ``debug``, ``info``, ``warning`` or ``error``; anything else
            means ``info``.
        console: Target console; the global manager's stderr console by
            default.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    handler = RichHandler(
        console=console or get_output().stderr_console,
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("specscout")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(numeric)
    logger.propagate = False


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


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
