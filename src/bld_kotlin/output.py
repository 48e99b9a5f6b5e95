"""User-facing output for the ``bld-kotlin`` command line.

Records that other tools may parse (``bld-kotlin locate``) go to stdout.
Status lines, dry-run previews and errors go to stderr; ``kotlinc`` and
Dokka inherit the terminal and print their own diagnostics. Colour follows
``--no-color``, ``NO_COLOR`` and ``TERM=dumb``.

Library code reaches the active :class:`OutputManager` through
:func:`get_output`; the CLI installs one per invocation with
:func:`set_output`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.table import Table


class OutputFormat(str, Enum):
    """How records are printed. ``AUTO`` picks ``RICH`` on a colour TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes records to stdout and status messages to stderr.

    Args:
        format: Record format; ``AUTO`` is resolved at construction.
        no_color: Print without styles, in addition to the environment rules.
        quiet: Drop ``info`` and ``success`` messages. Errors always print.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    def print_record(self, record: dict[str, Any], title: Optional[str] = None) -> None:
        """Print a flat key/value record to stdout.

        JSON prints one object, plain prints ``key<TAB>value`` lines and rich
        prints a two-column table titled *title*. ``None`` values are
        ``null`` in JSON and blank elsewhere.
        """
        if self._format == OutputFormat.JSON:
            print(json.dumps(record, indent=2, ensure_ascii=False, default=str), flush=True)
            return
        rows = [(key, "" if value is None else str(value)) for key, value in record.items()]
        if self._format == OutputFormat.PLAIN:
            for key, value in rows:
                print(f"{key}\t{value}", flush=True)
            return
        table = Table(title=title, show_header=False)
        table.add_column(style="bold cyan")
        table.add_column()
        for key, value in rows:
            table.add_row(key, value)
        self._stdout.print(table)

    def info(self, message: str) -> None:
        """Status line on stderr, printed verbatim (brackets are not markup)."""
        if not self._quiet:
            self._status(message, None)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._status(message, "green")

    def error(self, message: str) -> None:
        self._status(f"Error: {message}", "bold red")

    def _status(self, message: str, style: Optional[str]) -> None:
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, style=style, markup=False, highlight=False)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager so the next :func:`get_output` builds a new one."""
    global _output
    _output = None


def error(message: str) -> None:
    get_output().error(message)
