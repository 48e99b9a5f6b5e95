"""Typer application and CLI entry point for bld-kotlin.

This module wires together the top-level Typer application and its
sub-commands:

* ``compile`` -- compile ``src/main/kotlin`` then ``src/test/kotlin`` with
  ``kotlinc``.
* ``dokka`` -- generate API documentation with the Dokka CLI.
* ``locate`` -- show which ``kotlinc`` discovery would use.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`bld_kotlin.config`: Project configuration resolution.
    :mod:`bld_kotlin.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import contextlib
import logging
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

import typer

from bld_kotlin import __version__
from bld_kotlin.dokka.types import LoggingLevel, OutputFormat as DocFormat
from bld_kotlin.exceptions import BldKotlinError
from bld_kotlin.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="bld-kotlin",
    help="Compile Kotlin projects with kotlinc and document them with Dokka.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"bld-kotlin {__version__}")
        raise typer.Exit()


def _configure_logging(quiet: bool, verbose: bool) -> None:
    """Route library log records to stderr at a level matching the CLI flags."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    logging.getLogger("bld_kotlin").setLevel(level)


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
        False, "--verbose", "-v", help="Enable debug output, including full command lines."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print commands without running them."
    ),
    work_dir: Optional[Path] = typer.Option(
        None, "--work-dir", "-C", help="Project directory (defaults to the current directory)."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~bld_kotlin.output.OutputManager` and the
    logging level from CLI flags, and stores shared options (``dry_run``,
    ``work_dir``) in the Typer context so that sub-commands can read them
    via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
        dry_run: Print external tool invocations without running them.
        work_dir: Project root directory.
    """
    from bld_kotlin.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
    )
    set_output(output)
    _configure_logging(quiet, verbose)

    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["work_dir"] = work_dir


@contextlib.contextmanager
def _exit_on_error() -> Iterator[None]:
    """Turn a :class:`BldKotlinError` into an error message and exit code."""
    from bld_kotlin.output import error

    try:
        yield
    except BldKotlinError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("compile")
def compile_command(
    ctx: typer.Context,
    kotlinc: Optional[str] = typer.Option(
        None, "--kotlinc", help="Path to the kotlinc executable."
    ),
    kotlin_home: Optional[str] = typer.Option(
        None, "--kotlin-home", help="Kotlin compiler installation directory."
    ),
    plugins: Optional[list[str]] = typer.Option(
        None, "--plugin", "-p", help="Compiler plugin name (e.g. ALL_OPEN) or JAR path."
    ),
    jvm_options: Optional[list[str]] = typer.Option(
        None, "--jvm-option", "-J", help="Option for the JVM running kotlinc."
    ),
) -> None:
    """Compile the main and test Kotlin sources."""
    from bld_kotlin.config import resolve_project
    from bld_kotlin.kotlin.operation import CompileKotlinOperation

    with _exit_on_error():
        project = resolve_project(ctx.obj["work_dir"], kotlinc, kotlin_home)
        operation = (
            CompileKotlinOperation()
            .from_project(project)
            .with_dry_run(ctx.obj["dry_run"])
        )
        if plugins:
            operation.add_plugins(*plugins)
        if jvm_options:
            operation.add_jvm_options(*jvm_options)
        operation.execute()


@app.command("locate")
def locate_command(
    ctx: typer.Context,
    kotlinc: Optional[str] = typer.Option(
        None, "--kotlinc", help="Path to the kotlinc executable."
    ),
    kotlin_home: Optional[str] = typer.Option(
        None, "--kotlin-home", help="Kotlin compiler installation directory."
    ),
) -> None:
    """Show the kotlinc executable and Kotlin home discovery would use."""
    from bld_kotlin.config import resolve_project
    from bld_kotlin.kotlin.locator import locate_kotlinc
    from bld_kotlin.output import get_output

    with _exit_on_error():
        project = resolve_project(ctx.obj["work_dir"], kotlinc, kotlin_home)
        home = project.kotlin.kotlin_home
        location = locate_kotlinc(
            project.kotlin.kotlinc,
            project.resolve(home) if home is not None else None,
        )
        get_output().print_record(
            {
                "executable": location.executable,
                "home": str(location.home) if location.home is not None else None,
            },
            title="kotlinc",
        )


@app.command("dokka")
def dokka_command(
    ctx: typer.Context,
    output_format: Optional[DocFormat] = typer.Option(
        None, "--format", "-f", case_sensitive=False, help="Documentation format."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Output directory (defaults to build/dokka)."
    ),
    logging_level: Optional[LoggingLevel] = typer.Option(
        None, "--logging-level", case_sensitive=False, help="Dokka logging level."
    ),
    module_version: Optional[str] = typer.Option(
        None, "--module-version", help="Documented module version."
    ),
    fail_on_warning: bool = typer.Option(
        False, "--fail-on-warning", help="Fail if Dokka emits a warning."
    ),
    offline: bool = typer.Option(
        False, "--offline", help="Do not resolve package-lists online."
    ),
) -> None:
    """Generate API documentation with Dokka."""
    from bld_kotlin.config import resolve_project
    from bld_kotlin.dokka.operation import DokkaOperation

    with _exit_on_error():
        project = resolve_project(ctx.obj["work_dir"])
        operation = (
            DokkaOperation()
            .from_project(project)
            .with_dry_run(ctx.obj["dry_run"])
        )
        if output_format is not None:
            operation.output_format(output_format)
        if output_dir is not None:
            operation.with_output_dir(project.resolve(output_dir))
        if logging_level is not None:
            operation.with_logging_level(logging_level)
        if module_version is not None:
            operation.with_module_version(module_version)
        if fail_on_warning:
            operation.with_fail_on_warning()
        if offline:
            operation.with_offline_mode()
        operation.execute()


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from bld_kotlin.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``bld-kotlin`` console script.

    Unhandled :class:`~bld_kotlin.exceptions.BldKotlinError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

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
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from bld_kotlin.output import error

        if isinstance(exc, BldKotlinError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            logger.debug("Unhandled exception", exc_info=exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
