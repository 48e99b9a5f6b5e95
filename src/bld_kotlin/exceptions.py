"""Exception hierarchy for bld-kotlin.

All exceptions inherit from :class:`BldKotlinError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`bld_kotlin.exit_codes`.
The top-level error handler in :func:`bld_kotlin.app.main` catches
``BldKotlinError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    BldKotlinError (exit 1)
    +-- ConfigError              (exit 2)
    +-- ToolNotFoundError        (exit 3)
    +-- ExitStatusError          (exit 1)
        +-- KotlincNotFoundError (exit 3)
"""

from __future__ import annotations

from typing import Optional

from bld_kotlin.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_TOOL_NOT_FOUND,
)


class BldKotlinError(Exception):
    """Base exception for all bld-kotlin errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`bld_kotlin.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(BldKotlinError):
    """Raised for configuration problems (no project, bad work directory, invalid project file)."""

    exit_code = EXIT_INVALID_USAGE


class ToolNotFoundError(BldKotlinError):
    """Raised when a required tool JAR is missing or ambiguous in ``lib/bld``."""

    exit_code = EXIT_TOOL_NOT_FOUND


class ExitStatusError(BldKotlinError):
    """Raised when an operation fails with a non-zero exit condition.

    Covers directory-creation failures, subprocess launch errors and
    non-zero exit codes from ``kotlinc`` or the Dokka CLI. Only the
    zero/non-zero distinction is meaningful; ``status`` is kept for
    diagnostics.

    Args:
        message: Human-readable error description.
        status: Exit status of the child process, or ``None`` when the
            process never ran.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class KotlincNotFoundError(ExitStatusError):
    """Raised when an explicit Kotlin home does not contain a ``kotlinc`` executable."""

    exit_code = EXIT_TOOL_NOT_FOUND
