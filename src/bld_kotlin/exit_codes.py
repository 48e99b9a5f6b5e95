"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~bld_kotlin.exceptions.BldKotlinError` subclass.
CI scripts and shell wrappers can inspect the exit code to tell a broken
configuration apart from a failed compilation without parsing stderr.

Example::

    $ bld-kotlin compile
    $ echo $?
    1   # EXIT_GENERIC_FAILURE -- kotlinc exited with a non-zero status
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, or an external tool exited non-zero."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an invalid project configuration."""

EXIT_TOOL_NOT_FOUND = 3
"""A required external tool (kotlinc, the Dokka CLI JAR) could not be found."""

EXIT_INTERRUPTED = 130
"""The user cancelled the command with Ctrl-C."""
