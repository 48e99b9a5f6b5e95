"""bld-kotlin -- Compile Kotlin projects with kotlinc and document them with Dokka.

This package drives the external Kotlin toolchain for a conventionally laid
out project (``src/main/kotlin``, ``src/test/kotlin``, ``lib/compile`` ...).
It renders typed compiler options into ``kotlinc`` argument files, finds
``kotlinc`` across heterogeneous developer machines, compiles main then test
sources, and runs the Dokka CLI for API documentation.

Typical workflow::

    bld-kotlin compile            # build/main, then build/test
    bld-kotlin dokka --format html

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic project model and its Kotlin/Dokka settings.
    config: Project file loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    files: Source and JAR discovery helpers.
    kotlin: Compiler options, kotlinc discovery and the compile operation.
    dokka: Dokka source sets and the documentation operation.
"""

__version__ = "0.1.0"
