"""Known Kotlin compiler plugins bundled with the ``kotlinc`` distribution."""

from __future__ import annotations

import enum


class CompilerPlugin(str, enum.Enum):
    """Compiler plugins shipped in ``<kotlin home>/lib``.

    The member name is the symbolic identifier users configure (for example
    ``"LOMBOK"`` in ``bld-kotlin.json``); the value is the JAR filename the
    identifier resolves to.
    """

    ALL_OPEN = "allopen-compiler-plugin.jar"
    ASSIGNMENT = "assignment-compiler-plugin.jar"
    COMPOSE = "compose-compiler-plugin.jar"
    KOTLIN_IMPORTS_DUMPER = "kotlin-imports-dumper-compiler-plugin.jar"
    KOTLINX_SERIALIZATION = "kotlinx-serialization-compiler-plugin.jar"
    KOTLIN_SERIALIZATION = "kotlin-serialization-compiler-plugin.jar"
    LOMBOK = "lombok-compiler-plugin.jar"
    NOARG = "noarg-compiler-plugin.jar"
    POWER_ASSERT = "power-assert-compiler-plugin.jar"
    SAM_WITH_RECEIVER = "sam-with-receiver-compiler-plugin.jar"

    @property
    def jar(self) -> str:
        """The plugin JAR filename."""
        return self.value
