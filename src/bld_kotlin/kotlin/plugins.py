"""Resolution of compiler plugin references to JAR paths.

A plugin reference is either the name of a :class:`CompilerPlugin` member
(``"LOMBOK"``), looked up under ``<kotlin home>/lib``, or a literal path to
a plugin JAR. Unresolvable references are logged and skipped; they never
abort a compilation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from bld_kotlin.kotlin.compiler_plugin import CompilerPlugin

logger = logging.getLogger(__name__)


def _known_plugin(reference: str) -> Optional[CompilerPlugin]:
    try:
        return CompilerPlugin[reference]
    except KeyError:
        return None


def resolve_plugins(
    plugins: Iterable[str], kotlin_home: Optional[Path] = None
) -> list[str]:
    """Resolve plugin references to absolute JAR paths.

    Args:
        plugins: Plugin references in order. The iterable is not modified.
        kotlin_home: Kotlin installation used for symbolic references.

    Returns:
        Absolute paths of the plugins that could be resolved, in input
        order.
    """
    resolved: list[str] = []
    for reference in plugins:
        plugin = _known_plugin(reference)
        if plugin is not None:
            if kotlin_home is None:
                logger.warning(
                    "Could not locate Kotlin home, skipping compiler plugin: %s",
                    reference,
                )
                continue
            jar = Path(kotlin_home) / "lib" / plugin.jar
            if jar.is_file():
                resolved.append(str(jar.absolute()))
            else:
                logger.warning("Could not locate compiler plugin: %s", jar.absolute())
            continue

        path = Path(reference)
        if path.is_file():
            resolved.append(str(path.absolute()))
        else:
            logger.warning("Could not locate compiler plugin: %s", path.absolute())
    return resolved


def plugin_args(paths: Iterable[str]) -> list[str]:
    """Render resolved plugin paths as ``-Xplugin=<path>`` arguments."""
    return [f"-Xplugin={path}" for path in paths]
