"""Filesystem helpers shared by the compile and documentation operations."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Union

logger = logging.getLogger(__name__)

KOTLIN_EXTENSION = ".kt"


def kotlin_files(directory: Path) -> list[Path]:
    """Return every Kotlin source file under *directory*, recursively.

    Args:
        directory: Source root to expand.

    Returns:
        Sorted absolute paths. A missing directory logs a warning and
        yields an empty list.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Directory not found: %s", directory.absolute())
        return []
    return sorted(
        p.absolute()
        for p in directory.rglob(f"*{KOTLIN_EXTENSION}")
        if p.is_file()
    )


def gather_sources(files: Iterable[Path], directories: Iterable[Path]) -> list[Path]:
    """Combine explicit source files with the expansion of each directory.

    Explicit files come first, in the order given, followed by the files
    found in each directory.
    """
    sources = [Path(f).absolute() for f in files]
    for directory in directories:
        sources.extend(kotlin_files(directory))
    return sources


def get_jar_list(directory: Path, pattern: Union[str, re.Pattern]) -> list[str]:
    """List JARs in *directory* whose filename matches *pattern*.

    Source JARs (``*-sources*``) are skipped.

    Args:
        directory: Directory to scan (not recursive).
        pattern: Regular expression matched against the whole filename.

    Returns:
        Sorted absolute paths, or an empty list when *directory* does not
        exist.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(
        str(p.absolute())
        for p in directory.iterdir()
        if p.is_file() and regex.match(p.name) and "-sources" not in p.name
    )
