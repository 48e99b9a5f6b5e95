"""Process environment queries used by executable discovery.

Discovery code never reads ``os.environ`` or probes the platform directly;
it goes through an :class:`Environment` so tests can substitute an
in-memory implementation.
"""

from __future__ import annotations

import os
import platform as _platform
from pathlib import Path
from typing import Optional, Protocol

LINUX = "linux"
MACOS = "macos"
WINDOWS = "windows"


class Environment(Protocol):
    """Read-only view of the process environment."""

    def getenv(self, name: str) -> Optional[str]:
        """Return the value of environment variable *name*, or ``None``."""
        ...

    def path_entries(self) -> list[str]:
        """Return the non-blank ``PATH`` entries, in order."""
        ...

    def platform(self) -> str:
        """Return ``"linux"``, ``"macos"`` or ``"windows"``."""
        ...

    def home(self) -> Path:
        """Return the user's home directory."""
        ...


class SystemEnvironment:
    """:class:`Environment` backed by the running process."""

    def getenv(self, name: str) -> Optional[str]:
        return os.environ.get(name)

    def path_entries(self) -> list[str]:
        raw = os.environ.get("PATH", "")
        return [entry for entry in raw.split(os.pathsep) if entry.strip()]

    def platform(self) -> str:
        system = _platform.system()
        if system == "Windows":
            return WINDOWS
        if system == "Darwin":
            return MACOS
        return LINUX

    def home(self) -> Path:
        return Path.home()
