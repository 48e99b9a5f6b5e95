"""Discovery of the ``kotlinc`` executable.

:class:`KotlincLocator` walks a fixed priority list and stops at the first
hit:

1. An explicit executable path, used verbatim.
2. An explicit Kotlin home, probed at ``<home>/kotlinc`` then
   ``<home>/bin/kotlinc``. A miss here is fatal.
3. The ``KOTLIN_HOME`` environment variable, probed the same way.
4. Every ``PATH`` entry, in order.
5. Well-known per-platform installation directories (see
   :func:`common_locations`).
6. ``which`` / ``where``.
7. The bare executable name, left for the OS to resolve at launch time.

The Kotlin home found along the way is returned with the executable so the
plugin resolver can find bundled compiler plugins under ``<home>/lib``.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bld_kotlin.exceptions import KotlincNotFoundError
from bld_kotlin.kotlin.environment import (
    MACOS,
    WINDOWS,
    Environment,
    SystemEnvironment,
)

logger = logging.getLogger(__name__)

KOTLIN_HOME_ENV = "KOTLIN_HOME"
"""Environment variable naming a Kotlin compiler installation."""

_LOOKUP_TIMEOUT = 10


@dataclass(frozen=True)
class KotlincLocation:
    """Result of a discovery run.

    Attributes:
        executable: Path to ``kotlinc`` (or the bare name when nothing was
            found).
        home: The Kotlin installation directory, when one is known.
    """

    executable: str
    home: Optional[Path] = None


def executable_name(env: Environment) -> str:
    """Return ``kotlinc.bat`` on Windows and ``kotlinc`` elsewhere."""
    return "kotlinc.bat" if env.platform() == WINDOWS else "kotlinc"


def is_executable(path: Path) -> bool:
    """Return ``True`` if *path* is a regular file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)


def probe_home(directory: Path, exe: str) -> Optional[Path]:
    """Look for *exe* directly in *directory*, then in ``directory/bin``."""
    for candidate in (directory / exe, directory / "bin" / exe):
        if is_executable(candidate):
            return candidate
    return None


def home_from_executable(executable: Path) -> Path:
    """Derive a Kotlin home from an executable path.

    ``/opt/kotlinc/bin/kotlinc`` yields ``/opt/kotlinc``; an executable that
    does not live in a ``bin`` directory yields its parent.
    """
    parent = executable.absolute().parent
    if parent.name == "bin":
        return parent.parent
    return parent


def _idea_plugin_dirs(*roots: Path) -> list[Path]:
    return [root / "plugins" / "Kotlin" / "kotlinc" for root in roots]


def common_locations(env: Environment) -> list[Path]:
    """Return well-known installation directories for the current platform.

    User-local version managers come first, system-wide installs next and
    compilers bundled with IntelliJ IDEA last.
    """
    home = env.home()
    sdkman = home / ".sdkman" / "candidates" / "kotlin" / "current"
    platform = env.platform()

    if platform == WINDOWS:
        locations = [home / "scoop" / "apps" / "kotlin" / "current", sdkman]
        local_app_data = env.getenv("LOCALAPPDATA")
        if local_app_data:
            locations.append(Path(local_app_data) / "Programs" / "kotlin")
        locations.append(Path("C:/tools/kotlinc"))
        program_files = env.getenv("ProgramFiles")
        if program_files:
            locations.append(Path(program_files) / "kotlinc")
            locations.append(Path(program_files) / "Kotlin")
        program_files_x86 = env.getenv("ProgramFiles(x86)")
        if program_files_x86:
            locations.append(Path(program_files_x86) / "Kotlin")
        if program_files:
            jetbrains = Path(program_files) / "JetBrains"
            if jetbrains.is_dir():
                ides = sorted(p for p in jetbrains.glob("IntelliJ IDEA*") if p.is_dir())
                locations.extend(_idea_plugin_dirs(*ides))
        return locations

    if platform == MACOS:
        locations = [
            sdkman,
            Path("/opt/homebrew/opt/kotlin"),
            Path("/opt/homebrew"),
            Path("/usr/local/opt/kotlin"),
            Path("/usr/local"),
            Path("/opt/local"),
        ]
        for apps in (Path("/Applications"), home / "Applications"):
            locations.extend(
                _idea_plugin_dirs(
                    apps / "IntelliJ IDEA.app" / "Contents",
                    apps / "IntelliJ IDEA CE.app" / "Contents",
                )
            )
        return locations

    toolbox = home / ".local" / "share" / "JetBrains" / "Toolbox" / "apps"
    return [
        sdkman,
        home / ".local" / "share" / "kotlin",
        home / ".local",
        Path("/snap/kotlin/current"),
        Path("/usr/local/kotlin"),
        Path("/opt/kotlin"),
        Path("/usr/share/kotlin"),
        Path("/usr/local"),
        Path("/usr"),
        *_idea_plugin_dirs(
            toolbox / "intellij-idea-ultimate",
            toolbox / "intellij-idea-community-edition",
            Path("/opt/idea"),
            Path("/opt/intellij-idea"),
        ),
    ]


class KotlincLocator:
    """Find ``kotlinc`` for a compile run.

    Args:
        kotlinc: Explicit executable path. Trusted without checking.
        kotlin_home: Explicit installation directory. Must contain the
            executable.
        environment: Environment queries; defaults to the real process.
    """

    def __init__(
        self,
        kotlinc: Optional[Path] = None,
        kotlin_home: Optional[Path] = None,
        environment: Optional[Environment] = None,
    ) -> None:
        self.kotlinc = kotlinc
        self.kotlin_home = kotlin_home
        self.environment = environment or SystemEnvironment()

    def locate(self) -> KotlincLocation:
        """Run discovery.

        Returns:
            The executable and, where known, its Kotlin home.

        Raises:
            KotlincNotFoundError: If an explicit Kotlin home is configured
                but does not contain the executable.
        """
        env = self.environment
        exe = executable_name(env)

        # 1. Explicit executable
        if self.kotlinc is not None:
            home = self.kotlin_home or home_from_executable(Path(self.kotlinc))
            return KotlincLocation(str(self.kotlinc), home)

        # 2. Explicit home
        if self.kotlin_home is not None:
            found = probe_home(Path(self.kotlin_home), exe)
            if found is None:
                raise KotlincNotFoundError(
                    f"Kotlin compiler not found in: {Path(self.kotlin_home).absolute()}"
                )
            return KotlincLocation(str(found), Path(self.kotlin_home))

        # 3. KOTLIN_HOME
        env_home = env.getenv(KOTLIN_HOME_ENV)
        if env_home:
            found = probe_home(Path(env_home), exe)
            if found is not None:
                return KotlincLocation(str(found), Path(env_home))
            logger.debug("%s=%s does not contain %s", KOTLIN_HOME_ENV, env_home, exe)

        # 4. PATH
        for entry in env.path_entries():
            found = probe_home(Path(entry), exe)
            if found is not None:
                return KotlincLocation(str(found), home_from_executable(found))

        # 5. Well-known locations
        for location in common_locations(env):
            found = probe_home(location, exe)
            if found is not None:
                return KotlincLocation(str(found), home_from_executable(found))

        # 6. which / where
        found = self._shell_lookup(exe)
        if found is not None:
            return KotlincLocation(str(found), home_from_executable(found))

        logger.debug("Could not locate %s, relying on the shell", exe)
        return KotlincLocation(exe, None)

    def _shell_lookup(self, exe: str) -> Optional[Path]:
        """Ask ``which`` (or ``where`` on Windows) for *exe*."""
        command = "where" if self.environment.platform() == WINDOWS else "which"
        try:
            result = subprocess.run(
                [command, exe],
                capture_output=True,
                text=True,
                timeout=_LOOKUP_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("'%s %s' failed: %s", command, exe, exc)
            return None

        if result.returncode != 0:
            return None
        lines = result.stdout.strip().splitlines()
        if not lines:
            return None
        candidate = Path(lines[0].strip())
        return candidate if is_executable(candidate) else None


def locate_kotlinc(
    kotlinc: Optional[Path] = None,
    kotlin_home: Optional[Path] = None,
    environment: Optional[Environment] = None,
) -> KotlincLocation:
    """Shorthand for ``KotlincLocator(...).locate()``."""
    return KotlincLocator(kotlinc, kotlin_home, environment).locate()
