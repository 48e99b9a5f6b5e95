"""Shared test fixtures for bld-kotlin.

Provides reusable fixtures for building throwaway Kotlin project trees,
faking the process environment seen by ``kotlinc`` discovery, isolating
configuration and managing output state. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import stat
from pathlib import Path
from typing import Optional

import pytest

from bld_kotlin.kotlin.environment import LINUX
from bld_kotlin.models import Project
from bld_kotlin.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_executable(path: Path) -> Path:
    """Create an executable shell script at *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def write_file(path: Path, content: str = "") -> Path:
    """Write *content* to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class FakeEnvironment:
    """In-memory :class:`~bld_kotlin.kotlin.environment.Environment`."""

    def __init__(
        self,
        home: Path,
        env: Optional[dict[str, str]] = None,
        path: Optional[list[str]] = None,
        platform: str = LINUX,
    ) -> None:
        self.env = dict(env or {})
        self.path = list(path or [])
        self._platform = platform
        self._home = home

    def getenv(self, name: str) -> Optional[str]:
        return self.env.get(name)

    def path_entries(self) -> list[str]:
        return list(self.path)

    def platform(self) -> str:
        return self._platform

    def home(self) -> Path:
        return self._home


# ---------------------------------------------------------------------------
# Environment fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_env(tmp_path: Path) -> FakeEnvironment:
    """An empty Linux environment whose home directory is ``tmp_path/home``.

    Nothing is on PATH and no variables are set, so discovery only finds
    what a test explicitly creates.
    """
    home = tmp_path / "home"
    home.mkdir()
    return FakeEnvironment(home=home)


@pytest.fixture
def kotlin_home(tmp_path: Path) -> Path:
    """A Kotlin installation with ``bin/kotlinc`` and an empty ``lib`` directory."""
    home = tmp_path / "kotlinc"
    make_executable(home / "bin" / "kotlinc")
    (home / "lib").mkdir(parents=True)
    return home


# ---------------------------------------------------------------------------
# Project fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def kotlin_project(tmp_path: Path) -> Project:
    """A project with three main sources, a lib/compile JAR and no tests.

    Layout::

        project/
            src/main/kotlin/com/example/{App,Util}.kt
            src/main/kotlin/com/example/model/User.kt
            lib/compile/kotlin-stdlib-2.0.0.jar
    """
    root = tmp_path / "project"
    main = root / "src" / "main" / "kotlin" / "com" / "example"
    write_file(main / "App.kt", "package com.example\n\nfun main() {}\n")
    write_file(main / "Util.kt", "package com.example\n")
    write_file(main / "model" / "User.kt", "package com.example.model\n")
    write_file(root / "lib" / "compile" / "kotlin-stdlib-2.0.0.jar")
    return Project(name="example", work_directory=root)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_DATA_HOME to a subdirectory of tmp_path so that crash logs
    never touch the real user directories, clears the BLD_KOTLIN_* and
    KOTLIN_HOME variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["BLD_KOTLIN_KOTLINC", "KOTLIN_HOME"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()
