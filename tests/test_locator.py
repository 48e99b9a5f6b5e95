"""Tests for bld_kotlin.kotlin.locator -- kotlinc discovery.

Discovery runs against a :class:`FakeEnvironment`; ``subprocess.run`` is
patched wherever the ``which`` fallback could be reached so the host's real
installation never leaks into a result.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from bld_kotlin.exceptions import ExitStatusError, KotlincNotFoundError
from bld_kotlin.exit_codes import EXIT_TOOL_NOT_FOUND
from bld_kotlin.kotlin.environment import LINUX, MACOS, WINDOWS
from bld_kotlin.kotlin.locator import (
    KotlincLocation,
    KotlincLocator,
    common_locations,
    executable_name,
    home_from_executable,
    locate_kotlinc,
    probe_home,
)
from conftest import FakeEnvironment, make_executable

_RUN = "bld_kotlin.kotlin.locator.subprocess.run"


def _which_miss() -> MagicMock:
    return MagicMock(return_value=subprocess.CompletedProcess(["which"], 1, "", ""))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestExecutableName:
    def test_posix(self, tmp_path: Path) -> None:
        assert executable_name(FakeEnvironment(tmp_path, platform=LINUX)) == "kotlinc"
        assert executable_name(FakeEnvironment(tmp_path, platform=MACOS)) == "kotlinc"

    def test_windows(self, tmp_path: Path) -> None:
        assert executable_name(FakeEnvironment(tmp_path, platform=WINDOWS)) == "kotlinc.bat"


class TestProbeHome:
    """Probing a directory and its bin/ subdirectory."""

    def test_direct(self, tmp_path: Path) -> None:
        exe = make_executable(tmp_path / "kotlinc")
        assert probe_home(tmp_path, "kotlinc") == exe

    def test_bin(self, kotlin_home: Path) -> None:
        assert probe_home(kotlin_home, "kotlinc") == kotlin_home / "bin" / "kotlinc"

    def test_direct_wins_over_bin(self, tmp_path: Path) -> None:
        direct = make_executable(tmp_path / "kotlinc")
        make_executable(tmp_path / "bin" / "kotlinc")
        assert probe_home(tmp_path, "kotlinc") == direct

    def test_non_executable_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "kotlinc").write_text("not a program")
        assert probe_home(tmp_path, "kotlinc") is None

    def test_directory_named_like_executable_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "kotlinc").mkdir()
        assert probe_home(tmp_path, "kotlinc") is None

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert probe_home(tmp_path / "nope", "kotlinc") is None


class TestHomeFromExecutable:
    def test_strips_bin(self, tmp_path: Path) -> None:
        assert home_from_executable(tmp_path / "kotlinc" / "bin" / "kotlinc") == tmp_path / "kotlinc"

    def test_parent_without_bin(self, tmp_path: Path) -> None:
        assert home_from_executable(tmp_path / "tools" / "kotlinc") == tmp_path / "tools"


class TestCommonLocations:
    """Per-platform candidate directories."""

    def test_linux(self, fake_env: FakeEnvironment) -> None:
        locations = common_locations(fake_env)
        home = fake_env.home()
        assert locations[0] == home / ".sdkman" / "candidates" / "kotlin" / "current"
        assert Path("/usr/local") in locations
        assert Path("/opt/kotlin") in locations
        assert locations.index(Path("/usr/local")) < locations.index(Path("/usr"))
        assert locations[-1].parts[-3:] == ("plugins", "Kotlin", "kotlinc")

    def test_macos(self, tmp_path: Path) -> None:
        env = FakeEnvironment(tmp_path, platform=MACOS)
        locations = common_locations(env)
        assert Path("/opt/homebrew/opt/kotlin") in locations
        assert (
            Path("/Applications") / "IntelliJ IDEA.app" / "Contents" / "plugins" / "Kotlin" / "kotlinc"
            in locations
        )

    def test_windows(self, tmp_path: Path) -> None:
        program_files = tmp_path / "Program Files"
        ide = program_files / "JetBrains" / "IntelliJ IDEA 2024.1"
        ide.mkdir(parents=True)
        env = FakeEnvironment(
            tmp_path,
            env={"ProgramFiles": str(program_files), "LOCALAPPDATA": str(tmp_path / "local")},
            platform=WINDOWS,
        )
        locations = common_locations(env)
        assert locations[0] == tmp_path / "scoop" / "apps" / "kotlin" / "current"
        assert tmp_path / "local" / "Programs" / "kotlin" in locations
        assert program_files / "kotlinc" in locations
        assert ide / "plugins" / "Kotlin" / "kotlinc" in locations

    def test_windows_without_variables(self, tmp_path: Path) -> None:
        env = FakeEnvironment(tmp_path, platform=WINDOWS)
        locations = common_locations(env)
        assert Path("C:/tools/kotlinc") in locations
        assert len(locations) == 3


# ---------------------------------------------------------------------------
# Discovery order
# ---------------------------------------------------------------------------


class TestExplicitConfiguration:
    """Steps 1 and 2: explicit executable and explicit home."""

    def test_explicit_kotlinc_is_used_verbatim(self, fake_env: FakeEnvironment) -> None:
        location = KotlincLocator(Path("/does/not/exist/bin/kotlinc"), environment=fake_env).locate()
        assert location.executable == str(Path("/does/not/exist/bin/kotlinc"))
        assert location.home == Path("/does/not/exist").absolute()

    def test_explicit_kotlinc_with_home(
        self, fake_env: FakeEnvironment, kotlin_home: Path
    ) -> None:
        location = KotlincLocator(
            Path("custom/kotlinc"), kotlin_home, environment=fake_env
        ).locate()
        assert location == KotlincLocation(str(Path("custom/kotlinc")), kotlin_home)

    def test_explicit_home(self, fake_env: FakeEnvironment, kotlin_home: Path) -> None:
        location = KotlincLocator(kotlin_home=kotlin_home, environment=fake_env).locate()
        assert location.executable == str(kotlin_home / "bin" / "kotlinc")
        assert location.home == kotlin_home

    def test_explicit_home_miss_is_fatal(self, fake_env: FakeEnvironment, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        fake_env.env["KOTLIN_HOME"] = str(tmp_path / "unused")
        with pytest.raises(KotlincNotFoundError) as exc_info:
            KotlincLocator(kotlin_home=empty, environment=fake_env).locate()
        assert str(empty.absolute()) in str(exc_info.value)
        assert exc_info.value.exit_code == EXIT_TOOL_NOT_FOUND
        assert isinstance(exc_info.value, ExitStatusError)


class TestKotlinHomeEnv:
    """Step 3: the KOTLIN_HOME variable."""

    def test_direct_hit(self, fake_env: FakeEnvironment, tmp_path: Path) -> None:
        home = tmp_path / "kotlinc-env"
        exe = make_executable(home / "kotlinc")
        fake_env.env["KOTLIN_HOME"] = str(home)
        location = KotlincLocator(environment=fake_env).locate()
        assert location == KotlincLocation(str(exe), home)

    def test_bin_hit(self, fake_env: FakeEnvironment, kotlin_home: Path) -> None:
        fake_env.env["KOTLIN_HOME"] = str(kotlin_home)
        location = KotlincLocator(environment=fake_env).locate()
        assert location.executable == str(kotlin_home / "bin" / "kotlinc")
        assert location.home == kotlin_home

    def test_miss_falls_through_to_path(self, fake_env: FakeEnvironment, tmp_path: Path) -> None:
        fake_env.env["KOTLIN_HOME"] = str(tmp_path / "missing")
        exe = make_executable(tmp_path / "path-bin" / "kotlinc")
        fake_env.path.append(str(exe.parent))
        location = KotlincLocator(environment=fake_env).locate()
        assert location.executable == str(exe)

    def test_takes_priority_over_path(self, fake_env: FakeEnvironment, kotlin_home: Path, tmp_path: Path) -> None:
        make_executable(tmp_path / "path-bin" / "kotlinc")
        fake_env.path.append(str(tmp_path / "path-bin"))
        fake_env.env["KOTLIN_HOME"] = str(kotlin_home)
        location = KotlincLocator(environment=fake_env).locate()
        assert location.home == kotlin_home


class TestPathSearch:
    """Step 4: PATH entries in order."""

    def test_first_entry_wins(self, fake_env: FakeEnvironment, tmp_path: Path) -> None:
        first = make_executable(tmp_path / "a" / "kotlinc")
        make_executable(tmp_path / "b" / "kotlinc")
        fake_env.path.extend([str(tmp_path / "empty"), str(first.parent), str(tmp_path / "b")])
        location = KotlincLocator(environment=fake_env).locate()
        assert location.executable == str(first)
        assert location.home == first.parent

    def test_bin_entry_derives_home(self, fake_env: FakeEnvironment, kotlin_home: Path) -> None:
        fake_env.path.append(str(kotlin_home / "bin"))
        location = KotlincLocator(environment=fake_env).locate()
        assert location.home == kotlin_home

    def test_windows_uses_bat(self, tmp_path: Path) -> None:
        exe = make_executable(tmp_path / "win" / "kotlinc.bat")
        make_executable(tmp_path / "win" / "kotlinc")
        env = FakeEnvironment(tmp_path, path=[str(exe.parent)], platform=WINDOWS)
        location = KotlincLocator(environment=env).locate()
        assert location.executable == str(exe)


class TestCommonLocationSearch:
    """Step 5: well-known directories under the user's home."""

    def test_sdkman(self, fake_env: FakeEnvironment) -> None:
        sdkman = fake_env.home() / ".sdkman" / "candidates" / "kotlin" / "current"
        exe = make_executable(sdkman / "bin" / "kotlinc")
        location = KotlincLocator(environment=fake_env).locate()
        assert location == KotlincLocation(str(exe), sdkman)

    def test_path_takes_priority(self, fake_env: FakeEnvironment, tmp_path: Path) -> None:
        make_executable(fake_env.home() / ".sdkman" / "candidates" / "kotlin" / "current" / "bin" / "kotlinc")
        exe = make_executable(tmp_path / "on-path" / "kotlinc")
        fake_env.path.append(str(exe.parent))
        assert KotlincLocator(environment=fake_env).locate().executable == str(exe)


class TestShellLookup:
    """Steps 6 and 7: which/where and the bare-name fallback."""

    def _no_common_locations(self):
        return patch("bld_kotlin.kotlin.locator.common_locations", return_value=[])

    def test_which_hit(self, fake_env: FakeEnvironment, kotlin_home: Path) -> None:
        exe = kotlin_home / "bin" / "kotlinc"
        completed = subprocess.CompletedProcess(["which", "kotlinc"], 0, f"{exe}\n", "")
        with self._no_common_locations(), patch(_RUN, return_value=completed) as run:
            location = KotlincLocator(environment=fake_env).locate()
        assert location == KotlincLocation(str(exe), kotlin_home)
        assert run.call_args.args[0] == ["which", "kotlinc"]

    def test_where_on_windows(self, tmp_path: Path) -> None:
        env = FakeEnvironment(tmp_path, platform=WINDOWS)
        with self._no_common_locations(), patch(_RUN, _which_miss()) as run:
            KotlincLocator(environment=env).locate()
        assert run.call_args.args[0] == ["where", "kotlinc.bat"]

    def test_which_result_must_be_executable(self, fake_env: FakeEnvironment, tmp_path: Path) -> None:
        completed = subprocess.CompletedProcess(["which"], 0, f"{tmp_path / 'ghost'}\n", "")
        with self._no_common_locations(), patch(_RUN, return_value=completed):
            location = KotlincLocator(environment=fake_env).locate()
        assert location == KotlincLocation("kotlinc", None)

    def test_bare_name_fallback(self, fake_env: FakeEnvironment) -> None:
        with self._no_common_locations(), patch(_RUN, _which_miss()):
            location = KotlincLocator(environment=fake_env).locate()
        assert location.executable == "kotlinc"
        assert location.home is None

    @pytest.mark.parametrize(
        "error",
        [FileNotFoundError("which"), subprocess.TimeoutExpired("which", 10)],
    )
    def test_lookup_errors_fall_back(self, fake_env: FakeEnvironment, error: Exception) -> None:
        with self._no_common_locations(), patch(_RUN, side_effect=error):
            location = KotlincLocator(environment=fake_env).locate()
        assert location == KotlincLocation("kotlinc", None)


class TestLocateKotlinc:
    def test_shorthand(self, fake_env: FakeEnvironment, kotlin_home: Path) -> None:
        assert locate_kotlinc(kotlin_home=kotlin_home, environment=fake_env).home == kotlin_home
