"""Configuration management with XDG paths and precedence resolution.

This module handles configuration for bld-kotlin:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.bld-kotlin/`` on macOS and Windows. Only the data directory is used,
  for crash logs. See :func:`get_data_dir`.
* **Project config** -- an optional ``bld-kotlin.json`` in the project's
  work directory, deserialised into a :class:`~bld_kotlin.models.Project`.
  See :func:`load_project`.
* **Precedence resolution** -- :func:`resolve_project` merges CLI flags,
  environment variables, the project file and defaults into the effective
  project.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Optional

from bld_kotlin.exceptions import ConfigError
from bld_kotlin.models import Project

_APP_NAME = "bld-kotlin"
PROJECT_CONFIG_FILENAME = "bld-kotlin.json"

ENV_KOTLINC = "BLD_KOTLIN_KOTLINC"
"""Environment variable overriding the ``kotlinc`` executable."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory layout (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/bld-kotlin/`` (default
    ``~/.local/share/bld-kotlin/``).
    On macOS/Windows: ``~/.bld-kotlin/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project config ---


def project_config_path(work_dir: Path) -> Path:
    """Path to the project file inside *work_dir*."""
    return Path(work_dir) / PROJECT_CONFIG_FILENAME


def load_project(work_dir: Optional[Path] = None) -> Project:
    """Load the project rooted at *work_dir*.

    Reads ``bld-kotlin.json`` when present. The project's
    ``work_directory`` always points at *work_dir*, whatever the file says.
    Without a file, a default project named after the directory is
    returned.

    Args:
        work_dir: Project root. Defaults to the current directory.

    Returns:
        The deserialised :class:`~bld_kotlin.models.Project`.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    root = Path(work_dir).absolute() if work_dir is not None else Path.cwd()
    path = project_config_path(root)
    if not path.is_file():
        return Project(name=root.name, work_directory=root)
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        data.setdefault("name", root.name)
        data["work_directory"] = str(root)
        return Project.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


# --- Precedence resolution ---


def _from_cwd(value: str) -> Path:
    """Anchor a relative path given on the command line or in the environment.

    A bare executable name is returned unchanged so it is looked up on PATH.
    """
    path = Path(value)
    return path.absolute() if len(path.parts) > 1 else path


def resolve_project(
    work_dir: Optional[Path] = None,
    cli_kotlinc: Optional[str] = None,
    cli_kotlin_home: Optional[str] = None,
) -> Project:
    """Resolve the project with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_kotlinc``, ``cli_kotlin_home``)
        2. Environment variables (``BLD_KOTLIN_KOTLINC``)
        3. Project config (``./bld-kotlin.json``)
        4. Defaults

    ``KOTLIN_HOME`` is not applied here; it is read during ``kotlinc``
    discovery.

    Returns:
        The effective :class:`~bld_kotlin.models.Project`.
    """
    project = load_project(work_dir)

    env_kotlinc = os.environ.get(ENV_KOTLINC)
    if cli_kotlinc is not None:
        project.kotlin.kotlinc = _from_cwd(cli_kotlinc)
    elif env_kotlinc:
        project.kotlin.kotlinc = _from_cwd(env_kotlinc)

    if cli_kotlin_home is not None:
        project.kotlin.kotlin_home = Path(cli_kotlin_home).absolute()

    return project
