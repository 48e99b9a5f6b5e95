"""Canonical Pydantic models for the project being built.

A :class:`Project` describes the directory conventions of a Kotlin project
(``src/main/kotlin``, ``build/main``, ``lib/compile`` ...) together with the
compiler and documentation settings read from ``bld-kotlin.json``:

* :class:`KotlinConfig` -- ``kotlinc`` discovery overrides, compiler plugins,
  JVM options and :class:`~bld_kotlin.kotlin.compile_options.CompileOptions`.
* :class:`DokkaConfig` -- documentation output format and global Dokka
  settings.

Directories are derived from :attr:`Project.work_directory` and are never
stored in the config file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from bld_kotlin.dokka.types import LoggingLevel, OutputFormat
from bld_kotlin.files import get_jar_list
from bld_kotlin.kotlin.compile_options import CompileOptions

JAR_PATTERN = r"^.*\.jar$"


# --- Kotlin ---


class KotlinConfig(BaseModel):
    """Compiler settings embedded in a :class:`Project`.

    Example::

        KotlinConfig(
            kotlin_home="/opt/kotlinc",
            plugins=["ALL_OPEN", "lib/my-plugin.jar"],
            options={"jvm_target": "17", "opt_in": ["kotlin.RequiresOptIn"]},
        )
    """

    kotlinc: Optional[Path] = Field(
        default=None, description="Explicit path to the kotlinc executable"
    )
    kotlin_home: Optional[Path] = Field(
        default=None, description="Kotlin compiler installation directory"
    )
    plugins: list[str] = Field(
        default_factory=list,
        description="Compiler plugins: CompilerPlugin names or JAR paths",
    )
    jvm_options: list[str] = Field(
        default_factory=list, description="Options for the JVM running kotlinc"
    )
    options: CompileOptions = Field(default_factory=CompileOptions)


# --- Dokka ---


class DokkaConfig(BaseModel):
    """Documentation settings embedded in a :class:`Project`."""

    output_format: OutputFormat = OutputFormat.HTML
    output_dir: Optional[Path] = None
    logging_level: Optional[LoggingLevel] = None
    module_version: Optional[str] = None
    fail_on_warning: bool = False
    offline_mode: bool = False
    global_links: dict[str, str] = Field(default_factory=dict)
    includes: list[str] = Field(default_factory=list)


# --- Project ---


class Project(BaseModel):
    """A Kotlin project laid out with the conventional directory structure.

    :attr:`work_directory` is resolved against the current directory; the
    extra classpath entries are resolved against :attr:`work_directory`.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    version: Optional[str] = None
    work_directory: Path = Field(default_factory=Path.cwd)
    java_release: Optional[str] = Field(
        default=None, description="Target JDK release, e.g. 17"
    )
    classpath: list[Path] = Field(
        default_factory=list, description="Extra compile classpath entries"
    )
    test_classpath: list[Path] = Field(
        default_factory=list, description="Extra test classpath entries"
    )
    kotlin: KotlinConfig = Field(default_factory=KotlinConfig)
    dokka: DokkaConfig = Field(default_factory=DokkaConfig)

    # ------------------------------------------------------------------ #
    # Directories
    # ------------------------------------------------------------------ #

    def work_dir(self) -> Path:
        return self.work_directory.absolute()

    def resolve(self, path: Path) -> Path:
        """Resolve *path* against the work directory unless it is absolute."""
        path = Path(path)
        return path if path.is_absolute() else self.work_dir() / path

    def src_main_directory(self) -> Path:
        return self.work_dir() / "src" / "main"

    def src_main_kotlin_directory(self) -> Path:
        return self.src_main_directory() / "kotlin"

    def src_test_directory(self) -> Path:
        return self.work_dir() / "src" / "test"

    def src_test_kotlin_directory(self) -> Path:
        return self.src_test_directory() / "kotlin"

    def build_directory(self) -> Path:
        return self.work_dir() / "build"

    def build_main_directory(self) -> Path:
        return self.build_directory() / "main"

    def build_test_directory(self) -> Path:
        return self.build_directory() / "test"

    def build_dokka_directory(self) -> Path:
        return self.build_directory() / "dokka"

    def lib_directory(self) -> Path:
        return self.work_dir() / "lib"

    def lib_bld_directory(self) -> Path:
        """Directory holding build-tool JARs such as the Dokka CLI."""
        return self.lib_directory() / "bld"

    def lib_compile_directory(self) -> Path:
        return self.lib_directory() / "compile"

    def lib_provided_directory(self) -> Path:
        return self.lib_directory() / "provided"

    def lib_test_directory(self) -> Path:
        return self.lib_directory() / "test"

    # ------------------------------------------------------------------ #
    # Classpaths
    # ------------------------------------------------------------------ #

    def compile_main_classpath(self) -> list[str]:
        """JARs from ``lib/compile`` and ``lib/provided`` plus configured extras."""
        entries = get_jar_list(self.lib_compile_directory(), JAR_PATTERN)
        entries += get_jar_list(self.lib_provided_directory(), JAR_PATTERN)
        entries += [str(self.resolve(p)) for p in self.classpath]
        return entries

    def compile_test_classpath(self) -> list[str]:
        """The main classpath plus ``lib/test`` JARs and configured test extras."""
        entries = get_jar_list(self.lib_compile_directory(), JAR_PATTERN)
        entries += get_jar_list(self.lib_provided_directory(), JAR_PATTERN)
        entries += get_jar_list(self.lib_test_directory(), JAR_PATTERN)
        entries += [str(self.resolve(p)) for p in self.classpath]
        entries += [str(self.resolve(p)) for p in self.test_classpath]
        return entries
