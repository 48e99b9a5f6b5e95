"""Two-phase Kotlin compilation by way of an external ``kotlinc``.

:class:`CompileKotlinOperation` compiles the main sources into
``build/main`` and then the test sources into ``build/test``, passing the
main output to the test phase as a friend path so tests can see
``internal`` declarations. Each phase writes its arguments to a temporary
argument file and runs ``kotlinc @argfile``; a failing phase aborts the
whole operation.

Typical use::

    CompileKotlinOperation().from_project(project).execute()
"""

from __future__ import annotations

import atexit
import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from bld_kotlin.exceptions import ConfigError, ExitStatusError
from bld_kotlin.files import gather_sources
from bld_kotlin.kotlin.compile_options import CompileOptions
from bld_kotlin.kotlin.compiler_plugin import CompilerPlugin
from bld_kotlin.kotlin.environment import Environment, SystemEnvironment
from bld_kotlin.kotlin.jvm_options import JvmOptions
from bld_kotlin.kotlin.locator import KotlincLocation, KotlincLocator
from bld_kotlin.kotlin.plugins import plugin_args, resolve_plugins
from bld_kotlin.models import Project
from bld_kotlin.output import get_output

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def quote_arg(arg: str) -> str:
    """Quote *arg* for a ``kotlinc`` argument file when it needs quoting."""
    if arg and not any(c.isspace() or c in "\"'\\" for c in arg):
        return arg
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _remove_file(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def _extend_new(target: list, items: Iterable) -> None:
    """Append the *items* not already in *target*, keeping their order."""
    for item in items:
        if item not in target:
            target.append(item)


def write_arg_file(args: Sequence[str]) -> Path:
    """Write *args* one per line to a temporary file removed at interpreter exit.

    Returns:
        Path to the argument file.
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        prefix="kotlinc-",
        suffix=".args",
        delete=False,
        encoding="utf-8",
    ) as fh:
        for arg in args:
            fh.write(quote_arg(arg))
            fh.write("\n")
    atexit.register(_remove_file, fh.name)
    return Path(fh.name)


class CompileKotlinOperation:
    """Compile main and test Kotlin sources with ``kotlinc``.

    All settings are public attributes; the ``with_*`` and ``add_*``
    methods set or extend them and return the operation for chaining.
    """

    def __init__(self) -> None:
        self.build_main_directory: Optional[Path] = None
        self.build_test_directory: Optional[Path] = None
        self.compile_main_classpath: list[str] = []
        self.compile_test_classpath: list[str] = []
        self.compile_options = CompileOptions()
        self.jvm_options = JvmOptions()
        self.kotlin_home: Optional[Path] = None
        self.kotlinc: Optional[Path] = None
        self.main_source_directories: list[Path] = []
        self.main_source_files: list[Path] = []
        self.test_source_directories: list[Path] = []
        self.test_source_files: list[Path] = []
        self.plugins: list[str] = []
        self.project: Optional[Project] = None
        self.work_dir: Optional[Path] = None
        self.silent = False
        self.dry_run = False
        self.environment: Environment = SystemEnvironment()

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def with_build_main_directory(self, directory: PathLike) -> CompileKotlinOperation:
        self.build_main_directory = Path(directory)
        return self

    def with_build_test_directory(self, directory: PathLike) -> CompileKotlinOperation:
        self.build_test_directory = Path(directory)
        return self

    def add_compile_main_classpath(self, *entries: PathLike) -> CompileKotlinOperation:
        self.compile_main_classpath.extend(str(e) for e in entries)
        return self

    def add_compile_test_classpath(self, *entries: PathLike) -> CompileKotlinOperation:
        self.compile_test_classpath.extend(str(e) for e in entries)
        return self

    def with_compile_options(self, options: CompileOptions) -> CompileKotlinOperation:
        self.compile_options = options
        return self

    def add_jvm_options(self, *options: str) -> CompileKotlinOperation:
        """Options for the JVM running ``kotlinc``, passed as ``-J<option>``."""
        self.jvm_options.extend(options)
        return self

    def with_kotlin_home(self, directory: PathLike) -> CompileKotlinOperation:
        """Use the Kotlin installation in *directory*; discovery is skipped."""
        self.kotlin_home = Path(directory)
        return self

    def with_kotlinc(self, executable: PathLike) -> CompileKotlinOperation:
        """Use *executable* verbatim as the compiler."""
        self.kotlinc = Path(executable)
        return self

    def add_main_source_directories(self, *directories: PathLike) -> CompileKotlinOperation:
        self.main_source_directories.extend(Path(d) for d in directories)
        return self

    def add_main_source_files(self, *files: PathLike) -> CompileKotlinOperation:
        self.main_source_files.extend(Path(f) for f in files)
        return self

    def add_test_source_directories(self, *directories: PathLike) -> CompileKotlinOperation:
        self.test_source_directories.extend(Path(d) for d in directories)
        return self

    def add_test_source_files(self, *files: PathLike) -> CompileKotlinOperation:
        self.test_source_files.extend(Path(f) for f in files)
        return self

    def add_plugins(self, *plugins: Union[CompilerPlugin, str]) -> CompileKotlinOperation:
        """Add compiler plugins by :class:`CompilerPlugin` member or JAR path.

        Members are resolved against ``<kotlin home>/lib`` at execution
        time.
        """
        for plugin in plugins:
            if isinstance(plugin, CompilerPlugin):
                self.plugins.append(plugin.name)
            else:
                self.plugins.append(str(plugin))
        return self

    def add_plugins_from(
        self, directory: PathLike, *plugins: CompilerPlugin
    ) -> CompileKotlinOperation:
        """Add compiler plugins whose JARs live in *directory*."""
        for plugin in plugins:
            self.plugins.append(str((Path(directory) / plugin.jar).absolute()))
        return self

    def with_work_dir(self, directory: PathLike) -> CompileKotlinOperation:
        self.work_dir = Path(directory)
        return self

    def with_silent(self, silent: bool = True) -> CompileKotlinOperation:
        """Suppress the success message."""
        self.silent = silent
        return self

    def with_dry_run(self, dry_run: bool = True) -> CompileKotlinOperation:
        """Print the ``kotlinc`` commands instead of running them."""
        self.dry_run = dry_run
        return self

    def with_environment(self, environment: Environment) -> CompileKotlinOperation:
        self.environment = environment
        return self

    def from_project(self, project: Project) -> CompileKotlinOperation:
        """Configure the operation from a project's conventions and settings.

        Args:
            project: The project to compile.

        Returns:
            This operation.
        """
        self.project = project
        self.work_dir = project.work_dir()
        self.build_main_directory = project.build_main_directory()
        self.build_test_directory = project.build_test_directory()
        self.compile_main_classpath = list(project.compile_main_classpath())
        self.compile_test_classpath = list(project.compile_test_classpath())
        self.compile_test_classpath.append(str(self.build_main_directory.absolute()))

        main_dir = project.src_main_kotlin_directory()
        if main_dir.is_dir():
            _extend_new(self.main_source_directories, [main_dir])
        test_dir = project.src_test_kotlin_directory()
        if test_dir.is_dir():
            _extend_new(self.test_source_directories, [test_dir])

        kotlin = project.kotlin
        if self.kotlinc is None and kotlin.kotlinc is not None:
            # a bare name is left for PATH lookup at launch
            if len(kotlin.kotlinc.parts) > 1:
                self.kotlinc = project.resolve(kotlin.kotlinc)
            else:
                self.kotlinc = kotlin.kotlinc
        if self.kotlin_home is None and kotlin.kotlin_home is not None:
            self.kotlin_home = project.resolve(kotlin.kotlin_home)
        _extend_new(
            self.plugins,
            [
                p if p in CompilerPlugin.__members__ else str(project.resolve(Path(p)))
                for p in kotlin.plugins
            ],
        )
        _extend_new(self.jvm_options, kotlin.jvm_options)
        if not self.compile_options.model_fields_set:
            self.compile_options = kotlin.options.model_copy(deep=True)

        if project.java_release is not None and not self.compile_options.has_release():
            self.compile_options.with_jdk_release(project.java_release)
        if not self.compile_options.is_set("no_stdlib"):
            self.compile_options.with_no_stdlib(True)
        return self

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def execute(self) -> None:
        """Compile the main sources, then the test sources.

        Raises:
            ConfigError: If no project or no valid work directory is set.
            ExitStatusError: If a build directory cannot be created or
                ``kotlinc`` fails in either phase.
        """
        if self.project is None:
            raise ConfigError("A project must be specified.")
        if self.work_dir is None or not Path(self.work_dir).is_dir():
            raise ConfigError(f"Invalid working directory: {self.work_dir}")
        if self.build_main_directory is None or self.build_test_directory is None:
            raise ConfigError("The main and test build directories must be specified.")

        if not self.dry_run:
            self.execute_create_build_directories()
        self.execute_build_main_sources()
        self.execute_build_test_sources()

        if not self.silent and not self.dry_run:
            get_output().success("Kotlin compilation finished successfully.")

    def execute_create_build_directories(self) -> None:
        """Create the main and test build directories."""
        for directory in (self.build_main_directory, self.build_test_directory):
            if directory is None:
                continue
            try:
                Path(directory).mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ExitStatusError(
                    f"Could not create: {Path(directory).absolute()}"
                ) from exc

    def execute_build_main_sources(self) -> None:
        sources = gather_sources(self.main_source_files, self.main_source_directories)
        self.execute_build_sources(
            self.compile_main_classpath, sources, self.build_main_directory, None
        )

    def execute_build_test_sources(self) -> None:
        sources = gather_sources(self.test_source_files, self.test_source_directories)
        self.execute_build_sources(
            self.compile_test_classpath,
            sources,
            self.build_test_directory,
            self.build_main_directory,
        )

    def locate_kotlinc(self) -> KotlincLocation:
        return KotlincLocator(self.kotlinc, self.kotlin_home, self.environment).locate()

    def compile_args(
        self,
        classpath: Iterable[str],
        sources: Iterable[Path],
        destination: Path,
        friend_paths: Optional[Path] = None,
        kotlin_home: Optional[Path] = None,
    ) -> list[str]:
        """Build the argument file content for one phase.

        Args:
            classpath: Classpath entries, joined with the platform path
                separator.
            sources: Source files to compile.
            destination: Output directory (``-d``).
            friend_paths: Output of an earlier phase whose ``internal``
                declarations should be visible. Ignored if it does not exist.
            kotlin_home: Kotlin home used to resolve symbolic plugins.

        Returns:
            The arguments in the order ``kotlinc`` receives them.
        """
        args: list[str] = []

        classpath = list(classpath)
        if classpath:
            args.extend(["-cp", os.pathsep.join(classpath)])

        args.extend(self.compile_options.args())
        args.extend(["-d", str(Path(destination).absolute())])

        if friend_paths is not None and Path(friend_paths).is_dir():
            args.append(f"-Xfriend-paths={Path(friend_paths).absolute()}")

        args.extend(plugin_args(resolve_plugins(self.plugins, kotlin_home)))
        args.extend(str(Path(s).absolute()) for s in sources)
        return args

    def execute_build_sources(
        self,
        classpath: Iterable[str],
        sources: Sequence[Path],
        destination: Optional[Path],
        friend_paths: Optional[Path] = None,
    ) -> None:
        """Run ``kotlinc`` for one phase.

        A phase without sources is skipped.

        Raises:
            ExitStatusError: If ``kotlinc`` cannot be started or exits with a
                non-zero status.
        """
        if destination is None:
            raise ConfigError("A destination directory must be specified.")
        if not sources:
            logger.info("No Kotlin sources to compile into: %s", Path(destination).absolute())
            return

        location = self.locate_kotlinc()
        args = self.compile_args(classpath, sources, destination, friend_paths, location.home)
        jvm = [f"-J{option}" for option in self.jvm_options]

        if self.dry_run:
            output = get_output()
            output.info(f"[dry-run] {' '.join([location.executable, *jvm])} @argfile")
            for arg in args:
                output.info(f"  {arg}")
            return

        arg_file = write_arg_file(args)
        command = [location.executable, *jvm, f"@{arg_file}"]
        logger.debug("%s [%s]", " ".join(command), " ".join(args))

        try:
            result = subprocess.run(command, cwd=str(self.work_dir))
        except OSError as exc:
            raise ExitStatusError(f"Kotlin compilation failed: {exc}") from exc

        if result.returncode != 0:
            raise ExitStatusError("Kotlin compilation failed.", status=result.returncode)
