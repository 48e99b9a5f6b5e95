"""API documentation generation with the Dokka CLI.

:class:`DokkaOperation` runs ``java -jar dokka-cli.jar`` with the plugin
JARs for the selected :class:`~bld_kotlin.dokka.types.OutputFormat`, one
``-sourceSet`` per configured :class:`~bld_kotlin.dokka.source_set.SourceSet`
and the global Dokka options. The Dokka CLI and its plugins are expected in
the project's ``lib/bld`` directory.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Union

from bld_kotlin.exceptions import ConfigError, ExitStatusError, ToolNotFoundError
from bld_kotlin.dokka.source_set import SourceSet
from bld_kotlin.dokka.types import LoggingLevel, OutputFormat
from bld_kotlin.files import get_jar_list
from bld_kotlin.models import Project
from bld_kotlin.output import get_output

logger = logging.getLogger(__name__)

DOKKA_CLI_PATTERN = r"^.*dokka-cli.*\.jar$"

PathLike = Union[str, os.PathLike]


def _json_escape(value: str) -> str:
    """Escape *value* for embedding inside a JSON string literal."""
    return json.dumps(value)[1:-1]


class DokkaOperation:
    """Generate documentation with Dokka.

    Settings are public attributes with chainable ``with_*`` / ``add_*``
    mutators, as for :class:`~bld_kotlin.kotlin.operation.CompileKotlinOperation`.
    """

    def __init__(self) -> None:
        self.delay_template_substitution = False
        self.fail_on_warning = False
        self.global_links: dict[str, str] = {}
        self.global_package_options: list[str] = []
        self.global_src_links: list[str] = []
        self.includes: list[str] = []
        self.java = "java"
        self.logging_level: Optional[LoggingLevel] = None
        self.module_name: Optional[str] = None
        self.module_version: Optional[str] = None
        self.no_suppress_obvious_functions = False
        self.offline_mode = False
        self.output_dir: Optional[Path] = None
        self.plugin_configuration: dict[str, str] = {}
        self.plugins_classpath: list[str] = []
        self.project: Optional[Project] = None
        self.source_sets: list[SourceSet] = []
        self.suppress_inherited_members = False
        self.work_dir: Optional[Path] = None
        self.dry_run = False
        self.silent = False

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def with_delay_template_substitution(self, flag: bool = True) -> DokkaOperation:
        """Delay substitution of some elements, for incremental multi-module builds."""
        self.delay_template_substitution = flag
        return self

    def with_fail_on_warning(self, flag: bool = True) -> DokkaOperation:
        self.fail_on_warning = flag
        return self

    def add_global_link(self, url: str, package_list_url: str) -> DokkaOperation:
        """Global external documentation link, applied to every source set."""
        self.global_links[url] = package_list_url
        return self

    def add_global_package_options(self, *options: str) -> DokkaOperation:
        self.global_package_options.extend(options)
        return self

    def add_global_src_links(self, *links: str) -> DokkaOperation:
        self.global_src_links.extend(links)
        return self

    def add_includes(self, *files: str) -> DokkaOperation:
        self.includes.extend(str(f) for f in files)
        return self

    def with_logging_level(self, level: LoggingLevel) -> DokkaOperation:
        self.logging_level = level
        return self

    def with_module_name(self, name: str) -> DokkaOperation:
        self.module_name = name
        return self

    def with_module_version(self, version: str) -> DokkaOperation:
        self.module_version = version
        return self

    def with_no_suppress_obvious_functions(self, flag: bool = True) -> DokkaOperation:
        self.no_suppress_obvious_functions = flag
        return self

    def with_offline_mode(self, flag: bool = True) -> DokkaOperation:
        """Do not resolve package-lists online."""
        self.offline_mode = flag
        return self

    def with_output_dir(self, directory: PathLike) -> DokkaOperation:
        self.output_dir = Path(directory)
        return self

    def add_plugin_configuration(self, name: str, json_value: str) -> DokkaOperation:
        """Configure a Dokka plugin with a JSON document."""
        self.plugin_configuration[name] = json_value
        return self

    def add_plugins_classpath(self, *entries: PathLike) -> DokkaOperation:
        self.plugins_classpath.extend(str(e) for e in entries)
        return self

    def add_source_set(self, source_set: SourceSet) -> DokkaOperation:
        self.source_sets.append(source_set)
        return self

    def with_suppress_inherited_members(self, flag: bool = True) -> DokkaOperation:
        self.suppress_inherited_members = flag
        return self

    def with_dry_run(self, dry_run: bool = True) -> DokkaOperation:
        self.dry_run = dry_run
        return self

    def with_silent(self, silent: bool = True) -> DokkaOperation:
        self.silent = silent
        return self

    def output_format(self, fmt: OutputFormat) -> DokkaOperation:
        """Select the documentation format.

        Replaces :attr:`plugins_classpath` with the plugin JARs in the
        project's ``lib/bld`` directory that the format needs.

        Raises:
            ConfigError: If no project has been set.
        """
        if self.project is None:
            raise ConfigError("A project must be specified before the output format.")
        fmt = OutputFormat(fmt)
        self.plugins_classpath.clear()
        self.plugins_classpath.extend(
            get_jar_list(self.project.lib_bld_directory(), fmt.plugins_pattern)
        )
        return self

    def from_project(self, project: Project) -> DokkaOperation:
        """Configure the operation for *project*'s ``src/main/kotlin`` sources.

        Settings from the project's ``dokka`` section are applied as well,
        including the output format.
        """
        self.project = project
        self.work_dir = project.work_dir()
        self.module_name = project.name
        self.source_sets = [
            SourceSet().add_src(str(project.src_main_kotlin_directory().absolute()))
        ]

        dokka = project.dokka
        self.output_dir = (
            project.resolve(dokka.output_dir)
            if dokka.output_dir is not None
            else project.build_dokka_directory()
        )
        if dokka.logging_level is not None:
            self.logging_level = dokka.logging_level
        if dokka.module_version is not None:
            self.module_version = dokka.module_version
        elif project.version is not None:
            self.module_version = project.version
        self.fail_on_warning = self.fail_on_warning or dokka.fail_on_warning
        self.offline_mode = self.offline_mode or dokka.offline_mode
        self.global_links.update(dokka.global_links)
        self.includes.extend(dokka.includes)
        return self.output_format(dokka.output_format)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def execute_construct_process_command_list(self) -> list[str]:
        """Build the Dokka command line.

        Returns:
            The full command, starting with the ``java`` executable.

        Raises:
            ConfigError: If no project or no non-empty source set is
                configured.
            ToolNotFoundError: If ``lib/bld`` does not contain exactly one
                Dokka CLI JAR.
            ExitStatusError: If the output directory cannot be created.
        """
        if self.project is None:
            raise ConfigError("A project must be specified.")

        cli = get_jar_list(self.project.lib_bld_directory(), DOKKA_CLI_PATTERN)
        if len(cli) != 1:
            raise ToolNotFoundError(
                f"The dokka-cli JAR could not be found in: {self.project.lib_bld_directory()}"
            )

        source_set_args = [s.args() for s in self.source_sets]
        source_set_args = [a for a in source_set_args if a]
        if not source_set_args:
            raise ConfigError("At least one sourceSet is required.")

        args = [self.java, "-jar", cli[0]]

        if self.plugins_classpath:
            args.extend(["-pluginsClasspath", ";".join(self.plugins_classpath)])

        for entry in source_set_args:
            args.extend(["-sourceSet", " ".join(entry)])

        if self.output_dir is not None:
            if not self.dry_run:
                try:
                    self.output_dir.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    raise ExitStatusError(
                        f"Could not create: {self.output_dir.absolute()}"
                    ) from exc
            args.extend(["-outputDir", str(self.output_dir.absolute())])

        if self.delay_template_substitution:
            args.extend(["-delayTemplateSubstitution", "true"])

        if self.fail_on_warning:
            args.extend(["-failOnWarning", "true"])

        if self.global_links:
            args.extend([
                "-globalLinks",
                "^^".join(f"{{{url}}}^{{{pkg}}}" for url, pkg in self.global_links.items()),
            ])

        if self.global_package_options:
            args.extend(["-globalPackageOptions", ";".join(self.global_package_options)])

        if self.global_src_links:
            args.extend(["-globalSrcLinks", ";".join(self.global_src_links)])

        if self.includes:
            args.extend(["-includes", ";".join(self.includes)])

        if self.logging_level is not None:
            args.extend(["-loggingLevel", LoggingLevel(self.logging_level).value])

        if self.module_name is not None:
            args.extend(["-moduleName", self.module_name])

        if self.module_version is not None:
            args.extend(["-moduleVersion", self.module_version])

        if self.no_suppress_obvious_functions:
            args.extend(["-noSuppressObviousFunctions", "true"])

        if self.offline_mode:
            args.extend(["-offlineMode", "true"])

        if self.plugin_configuration:
            args.extend([
                "-pluginConfiguration",
                "^^".join(
                    f"{{{_json_escape(name)}}}={{{_json_escape(value)}}}"
                    for name, value in self.plugin_configuration.items()
                ),
            ])

        if self.suppress_inherited_members:
            args.extend(["-suppressInheritedMembers", "true"])

        logger.debug(" ".join(args))
        return args

    def execute(self) -> None:
        """Run Dokka.

        Raises:
            ExitStatusError: If Dokka cannot be started or exits with a
                non-zero status.
        """
        command = self.execute_construct_process_command_list()
        work_dir = self.work_dir or self.project.work_dir()

        if self.dry_run:
            get_output().info(f"[dry-run] {' '.join(command)}")
            return

        try:
            result = subprocess.run(command, cwd=str(work_dir))
        except OSError as exc:
            raise ExitStatusError(f"Dokka failed: {exc}") from exc

        if result.returncode != 0:
            raise ExitStatusError("Dokka failed.", status=result.returncode)

        if not self.silent:
            get_output().success(f"Documentation generated in: {self.output_dir}")
