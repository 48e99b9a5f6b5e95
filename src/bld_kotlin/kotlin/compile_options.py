"""Typed container for ``kotlinc`` command-line options.

:class:`CompileOptions` accumulates compiler settings through chainable
``with_*`` / ``add_*`` mutators (or plain attribute assignment) and renders
them with :meth:`CompileOptions.args` into the exact token sequence
``kotlinc`` expects. Rendering order is fixed and independent of the order
in which settings were applied; unset or empty settings produce no tokens.

Example::

    options = (
        CompileOptions()
        .with_jdk_release(17)
        .with_verbose()
        .add_opt_in("kotlin.RequiresOptIn")
    )
    options.args()
    # ['-Xjdk-release=17', '-opt-in', 'kotlin.RequiresOptIn', '-verbose']
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from bld_kotlin.kotlin.jvm_default import JvmDefault

PathLike = Union[str, os.PathLike]
Version = Union[str, int]


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _absolute(path: Path) -> str:
    return str(Path(path).absolute())


class CompileOptions(BaseModel):
    """Options rendered onto the ``kotlinc`` command line.

    Version-like fields accept integers and store them as strings. Path
    fields are rendered as absolute paths. Plugin options are stored as
    ``id:name:value`` triples in insertion order.
    """

    model_config = ConfigDict(validate_assignment=True, coerce_numbers_to_str=True)

    advanced_options: list[str] = Field(
        default_factory=list, description="Advanced options, rendered as -X<option>"
    )
    api_version: Optional[str] = None
    arg_file: list[Path] = Field(default_factory=list)
    classpath: list[Path] = Field(default_factory=list)
    expression: Optional[str] = None
    include_runtime: bool = False
    java_parameters: bool = False
    jdk_home: Optional[Path] = None
    jdk_release: Optional[str] = None
    jvm_default: Optional[JvmDefault] = None
    jvm_options: list[str] = Field(default_factory=list)
    jvm_target: Optional[str] = None
    kotlin_home: Optional[Path] = None
    language_version: Optional[str] = None
    module_name: Optional[str] = None
    no_jdk: bool = False
    no_reflect: bool = False
    no_stdlib: bool = False
    no_warn: bool = False
    opt_in: list[str] = Field(default_factory=list)
    options: list[str] = Field(default_factory=list)
    path: Optional[Path] = None
    plugin: list[str] = Field(
        default_factory=list, description="Plugin options as id:name:value"
    )
    progressive: bool = False
    script_templates: list[str] = Field(default_factory=list)
    verbose: bool = False
    w_error: bool = False
    w_extra: bool = False

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def is_set(self, name: str) -> bool:
        """Return ``True`` if *name* was ever assigned, whatever the value."""
        return name in self.model_fields_set

    def has_release(self) -> bool:
        """Whether the target JDK release was explicitly configured."""
        return self.is_set("jdk_release")

    def has_target(self) -> bool:
        """Whether the JVM bytecode target was explicitly configured."""
        return self.is_set("jvm_target")

    # ------------------------------------------------------------------ #
    # Scalar mutators
    # ------------------------------------------------------------------ #

    def with_api_version(self, version: Version) -> CompileOptions:
        """Allow only declarations from the given version of bundled libraries."""
        self.api_version = version
        return self

    def with_expression(self, expression: str) -> CompileOptions:
        """Evaluate the given string as a Kotlin script."""
        self.expression = expression
        return self

    def with_include_runtime(self, flag: bool = True) -> CompileOptions:
        """Include the Kotlin runtime in the resulting JAR."""
        self.include_runtime = flag
        return self

    def with_java_parameters(self, flag: bool = True) -> CompileOptions:
        """Generate metadata for Java 1.8 reflection on method parameters."""
        self.java_parameters = flag
        return self

    def with_jdk_home(self, path: PathLike) -> CompileOptions:
        """Include a custom JDK from the given location."""
        self.jdk_home = Path(path)
        return self

    def with_jdk_release(self, version: Version) -> CompileOptions:
        """Compile against the given JDK API version (``-Xjdk-release``)."""
        self.jdk_release = version
        return self

    def with_jvm_default(self, mode: JvmDefault) -> CompileOptions:
        """Select how JVM default methods are emitted."""
        self.jvm_default = mode
        return self

    def with_jvm_target(self, version: Version) -> CompileOptions:
        """Target version of the generated JVM bytecode."""
        self.jvm_target = version
        return self

    def with_kotlin_home(self, path: PathLike) -> CompileOptions:
        """Path to a custom Kotlin compiler used for discovery of runtime libraries."""
        self.kotlin_home = Path(path)
        return self

    def with_language_version(self, version: Version) -> CompileOptions:
        """Provide source compatibility with the given Kotlin version."""
        self.language_version = version
        return self

    def with_module_name(self, name: str) -> CompileOptions:
        """Set the name of the generated ``.kotlin_module`` file."""
        self.module_name = name
        return self

    def with_no_jdk(self, flag: bool = True) -> CompileOptions:
        self.no_jdk = flag
        return self

    def with_no_reflect(self, flag: bool = True) -> CompileOptions:
        self.no_reflect = flag
        return self

    def with_no_stdlib(self, flag: bool = True) -> CompileOptions:
        self.no_stdlib = flag
        return self

    def with_no_warn(self, flag: bool = True) -> CompileOptions:
        self.no_warn = flag
        return self

    def with_path(self, path: PathLike) -> CompileOptions:
        """Destination for generated class files (``-d``)."""
        self.path = Path(path)
        return self

    def with_progressive(self, flag: bool = True) -> CompileOptions:
        """Enable the compiler's progressive mode."""
        self.progressive = flag
        return self

    def with_verbose(self, flag: bool = True) -> CompileOptions:
        self.verbose = flag
        return self

    def with_w_error(self, flag: bool = True) -> CompileOptions:
        """Report an error if there are any warnings."""
        self.w_error = flag
        return self

    def with_w_extra(self, flag: bool = True) -> CompileOptions:
        """Enable additional declaration, expression and type compiler checks."""
        self.w_extra = flag
        return self

    # ------------------------------------------------------------------ #
    # List mutators
    # ------------------------------------------------------------------ #

    def add_advanced_options(self, *options: str) -> CompileOptions:
        """Append advanced options; a missing ``-X`` prefix is added on render."""
        self.advanced_options = [*self.advanced_options, *options]
        return self

    def add_arg_file(self, *files: PathLike) -> CompileOptions:
        """Read additional compiler arguments from the given files."""
        self.arg_file = [*self.arg_file, *(Path(f) for f in files)]
        return self

    def add_classpath(self, *paths: PathLike) -> CompileOptions:
        """Search for class files in the given paths."""
        self.classpath = [*self.classpath, *(Path(p) for p in paths)]
        return self

    def add_jvm_options(self, *options: str) -> CompileOptions:
        """Pass options directly to the JVM (rendered as ``-J<option>``)."""
        self.jvm_options = [*self.jvm_options, *options]
        return self

    def add_opt_in(self, *annotations: str) -> CompileOptions:
        """Enable usages of API that requires opt-in with the given marker annotations."""
        self.opt_in = [*self.opt_in, *annotations]
        return self

    def add_options(self, *options: str) -> CompileOptions:
        """Append raw tokens, rendered verbatim."""
        self.options = [*self.options, *options]
        return self

    def add_plugin(self, plugin_id: str, option_name: str, value: str) -> CompileOptions:
        """Pass an option to a compiler plugin (``-P plugin:<id>:<name>:<value>``)."""
        self.plugin = [*self.plugin, f"{plugin_id}:{option_name}:{value}"]
        return self

    def add_script_templates(self, *class_names: str) -> CompileOptions:
        """Script definition template classes, by fully qualified name."""
        self.script_templates = [*self.script_templates, *class_names]
        return self

    # ------------------------------------------------------------------ #
    # Rendering
    # ------------------------------------------------------------------ #

    def args(self) -> list[str]:
        """Render the configured options as ``kotlinc`` arguments.

        Returns:
            A new list of tokens in the fixed flag order. Calling this
            repeatedly without mutation returns equal lists.
        """
        args: list[str] = []

        if _present(self.api_version):
            args.extend(["-api-version", self.api_version])

        for arg_file in self.arg_file:
            args.append("@" + _absolute(arg_file))

        if self.classpath:
            args.extend(
                ["-classpath", os.pathsep.join(_absolute(p) for p in self.classpath)]
            )

        if _present(self.expression):
            args.extend(["-expression", self.expression])

        if self.java_parameters:
            args.append("-java-parameters")

        if _present(self.jvm_target):
            args.extend(["-jvm-target", self.jvm_target])

        if self.jvm_default is not None:
            args.extend(["-jvm-default", self.jvm_default.value])

        if self.include_runtime:
            args.append("-include-runtime")

        if self.jdk_home is not None:
            args.extend(["-jdk-home", _absolute(self.jdk_home)])

        if _present(self.jdk_release):
            args.append(f"-Xjdk-release={self.jdk_release}")

        for option in self.jvm_options:
            if _present(option):
                args.append("-J" + option)

        if self.kotlin_home is not None:
            args.extend(["-kotlin-home", _absolute(self.kotlin_home)])

        if _present(self.language_version):
            args.extend(["-language-version", self.language_version])

        if _present(self.module_name):
            args.extend(["-module-name", self.module_name])

        if self.no_jdk:
            args.append("-no-jdk")
        if self.no_reflect:
            args.append("-no-reflect")
        if self.no_stdlib:
            args.append("-no-stdlib")
        if self.no_warn:
            args.append("-nowarn")

        for annotation in self.opt_in:
            if _present(annotation):
                args.extend(["-opt-in", annotation])

        args.extend(o for o in self.options if _present(o))

        if self.path is not None:
            args.extend(["-d", _absolute(self.path)])

        for entry in self.plugin:
            if _present(entry):
                args.extend(["-P", f"plugin:{entry}"])

        if self.progressive:
            args.append("-progressive")

        templates = [t for t in self.script_templates if _present(t)]
        if templates:
            args.extend(["-script-templates", ",".join(templates)])

        if self.verbose:
            args.append("-verbose")
        if self.w_error:
            args.append("-Werror")
        if self.w_extra:
            args.append("-Wextra")

        for option in self.advanced_options:
            if not _present(option):
                continue
            args.append(option if option.startswith("-X") else "-X" + option)

        return args
