"""Configuration of a single Dokka source set.

A :class:`SourceSet` renders into the argument string passed to the Dokka
CLI after ``-sourceSet``. Values are used exactly as given, without path
normalisation; map-valued settings render in insertion order.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from bld_kotlin.dokka.types import AnalysisPlatform, DocumentedVisibility


class SourceSet(BaseModel):
    """Dokka source set options.

    Example::

        SourceSet().add_src("src/main/kotlin").with_jdk_version(17).args()
        # ['-jdkVersion', '17', '-src', 'src/main/kotlin']
    """

    model_config = ConfigDict(validate_assignment=True, coerce_numbers_to_str=True)

    analysis_platform: Optional[AnalysisPlatform] = None
    api_version: Optional[str] = None
    classpath: list[str] = Field(default_factory=list)
    dependent_source_sets: dict[str, str] = Field(
        default_factory=dict, description="Module name to source set name"
    )
    display_name: Optional[str] = None
    documented_visibilities: list[DocumentedVisibility] = Field(default_factory=list)
    external_documentation_links: dict[str, str] = Field(
        default_factory=dict, description="Documentation URL to package-list URL"
    )
    includes: list[str] = Field(default_factory=list)
    jdk_version: Optional[str] = None
    language_version: Optional[str] = None
    no_jdk_link: Optional[bool] = None
    no_skip_empty_packages: bool = False
    no_stdlib_link: Optional[bool] = None
    per_package_options: list[str] = Field(default_factory=list)
    report_undocumented: Optional[bool] = None
    samples: list[str] = Field(default_factory=list)
    skip_deprecated: bool = False
    source_set_name: Optional[str] = None
    src: list[str] = Field(default_factory=list)
    src_links: list[str] = Field(
        default_factory=list, description="Source links as path=remote<suffix>"
    )
    suppressed_files: list[str] = Field(default_factory=list)

    # --- Mutators ---

    def with_analysis_platform(self, platform: AnalysisPlatform) -> SourceSet:
        """Platform used for setting up analysis. Dokka defaults to JVM."""
        self.analysis_platform = platform
        return self

    def with_api_version(self, version: str) -> SourceSet:
        self.api_version = version
        return self

    def add_classpath(self, *entries: str) -> SourceSet:
        """Classpath for analysis and interactive samples."""
        self.classpath = [*self.classpath, *(str(e) for e in entries)]
        return self

    def add_dependent_source_set(self, module_name: str, source_set_name: str) -> SourceSet:
        self.dependent_source_sets = {**self.dependent_source_sets, module_name: source_set_name}
        return self

    def with_display_name(self, name: str) -> SourceSet:
        self.display_name = name
        return self

    def add_documented_visibilities(self, *visibilities: DocumentedVisibility) -> SourceSet:
        self.documented_visibilities = [*self.documented_visibilities, *visibilities]
        return self

    def add_external_documentation_link(self, url: str, package_list_url: str) -> SourceSet:
        self.external_documentation_links = {
            **self.external_documentation_links,
            url: package_list_url,
        }
        return self

    def add_includes(self, *files: str) -> SourceSet:
        """Markdown files containing module and package documentation."""
        self.includes = [*self.includes, *(str(f) for f in files)]
        return self

    def with_jdk_version(self, version: Union[str, int]) -> SourceSet:
        """JDK version used when linking to JDK Javadocs."""
        self.jdk_version = version
        return self

    def with_language_version(self, version: str) -> SourceSet:
        self.language_version = version
        return self

    def with_no_jdk_link(self, flag: bool = True) -> SourceSet:
        self.no_jdk_link = flag
        return self

    def with_no_skip_empty_packages(self, flag: bool = True) -> SourceSet:
        self.no_skip_empty_packages = flag
        return self

    def with_no_stdlib_link(self, flag: bool = True) -> SourceSet:
        self.no_stdlib_link = flag
        return self

    def add_per_package_options(self, *options: str) -> SourceSet:
        self.per_package_options = [*self.per_package_options, *options]
        return self

    def with_report_undocumented(self, flag: bool = True) -> SourceSet:
        self.report_undocumented = flag
        return self

    def add_samples(self, *samples: str) -> SourceSet:
        self.samples = [*self.samples, *(str(s) for s in samples)]
        return self

    def with_skip_deprecated(self, flag: bool = True) -> SourceSet:
        self.skip_deprecated = flag
        return self

    def with_source_set_name(self, name: str) -> SourceSet:
        self.source_set_name = name
        return self

    def add_src(self, *paths: str) -> SourceSet:
        """Source code roots to be analyzed and documented."""
        self.src = [*self.src, *(str(p) for p in paths)]
        return self

    def add_src_link(self, path: str, remote: str, line_suffix: str) -> SourceSet:
        """Map a source directory to a web location for browsing the code.

        Args:
            path: Local source directory.
            remote: URL of the same directory in the hosted repository.
            line_suffix: Line number anchor, e.g. ``"#L"``.
        """
        self.src_links = [*self.src_links, f"{path}={remote}{line_suffix}"]
        return self

    def add_suppressed_files(self, *files: str) -> SourceSet:
        self.suppressed_files = [*self.suppressed_files, *(str(f) for f in files)]
        return self

    # --- Rendering ---

    def args(self) -> list[str]:
        """Render the source set as Dokka CLI arguments.

        Returns:
            Option/value pairs in the fixed Dokka order, skipping unset
            settings. An unconfigured source set renders as an empty list.
        """
        args: list[str] = []

        if self.analysis_platform is not None:
            args.extend(["-analysisPlatform", self.analysis_platform.value])
        if self.api_version:
            args.extend(["-apiVersion", self.api_version])
        if self.classpath:
            args.extend(["-classpath", ";".join(self.classpath)])
        if self.dependent_source_sets:
            args.extend([
                "-dependentSourceSets",
                ";".join(f"{m}/{s}" for m, s in self.dependent_source_sets.items()),
            ])
        if self.display_name:
            args.extend(["-displayName", self.display_name])
        if self.documented_visibilities:
            args.extend([
                "-documentedVisibilities",
                ";".join(v.value for v in self.documented_visibilities),
            ])
        if self.external_documentation_links:
            args.extend([
                "-externalDocumentationLinks",
                "^^".join(f"{u}^{p}" for u, p in self.external_documentation_links.items()),
            ])
        if self.jdk_version:
            args.extend(["-jdkVersion", self.jdk_version])
        if self.includes:
            args.extend(["-includes", ";".join(self.includes)])
        if self.language_version:
            args.extend(["-languageVersion", self.language_version])
        if self.no_jdk_link is not None:
            args.extend(["-noJdkLink", _bool(self.no_jdk_link)])
        if self.no_skip_empty_packages:
            args.extend(["-noSkipEmptyPackages", "true"])
        if self.no_stdlib_link is not None:
            args.extend(["-noStdlibLink", _bool(self.no_stdlib_link)])
        if self.report_undocumented is not None:
            args.extend(["-reportUndocumented", _bool(self.report_undocumented)])
        if self.per_package_options:
            args.extend(["-perPackageOptions", ";".join(self.per_package_options)])
        if self.samples:
            args.extend(["-samples", ";".join(self.samples)])
        if self.skip_deprecated:
            args.extend(["-skipDeprecated", "true"])
        if self.src:
            args.extend(["-src", ";".join(self.src)])
        if self.src_links:
            args.extend(["-srcLink", ";".join(self.src_links)])
        if self.source_set_name:
            args.extend(["-sourceSetName", self.source_set_name])
        if self.suppressed_files:
            args.extend(["-suppressedFiles", ";".join(self.suppressed_files)])

        return args


def _bool(value: bool) -> str:
    return "true" if value else "false"
