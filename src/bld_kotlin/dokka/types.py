"""Enumerations for Dokka CLI options.

Every member renders on the command line as its lower-case name, exposed
through the ``value`` of each ``str`` enum.
"""

from __future__ import annotations

import enum


class AnalysisPlatform(str, enum.Enum):
    """Platform used for setting up analysis (``-analysisPlatform``)."""

    JVM = "jvm"
    JS = "js"
    WASM = "wasm"
    NATIVE = "native"
    COMMON = "common"
    ANDROID = "android"


class DocumentedVisibility(str, enum.Enum):
    """Visibility modifiers that should be documented (``-documentedVisibilities``)."""

    PUBLIC = "public"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PRIVATE = "private"
    PACKAGE = "package"


class LoggingLevel(str, enum.Enum):
    """Dokka logging verbosity (``-loggingLevel``)."""

    DEBUG = "debug"
    PROGRESS = "progress"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class OutputFormat(str, enum.Enum):
    """Documentation output formats and the plugin JARs each one needs."""

    JAVADOC = "javadoc"
    HTML = "html"
    MARKDOWN = "markdown"
    JEKYLL = "jekyll"

    @property
    def plugins_pattern(self) -> str:
        """Regular expression selecting this format's plugin JARs in ``lib/bld``."""
        return _PLUGIN_PATTERNS[self]


_PLUGIN_PATTERNS = {
    OutputFormat.JAVADOC: (
        r"^.*(dokka-base|analysis-kotlin-descriptors|javadoc-plugin"
        r"|kotlin-as-java-plugin|korte-jvm).*\.jar$"
    ),
    OutputFormat.HTML: (
        r"^.*(dokka-base|analysis-kotlin-descriptors|kotlinx-html-jvm|freemarker).*\.jar$"
    ),
    OutputFormat.MARKDOWN: (
        r"^.*(dokka-base|analysis-kotlin-descriptors|gfm-plugin|freemarker).*\.jar$"
    ),
    OutputFormat.JEKYLL: (
        r"^.*(dokka-base|analysis-kotlin-descriptors|jekyll-plugin|gfm-plugin"
        r"|freemarker).*\.jar$"
    ),
}
