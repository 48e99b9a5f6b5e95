"""API documentation with the Dokka CLI.

:class:`SourceSet` and the option enumerations are exported here; the
documentation operation is in :mod:`bld_kotlin.dokka.operation`.
"""

from bld_kotlin.dokka.source_set import SourceSet
from bld_kotlin.dokka.types import (
    AnalysisPlatform,
    DocumentedVisibility,
    LoggingLevel,
    OutputFormat,
)

__all__ = [
    "AnalysisPlatform",
    "DocumentedVisibility",
    "LoggingLevel",
    "OutputFormat",
    "SourceSet",
]
