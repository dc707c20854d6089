"""ftlanalyzer - Cross-locale analysis of Fluent (FTL) translation files.

Discovers locale trees of .ftl resources, compares every locale against a
source locale, and reports structural and semantic drift: missing and
unknown files, messages and attributes, translations that should or should
not match the source, undeclared or dropped variables, and syntax errors.

Public API:
    FtlAnalyzer - Discovery-to-diagnostics pipeline
    discover - Find collections and loose resource files below a directory
    get_report - Render diagnostics as text, JSON, or GitHub Actions commands
    Diagnostic - A reported error or warning with its position

Exceptions:
    AnalyzerError - Base exception class
    DiscoveryError - A directory could not be listed

Submodules:
    ftlanalyzer.annotations - Comment directive extraction
    ftlanalyzer.normalize - Entry normalization and variable collection
    ftlanalyzer.diagnostics - Codes, templates, store, and report rendering
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("ftlanalyzer")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

from .analyzer import FtlAnalyzer
from .diagnostics import Diagnostic, OutputFormat, get_report
from .discovery import discover
from .enums import Severity, TranslatePolicy
from .errors import AnalyzerError, DiscoveryError

__all__ = [
    "AnalyzerError",
    "Diagnostic",
    "DiscoveryError",
    "FtlAnalyzer",
    "OutputFormat",
    "Severity",
    "TranslatePolicy",
    "__version__",
    "discover",
    "get_report",
]
