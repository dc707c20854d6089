"""Diagnostic system for resource analysis.

Provides warning codes and message templates, position ranges, the
per-file diagnostic store, and report rendering.

Python 3.13+.
"""

from .codes import (
    Diagnostic,
    DiagnosticRange,
    RangeElement,
    Report,
    Span,
    WarnCode,
    get_warning_category,
)
from .formatter import OutputFormat, ReportResult, get_report
from .position import LineOffsetCache, span_to_range
from .store import DiagnosticStore
from .templates import WARN_TEMPLATES, create_warning

__all__ = [
    "WARN_TEMPLATES",
    "Diagnostic",
    "DiagnosticRange",
    "DiagnosticStore",
    "LineOffsetCache",
    "OutputFormat",
    "RangeElement",
    "Report",
    "ReportResult",
    "Span",
    "WarnCode",
    "create_warning",
    "get_report",
    "get_warning_category",
    "span_to_range",
]
