"""Diagnostic codes and data structures.

Defines warning codes, source spans, placed ranges, and the diagnostic
record handed to report renderers.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ftlanalyzer.enums import Severity

__all__ = [
    "Diagnostic",
    "DiagnosticRange",
    "RangeElement",
    "Report",
    "Span",
    "WarnCode",
    "get_warning_category",
]


class WarnCode(StrEnum):
    """Codes of warnings produced by cross-locale comparison.

    The category of a code is the text before its first "-", so
    "missing-message" belongs to "missing". Ignoring a category ignores
    every code in it.
    """

    DO_NOT_TRANSLATE = "do-not-translate"
    IDENTICAL = "identical"
    MISMATCH_IDENTICAL = "mismatch-identical"
    DUPLICATE = "duplicate"
    MISMATCH_FILE_BUNDLE = "mismatch-file-bundle"
    UNKNOWN_FILE = "unknown-file"
    UNKNOWN_MESSAGE = "unknown-message"
    UNKNOWN_ATTRIBUTE = "unknown-attribute"
    UNKNOWN_VARIABLE = "unknown-variable"
    MISSING_FILE = "missing-file"
    MISSING_MESSAGE = "missing-message"
    MISSING_ATTRIBUTE = "missing-attribute"
    MISSING_REQUIRED_VARIABLE = "missing-required-variable"
    ANNOTATION_MISSING = "annotation-missing"
    ANNOTATION_TYPE_MISMATCH = "annotation-type-mismatch"


def get_warning_category(code: str) -> str:
    """Get the category of a diagnostic code.

    "do-not-translate" is its own category.

    Example:
        >>> get_warning_category("missing-message")
        'missing'
        >>> get_warning_category("duplicate")
        'duplicate'
        >>> get_warning_category("do-not-translate")
        'do-not-translate'
    """
    if code == WarnCode.DO_NOT_TRANSLATE:
        return code

    category, _, _ = code.partition("-")
    return category


@dataclass(frozen=True, slots=True)
class Span:
    """Character offsets into a file's content.

    Negative offsets count from the end of the content, so Span(-1, -1)
    addresses the last character.

    Attributes:
        start: Starting character offset
        end: Ending character offset (exclusive)
    """

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class RangeElement:
    """A start or end position of a range.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        index: Character offset (0-indexed)
    """

    line: int
    column: int
    index: int


@dataclass(frozen=True, slots=True)
class DiagnosticRange:
    """Range at which a problem occurred."""

    start: RangeElement
    end: RangeElement


@dataclass(frozen=True, slots=True)
class Report:
    """A diagnostic before it is placed in a file.

    Attributes:
        code: Diagnostic code
        message: Rendered message text
        span: Offsets of the problem in the file content
    """

    code: str
    message: str
    span: Span


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A problem found in a resource file.

    Attributes:
        severity: Error for malformed syntax, warning otherwise
        code: Diagnostic code (a WarnCode value or a parser error code)
        message: Human-readable description
        uri: URI of the file the diagnostic belongs to
        range: Position of the problem in the file
    """

    severity: Severity
    code: str
    message: str
    uri: str
    range: DiagnosticRange

    def __str__(self) -> str:
        """Return human-readable description."""
        return self.message

    @property
    def line(self) -> int:
        """Line at which the problem starts."""
        return self.range.start.line

    @property
    def column(self) -> int:
        """Column at which the problem starts."""
        return self.range.start.column
