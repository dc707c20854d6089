"""Analysis report formatting.

Renders the diagnostics of a run as plain text, JSON, or GitHub Actions
workflow commands, and reports whether errors or warnings were found.

Python 3.13+.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from ftlanalyzer.enums import Severity

from .codes import Diagnostic

__all__ = [
    "OutputFormat",
    "ReportResult",
    "get_report",
    "uri_to_path",
]


class OutputFormat(StrEnum):
    """Output format options for analysis reports."""

    TEXT = "text"  # One line per problem (default)
    JSON = "json"  # JSON object for tooling integration
    GITHUB = "github"  # GitHub Actions workflow commands
    SILENT = "silent"  # No output, exit status only


@dataclass(frozen=True, slots=True)
class ReportResult:
    """Rendered report.

    Attributes:
        output: Text to print, or None when nothing should be printed
        has_warnings: Whether any warning remained after the split
        has_errors: Whether any error was found
    """

    output: str | None
    has_warnings: bool
    has_errors: bool


def uri_to_path(uri: str) -> str:
    """Convert a file:// URI back to a filesystem path."""
    return str(Path.from_uri(uri))


def _sort_key(diagnostic: Diagnostic) -> tuple[str, int, int]:
    return diagnostic.uri, diagnostic.line, diagnostic.column


def _count_text(error_count: int, warning_count: int) -> str:
    """Get the summary line for error and warning counts.

    Example:
        >>> _count_text(1, 2)
        'Finished with 1 error and 2 warnings'
    """
    if error_count == 0 and warning_count == 0:
        return "Finished with no errors"

    errors = "error" if error_count == 1 else "errors"
    warnings = "warning" if warning_count == 1 else "warnings"

    if error_count == 0:
        return f"Finished with {warning_count} {warnings}"
    if warning_count == 0:
        return f"Finished with {error_count} {errors}"
    return f"Finished with {error_count} {errors} and {warning_count} {warnings}"


def _format_text_line(diagnostic: Diagnostic, is_error: bool) -> str:
    """Format one problem for a plain text report.

    Example output:
        [WARN] Message "hello" is missing at /locales/fr/main.ftl:3:5
    """
    parts = ["[ERROR] " if is_error else "[WARN] ", diagnostic.message]

    if "-file" not in diagnostic.code:
        parts.append(f" at {uri_to_path(diagnostic.uri)}:{diagnostic.line}")
        if diagnostic.column > 1:
            parts.append(f":{diagnostic.column}")

    return "".join(parts)


def _format_github_line(diagnostic: Diagnostic, base_path: str, is_error: bool) -> str:
    """Format one problem as a GitHub Actions workflow command.

    Example output:
        ::warning file=locales/fr/main.ftl,line=3,col=5::Message "hello" is missing
    """
    parts = ["::error" if is_error else "::warning"]

    if diagnostic.code != "missing-file":
        relative = os.path.relpath(uri_to_path(diagnostic.uri), base_path)
        parts.append(f" file={relative},line={diagnostic.line},col={diagnostic.column}")

    parts.append(f"::{diagnostic.message}")
    return "".join(parts)


def _json_item(diagnostic: Diagnostic) -> dict[str, str | int]:
    return {
        "code": diagnostic.code,
        "message": diagnostic.message,
        "file": uri_to_path(diagnostic.uri),
        "line": diagnostic.line,
        "column": diagnostic.column,
    }


def _format_text(errors: list[Diagnostic], warnings: list[Diagnostic]) -> str:
    lines = [_count_text(len(errors), len(warnings))]
    if not errors and not warnings:
        return lines[0]

    lines.append("")
    lines.extend(_format_text_line(d, is_error=True) for d in errors)
    if errors and warnings:
        lines.append("")
    lines.extend(_format_text_line(d, is_error=False) for d in warnings)
    return "\n".join(lines)


def _format_github(
    errors: list[Diagnostic], warnings: list[Diagnostic], base_path: str
) -> str:
    lines = [_count_text(len(errors), len(warnings))]
    if not errors and not warnings:
        return lines[0]

    lines.append("")
    lines.extend(_format_github_line(d, base_path, is_error=True) for d in errors)
    lines.extend(_format_github_line(d, base_path, is_error=False) for d in warnings)
    return "\n".join(lines)


def _format_json(errors: list[Diagnostic], warnings: list[Diagnostic]) -> str:
    data = {
        "errors": [_json_item(d) for d in errors],
        "warnings": [_json_item(d) for d in warnings],
    }
    return json.dumps(data, ensure_ascii=False)


def get_report(
    diagnostics: Iterable[Diagnostic],
    output_format: OutputFormat,
    base_path: str,
    *,
    warnings_as_errors: bool = False,
) -> ReportResult:
    """Render the diagnostics of a run.

    Args:
        diagnostics: Diagnostics to report
        output_format: Output style
        base_path: Directory that relative paths are computed against
        warnings_as_errors: Report every warning as an error

    Returns:
        ReportResult with the output text and error/warning flags
    """
    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []

    for diagnostic in diagnostics:
        if warnings_as_errors or diagnostic.severity == Severity.ERROR:
            errors.append(diagnostic)
        else:
            warnings.append(diagnostic)

    has_errors = bool(errors)
    has_warnings = bool(warnings)

    if output_format == OutputFormat.SILENT:
        return ReportResult(output=None, has_warnings=has_warnings, has_errors=has_errors)

    errors.sort(key=_sort_key)
    warnings.sort(key=_sort_key)

    match output_format:
        case OutputFormat.JSON:
            output = _format_json(errors, warnings)
        case OutputFormat.GITHUB:
            output = _format_github(errors, warnings, base_path)
        case _:
            output = _format_text(errors, warnings)

    return ReportResult(output=output, has_warnings=has_warnings, has_errors=has_errors)
