"""Per-file diagnostic storage.

Diagnostics are indexed by file URI. Re-reading a file clears its list
first, so one file never holds diagnostics from two parses.

Python 3.13+.
"""

from __future__ import annotations

from .codes import Diagnostic

__all__ = ["DiagnosticStore"]


class DiagnosticStore:
    """Diagnostics of one analysis run, grouped by file URI."""

    __slots__ = ("_by_uri",)

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._by_uri: dict[str, list[Diagnostic]] = {}

    def __len__(self) -> int:
        """Return the total number of stored diagnostics."""
        return sum(len(items) for items in self._by_uri.values())

    def __contains__(self, uri: object) -> bool:
        """Check whether any diagnostic list exists for a URI."""
        return uri in self._by_uri

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        """Append a diagnostic to the list of its file."""
        self._by_uri.setdefault(diagnostic.uri, []).append(diagnostic)

    def clear(self, uri: str | None = None) -> None:
        """Drop the diagnostics of one file, or of every file.

        Args:
            uri: File to clear; None clears the whole store
        """
        if uri is None:
            self._by_uri.clear()
        else:
            self._by_uri.pop(uri, None)

    def get_diagnostics(self) -> list[Diagnostic]:
        """Get all diagnostics as a flat list, grouped by file."""
        return [diagnostic for items in self._by_uri.values() for diagnostic in items]

    def get_diagnostics_for_uri(self, uri: str) -> list[Diagnostic]:
        """Get the diagnostics of one file, or an empty list."""
        return list(self._by_uri.get(uri, ()))
