"""Exception hierarchy for ftlanalyzer.

Only failures that abort a run are exceptions. Problems found in resource
files are reported as diagnostics, never raised.

Hierarchy:
    AnalyzerError (base)
    └─ DiscoveryError (directory structure cannot be read)

Python 3.13+.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "AnalyzerError",
    "DiscoveryError",
]


class AnalyzerError(Exception):
    """Base exception for all ftlanalyzer errors."""


class DiscoveryError(AnalyzerError):
    """A directory below the base path could not be listed.

    Discovery does not recover partially; the caller decides whether to
    abort the run.

    Attributes:
        path: Directory that failed to be listed
    """

    def __init__(self, message: str, path: Path) -> None:
        """Initialize DiscoveryError.

        Args:
            message: Error message
            path: Directory that failed to be listed
        """
        super().__init__(message)
        self.path = path
