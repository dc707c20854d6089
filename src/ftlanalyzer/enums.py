"""Enumerations for ftlanalyzer type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion where the value
ends up in output, and IntEnum where only identity and ordering matter.

Python 3.13+.
"""

from enum import IntEnum, StrEnum


class TranslatePolicy(IntEnum):
    """Translation requirement of a message, term, or attribute."""

    REQUIRED = 0
    """Every locale must translate the entry: @translate (default)"""

    OPTIONAL = 1
    """Locales may omit the entry: @translate-optional"""

    DISALLOWED = 2
    """Locales must not translate the entry: @do-not-translate"""


class Severity(StrEnum):
    """Severity of a reported diagnostic.

    StrEnum provides automatic string conversion: str(Severity.ERROR) == "error"
    """

    ERROR = "error"
    """Malformed resource syntax reported by the parser."""

    WARNING = "warning"
    """Structural or semantic drift between locales."""


__all__ = [
    "Severity",
    "TranslatePolicy",
]
