"""Shared constants for ftlanalyzer.

Placing constants here avoids circular imports between the discovery,
normalization, and analysis modules and provides a single source of truth.

Constants are grouped by domain:
- File system: Resource file extension and hidden-name marker
- Locales: Default source locale
- Annotations: Directive names and parameter grammar

Python 3.13+.
"""

import re

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # File system
    "RESOURCE_EXTENSION",
    "HIDDEN_PREFIX",
    # Locales
    "DEFAULT_SOURCE_LOCALE",
    # Annotations
    "ANNOTATION_PREFIX",
    "REMARK_MARKER",
    "ALL_ATTRIBUTES",
    "PARAM_PATTERN",
    "PARAM_ATTRIBUTE_PATTERN",
]

# ============================================================================
# FILE SYSTEM
# ============================================================================

# Extension of Fluent resource files. Matching is case-insensitive; the
# lowercase form is used when a path has to be synthesized.
RESOURCE_EXTENSION: str = ".ftl"

# Directory entries starting with this prefix are never walked or classified.
HIDDEN_PREFIX: str = "."

# ============================================================================
# LOCALES
# ============================================================================

DEFAULT_SOURCE_LOCALE: str = "en"

# ============================================================================
# ANNOTATIONS
# ============================================================================

# Comment lines starting with this character are directives: "@name value".
ANNOTATION_PREFIX: str = "@"

# Text after this marker in a directive value is a free-form remark.
REMARK_MARKER: str = "#"

# Target value addressing every attribute of an entry.
ALL_ATTRIBUTES: str = "*"

# @param $name[?] [type] [description]
PARAM_PATTERN: re.Pattern[str] = re.compile(
    r"^\$([A-Za-z][\w-]*)(\??)(?:\s+([^#\s]+))?(.*)$"
)

# @param-attribute attr $name[?] [type] [description]
PARAM_ATTRIBUTE_PATTERN: re.Pattern[str] = re.compile(
    r"^([A-Za-z][\w-]*)\s+\$([A-Za-z][\w-]*)(\??)(?:\s+([^#\s]+))?(.*)$"
)
