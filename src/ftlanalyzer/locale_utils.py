"""Locale utilities for matching locale folders against the source locale.

Locale folders are named by hand, so the same locale may be spelled
"en-US", "en_US", or "en-us". Normalization goes through Babel so that all
spellings of one locale resolve to the same canonical identifier.

Python 3.13+.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from typing import TYPE_CHECKING

from babel import Locale, UnknownLocaleError

if TYPE_CHECKING:
    from ftlanalyzer.model import FileGroup

__all__ = [
    "canonical_locale",
    "normalize_locale",
    "resolve_source_group",
]


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format for Babel.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")  # Already normalized
        'en'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def canonical_locale(locale_code: str) -> str | None:
    """Get the canonical Babel identifier of a locale code.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Canonical identifier (e.g., "en_US"), or None if Babel does not
        recognize the code

    Example:
        >>> canonical_locale("en-us")
        'en_US'
        >>> canonical_locale("images") is None
        True
    """
    if not locale_code:
        return None

    try:
        return str(Locale.parse(normalize_locale(locale_code)))
    except (UnknownLocaleError, ValueError, TypeError):
        return None


def resolve_source_group(
    groups: Mapping[str, FileGroup],
    source_locale: str,
) -> FileGroup | None:
    """Find the group holding the source locale's files.

    An exact folder-name match always wins. Otherwise the first group whose
    canonical locale equals the canonical source locale is used.

    Args:
        groups: Locale folder names mapped to their file groups
        source_locale: Configured source locale tag

    Returns:
        The source group, or None if no folder matches
    """
    group = groups.get(source_locale)
    if group is not None:
        return group

    canonical = canonical_locale(source_locale)
    if canonical is None:
        return None

    for locale, candidate in groups.items():
        if canonical_locale(locale) == canonical:
            return candidate

    return None
