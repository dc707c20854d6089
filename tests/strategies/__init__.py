"""Hypothesis strategies for ftlanalyzer property-based testing.

Usage:
    from tests.strategies import ftl_identifiers, ftl_patterns_with_variables
"""

from .ftl import (
    FTL_IDENTIFIER_FIRST_CHARS,
    FTL_IDENTIFIER_REST_CHARS,
    FTL_SAFE_CHARS,
    ftl_deeply_nested_patterns,
    ftl_identifiers,
    ftl_literals,
    ftl_message_sources,
    ftl_patterns,
    ftl_patterns_with_variables,
    ftl_simple_text,
    ftl_text_elements,
)

__all__ = [
    "FTL_IDENTIFIER_FIRST_CHARS",
    "FTL_IDENTIFIER_REST_CHARS",
    "FTL_SAFE_CHARS",
    "ftl_deeply_nested_patterns",
    "ftl_identifiers",
    "ftl_literals",
    "ftl_message_sources",
    "ftl_patterns",
    "ftl_patterns_with_variables",
    "ftl_simple_text",
    "ftl_text_elements",
]
