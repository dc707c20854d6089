"""Warning message templates.

Centralized message templates for testable, consistent diagnostics.
Placeholders are positional: "{0}" is the first argument. Placeholders
without a matching argument are left in place.

Python 3.13+.
"""

from __future__ import annotations

import re

from .codes import Report, Span, WarnCode

__all__ = [
    "WARN_TEMPLATES",
    "create_warning",
    "render_template",
]

_PLACEHOLDER = re.compile(r"\{(\d+)\}")

WARN_TEMPLATES: dict[WarnCode, str] = {
    WarnCode.DO_NOT_TRANSLATE: '{0} "{1}" should not be translated',
    WarnCode.IDENTICAL: '{0} "{1}" is identical to the source locale {2}',
    WarnCode.MISMATCH_IDENTICAL: '{0} "{1}" should be identical to the source locale {2}',
    WarnCode.DUPLICATE: 'Duplicate {0} "{1}"',
    WarnCode.MISMATCH_FILE_BUNDLE: (
        "File {0} is assigned to the {1} bundle, but to the {2} bundle in the source locale"
    ),
    WarnCode.UNKNOWN_FILE: "File {0} does not have a corresponding file in the source locale",
    WarnCode.UNKNOWN_MESSAGE: (
        'Message "{0}" is defined here, but is not defined in the source locale'
    ),
    WarnCode.UNKNOWN_ATTRIBUTE: (
        'Attribute "{0}" is defined here, but is not defined in the source locale'
    ),
    WarnCode.UNKNOWN_VARIABLE: (
        'Variable "{0}" is used here, but is not used or declared in the source locale {1}'
    ),
    WarnCode.MISSING_FILE: "File {0} is missing",
    WarnCode.MISSING_MESSAGE: 'Message "{0}" is missing',
    WarnCode.MISSING_ATTRIBUTE: 'Attribute "{0}" is missing',
    WarnCode.MISSING_REQUIRED_VARIABLE: 'Variable {0} is required, but missing in {1} "{2}"',
    WarnCode.ANNOTATION_MISSING: 'Annotation "{0}" is missing for {1} "{2}"',
    WarnCode.ANNOTATION_TYPE_MISMATCH: (
        'Annotation "{0}" type does not match the source locale for {1} "{2}"'
    ),
}

# Codes whose template repeats the first argument in lowercase.
_ADD_LOWER: frozenset[WarnCode] = frozenset({WarnCode.IDENTICAL, WarnCode.MISMATCH_IDENTICAL})


def render_template(template: str, args: tuple[str, ...]) -> str:
    """Substitute positional arguments into a template.

    Example:
        >>> render_template('Duplicate {0} "{1}"', ("message", "hello"))
        'Duplicate message "hello"'
        >>> render_template("File {0} is missing", ())
        'File {0} is missing'
    """

    def _substitute(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index < len(args) and args[index]:
            return args[index]
        return match.group(0)

    return _PLACEHOLDER.sub(_substitute, template)


def create_warning(code: WarnCode, span: Span, *args: str) -> Report:
    """Create an unplaced warning for a code.

    Args:
        code: Warning code selecting the template
        span: Offsets of the problem in the file content
        *args: Positional template arguments

    Returns:
        Report with the rendered message
    """
    if code in _ADD_LOWER and args:
        args = (*args, args[0].lower())

    return Report(code=code, message=render_template(WARN_TEMPLATES[code], args), span=span)
