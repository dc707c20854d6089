"""Annotation extraction from resource comments.

Comments may carry directives, one per line, in the form "@name value".
Everything else in the comment is free text.

Directive grammar:
    @diagnostic enable|disable [code, ...]   # remark
    @param $name[?] [type] [description]
    @param-attribute attr $name[?] [type] [description]
    @translate | @translate-optional | @do-not-translate [target]
    @expect-identical [target]
    @bundle name        (resource comments only)
    @global             (resource comments only)

Malformed directives are skipped, never reported.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass

from ftlanalyzer.constants import (
    ANNOTATION_PREFIX,
    PARAM_ATTRIBUTE_PATTERN,
    PARAM_PATTERN,
    REMARK_MARKER,
)
from ftlanalyzer.entries import ParamInfo

__all__ = [
    "AnnotationItem",
    "DiagnosticDirective",
    "ExtractedComment",
    "ParamDeclaration",
    "parse_diagnostic_directive",
    "parse_param",
    "read_annotations",
    "strip_remark",
]


@dataclass(frozen=True, slots=True)
class AnnotationItem:
    """A single directive found in a comment.

    Attributes:
        name: Directive name, including the leading "@"
        value: Text following the name, trimmed; empty for a bare directive
    """

    name: str
    value: str = ""


@dataclass(frozen=True, slots=True)
class ExtractedComment:
    """A comment split into free text and directives.

    Attributes:
        comment: Non-directive lines, joined and trimmed; empty if none
        annotations: Directives in comment order
    """

    comment: str
    annotations: tuple[AnnotationItem, ...]


@dataclass(frozen=True, slots=True)
class DiagnosticDirective:
    """A parsed @diagnostic directive.

    Attributes:
        enable: True for "enable", False for "disable"
        codes: Codes or categories named; empty addresses every diagnostic
    """

    enable: bool
    codes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ParamDeclaration:
    """A parsed @param or @param-attribute directive.

    Attributes:
        param: The declared parameter
        attribute: Target attribute id for @param-attribute, else None
    """

    param: ParamInfo
    attribute: str | None = None


def read_annotations(content: str) -> ExtractedComment:
    """Extract directives from comment content.

    Args:
        content: Comment text with comment markers already removed

    Returns:
        The free-text comment and the directives in order

    Example:
        >>> extracted = read_annotations("Greeting\\n@param $name The user")
        >>> extracted.comment
        'Greeting'
        >>> extracted.annotations
        (AnnotationItem(name='@param', value='$name The user'),)
    """
    lines: list[str] = []
    annotations: list[AnnotationItem] = []

    for line in content.splitlines():
        if not line.startswith(ANNOTATION_PREFIX):
            lines.append(line)
            continue

        name, _, value = line.partition(" ")
        annotations.append(AnnotationItem(name=name.rstrip(), value=value.strip()))

    return ExtractedComment(comment="\n".join(lines).strip(), annotations=tuple(annotations))


def strip_remark(value: str) -> str:
    """Drop a trailing "# remark" from a directive value and trim it."""
    return value.partition(REMARK_MARKER)[0].strip()


def parse_diagnostic_directive(value: str) -> DiagnosticDirective | None:
    """Parse the value of a @diagnostic directive.

    Codes may be separated by commas, whitespace, or both.

    Args:
        value: Directive value, e.g. "disable missing, unknown-file"

    Returns:
        Parsed directive, or None if the action is not enable/disable

    Example:
        >>> parse_diagnostic_directive("disable missing, identical # legacy")
        DiagnosticDirective(enable=False, codes=('missing', 'identical'))
        >>> parse_diagnostic_directive("toggle missing") is None
        True
    """
    words = strip_remark(value).replace(",", " ").split()
    if not words or words[0] not in ("enable", "disable"):
        return None

    return DiagnosticDirective(enable=words[0] == "enable", codes=tuple(words[1:]))


def parse_param(name: str, value: str) -> ParamDeclaration | None:
    """Parse the value of a @param or @param-attribute directive.

    Args:
        name: "@param" or "@param-attribute"
        value: Directive value, e.g. "$count? number Item count"

    Returns:
        Parsed declaration, or None if the value does not match the grammar

    Example:
        >>> parse_param("@param", "$count? number Item count").param
        ParamInfo(id='count', required=False, type='number', comment='Item count')
    """
    is_attribute = name == "@param-attribute"
    pattern = PARAM_ATTRIBUTE_PATTERN if is_attribute else PARAM_PATTERN
    match = pattern.match(value)
    if match is None:
        return None

    groups = match.groups()
    attribute = groups[0] if is_attribute else None
    param_id, optional, param_type, comment = groups[1:] if is_attribute else groups

    param = ParamInfo(
        id=param_id,
        required=optional != "?",
        type=param_type or None,
        comment=comment.strip() or None,
    )
    return ParamDeclaration(param=param, attribute=attribute)
