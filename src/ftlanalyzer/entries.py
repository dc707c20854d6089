"""Normalized records for messages, terms, and attributes.

Messages, terms, and attributes are separate record types rather than one
shape with an "is term" flag. Comparison functions accept exactly the
variant they apply to, so terms cannot reach message-only checks.

Ignore scopes are never shared between entries: every message or term owns
a private copy of the resource-level ignore set taken when it was read.
Attributes have no scope of their own and defer to their owning entry.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ftlanalyzer.enums import TranslatePolicy

if TYPE_CHECKING:
    from fluent.syntax import ast

    from ftlanalyzer.diagnostics.codes import Span
    from ftlanalyzer.model import FileInfo

__all__ = [
    "AnnotationState",
    "AttributeInfo",
    "EntryInfo",
    "MessageInfo",
    "ParamInfo",
    "TermInfo",
]


@dataclass(frozen=True, slots=True)
class ParamInfo:
    """A parameter declared with @param or @param-attribute.

    Attributes:
        id: Variable name, without the "$" sigil
        required: False when declared with a trailing "?"
        type: Declared type, if any
        comment: Parameter description, if any
    """

    id: str
    required: bool = True
    type: str | None = None
    comment: str | None = None


@dataclass(slots=True, kw_only=True)
class _ElementInfo:
    """Fields shared by messages, terms, and attributes."""

    id: str
    name: str
    id_span: Span
    translate: TranslatePolicy = TranslatePolicy.REQUIRED
    expect_identical: bool = False
    params: dict[str, ParamInfo] = field(default_factory=dict)
    variables: set[str] = field(default_factory=set)


@dataclass(slots=True, kw_only=True)
class _EntryInfo(_ElementInfo):
    """Fields shared by messages and terms."""

    attributes: dict[str, AttributeInfo] = field(default_factory=dict)
    comment: str | None = None
    ignore: set[str] = field(default_factory=set)
    ignore_all: bool = False


@dataclass(slots=True, kw_only=True)
class MessageInfo(_EntryInfo):
    """A normalized message. Messages may have attributes only, no value."""

    value: ast.Pattern | None = None


@dataclass(slots=True, kw_only=True)
class TermInfo(_EntryInfo):
    """A normalized term. The display name carries the leading "-"."""

    value: ast.Pattern


@dataclass(slots=True, kw_only=True)
class AttributeInfo(_ElementInfo):
    """A normalized attribute, named "<owner>.<id>"."""

    value: ast.Pattern
    owner: MessageInfo | TermInfo = field(repr=False, compare=False)

    @property
    def ignore(self) -> set[str]:
        """Ignore set of the owning entry."""
        return self.owner.ignore

    @property
    def ignore_all(self) -> bool:
        """Whether the owning entry suppresses every diagnostic."""
        return self.owner.ignore_all


EntryInfo = MessageInfo | TermInfo | AttributeInfo


@dataclass(slots=True)
class AnnotationState:
    """Resource-level annotation state threaded through one file.

    Created fresh for every parse of a file. Resource comments update it in
    file order; entries copy from it when they are read.

    Attributes:
        file: The file being read
        translate: Policy inherited by entries read from now on
        bundle: Bundle named by @bundle, None for the default bundle
        is_global: Whether @global was seen
        ignore: Codes and categories currently ignored
        ignore_all: Whether every diagnostic is currently ignored
    """

    file: FileInfo
    translate: TranslatePolicy = TranslatePolicy.REQUIRED
    bundle: str | None = None
    is_global: bool = False
    ignore: set[str] = field(default_factory=set)
    ignore_all: bool = False
