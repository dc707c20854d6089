"""Entry normalization.

Converts the parsed top-level items of one resource into MessageInfo and
TermInfo records, applying resource-level and entry-level annotations.

Architecture:
    - EntryNormalizer.normalize(): Walks the resource body in file order
    - Resource comments update the running AnnotationState
    - Messages and terms are converted with a private copy of the state
    - Junk annotations become syntax errors, one per annotation
    - collect_variables(): Variable references of a pattern (work-stack walk)
    - patterns_equal(): Structural pattern equality, spans ignored

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol

from fluent.syntax import ast

from ftlanalyzer.annotations import (
    AnnotationItem,
    parse_diagnostic_directive,
    parse_param,
    read_annotations,
    strip_remark,
)
from ftlanalyzer.constants import ALL_ATTRIBUTES
from ftlanalyzer.diagnostics.codes import Report, Span, WarnCode
from ftlanalyzer.entries import (
    AnnotationState,
    AttributeInfo,
    EntryInfo,
    MessageInfo,
    TermInfo,
)
from ftlanalyzer.enums import TranslatePolicy

if TYPE_CHECKING:
    from ftlanalyzer.model import FileInfo

__all__ = [
    "DiagnosticSink",
    "EntryNormalizer",
    "collect_variables",
    "patterns_equal",
]

logger = logging.getLogger(__name__)

_TRANSLATE_DIRECTIVES: dict[str, TranslatePolicy] = {
    "@translate": TranslatePolicy.REQUIRED,
    "@translate-optional": TranslatePolicy.OPTIONAL,
    "@do-not-translate": TranslatePolicy.DISALLOWED,
}

_EXPECT_IDENTICAL = "@expect-identical"


class DiagnosticSink(Protocol):
    """Receiver of diagnostics found while normalizing a file."""

    def add_entry_warning(
        self, file: FileInfo, entry: EntryInfo, code: WarnCode, *args: str
    ) -> None:
        """Report a warning at an entry's identifier."""

    def add_error(self, file: FileInfo, report: Report) -> None:
        """Report a syntax error."""


def collect_variables(pattern: ast.Pattern | None) -> set[str]:
    """Collect the names of variables referenced in a pattern.

    Walks placeables, function positional arguments, select selectors and
    variant patterns with an explicit stack, so nesting depth is unbounded.
    Named function arguments only accept literals and are not visited.

    Args:
        pattern: Pattern to inspect, or None

    Returns:
        Variable names without the "$" sigil
    """
    variables: set[str] = set()
    if pattern is None:
        return variables

    stack: list[ast.BaseNode] = list(pattern.elements)
    while stack:
        node = stack.pop()
        match node:
            case ast.VariableReference():
                variables.add(node.id.name)
            case ast.Placeable():
                stack.append(node.expression)
            case ast.FunctionReference():
                stack.extend(node.arguments.positional)
            case ast.SelectExpression():
                stack.append(node.selector)
                stack.extend(node.variants)
            case ast.Variant():
                stack.extend(node.value.elements)

    return variables


def patterns_equal(pattern: ast.Pattern | None, other: ast.Pattern | None) -> bool:
    """Check whether two patterns are structurally equal.

    Two absent patterns are equal; an absent and a present pattern are not.
    """
    if pattern is None or other is None:
        return pattern is other
    return pattern.equals(other)


def _id_span(identifier: ast.Identifier, prefix: int = 0) -> Span:
    span = identifier.span
    if span is None:
        return Span(0, 0)
    return Span(span.start - prefix, span.end)


class EntryNormalizer:
    """Converts parsed resource items into normalized records.

    The normalizer holds no per-file state; every call to normalize()
    creates a fresh AnnotationState.
    """

    __slots__ = ("_sink",)

    def __init__(self, sink: DiagnosticSink) -> None:
        """Initialize the normalizer.

        Args:
            sink: Receiver of duplicate-attribute warnings and syntax errors
        """
        self._sink = sink

    def normalize(self, file: FileInfo, body: Iterable[ast.BaseNode]) -> AnnotationState:
        """Normalize the top-level items of a file into its entry lists.

        Resource comments take effect for entries read after them; their
        placement in the file is not corrected.

        Args:
            file: File record to fill; its entry lists are appended to
            body: Parsed top-level items in file order

        Returns:
            The annotation state after the last item
        """
        state = AnnotationState(file=file)

        for item in body:
            match item:
                case ast.Term():
                    file.terms.append(self.convert_term(item, state))
                case ast.Message():
                    file.messages.append(self.convert_message(item, state))
                case ast.ResourceComment():
                    extracted = read_annotations(item.content or "")
                    self.apply_resource_annotations(state, extracted.annotations)
                case ast.Junk():
                    self._report_junk(file, item)

        self._apply_file_state(file, state)
        return state

    def convert_message(self, node: ast.Message, state: AnnotationState) -> MessageInfo:
        """Convert a parsed message using the current annotation state."""
        info = MessageInfo(
            id=node.id.name,
            name=node.id.name,
            id_span=_id_span(node.id),
            translate=state.translate,
            value=node.value,
            variables=collect_variables(node.value),
            ignore=set(state.ignore),
            ignore_all=state.ignore_all,
        )
        self._complete_entry(info, node, state)
        return info

    def convert_term(self, node: ast.Term, state: AnnotationState) -> TermInfo:
        """Convert a parsed term using the current annotation state.

        The identifier span is widened to cover the leading "-".
        """
        info = TermInfo(
            id=node.id.name,
            name=f"-{node.id.name}",
            id_span=_id_span(node.id, prefix=1),
            translate=state.translate,
            value=node.value,
            variables=collect_variables(node.value),
            ignore=set(state.ignore),
            ignore_all=state.ignore_all,
        )
        self._complete_entry(info, node, state)
        return info

    def _complete_entry(
        self,
        info: MessageInfo | TermInfo,
        node: ast.Message | ast.Term,
        state: AnnotationState,
    ) -> None:
        """Attach attributes and apply the entry's own annotations."""
        duplicates: list[AttributeInfo] = []

        for attribute in node.attributes:
            attr_info = AttributeInfo(
                id=attribute.id.name,
                name=f"{info.name}.{attribute.id.name}",
                id_span=_id_span(attribute.id),
                translate=state.translate,
                value=attribute.value,
                variables=collect_variables(attribute.value),
                owner=info,
            )
            if attr_info.id in info.attributes:
                duplicates.append(attr_info)
            info.attributes[attr_info.id] = attr_info

        if node.comment is not None:
            extracted = read_annotations(node.comment.content or "")
            self.apply_entry_annotations(info, extracted.annotations)
            if extracted.comment:
                info.comment = extracted.comment

        # Reported after the entry's annotations so they can suppress it.
        for attr_info in duplicates:
            self._sink.add_entry_warning(
                state.file, attr_info, WarnCode.DUPLICATE, "attribute", attr_info.name
            )

    def apply_entry_annotations(
        self, info: MessageInfo | TermInfo, annotations: Sequence[AnnotationItem]
    ) -> None:
        """Apply the directives of an entry comment, in order."""
        for annotation in annotations:
            match annotation.name:
                case "@diagnostic":
                    _apply_diagnostic(info, annotation.value)
                case "@param" | "@param-attribute":
                    _apply_param(info, annotation)
                case "@translate" | "@translate-optional" | "@do-not-translate":
                    _apply_targeted(info, annotation)
                case "@expect-identical":
                    _apply_targeted(info, annotation)
                case _:
                    logger.debug("Skipping unknown entry annotation %s", annotation.name)

    def apply_resource_annotations(
        self, state: AnnotationState, annotations: Sequence[AnnotationItem]
    ) -> None:
        """Apply the directives of a resource comment, in order."""
        for annotation in annotations:
            match annotation.name:
                case "@diagnostic":
                    _apply_diagnostic(state, annotation.value)
                case "@global":
                    state.is_global = True
                case "@bundle":
                    state.bundle = strip_remark(annotation.value) or None
                case "@translate" | "@translate-optional" | "@do-not-translate":
                    state.translate = _TRANSLATE_DIRECTIVES[annotation.name]
                case _:
                    logger.debug("Skipping unknown resource annotation %s", annotation.name)

    def _report_junk(self, file: FileInfo, junk: ast.Junk) -> None:
        for annotation in junk.annotations:
            span = annotation.span or junk.span
            self._sink.add_error(
                file,
                Report(
                    code=annotation.code,
                    message=annotation.message,
                    span=Span(span.start, span.end) if span is not None else Span(0, 0),
                ),
            )

    @staticmethod
    def _apply_file_state(file: FileInfo, state: AnnotationState) -> None:
        """Derive the file's bundle and file-level ignores from the final state."""
        if state.is_global:
            file.bundle = ""
        elif state.bundle:
            file.bundle = state.bundle

        ignore_unknown = state.ignore_all or bool(
            state.ignore & {WarnCode.UNKNOWN_FILE, "unknown"}
        )
        if ignore_unknown:
            file.ignore = file.ignore or set()
            file.ignore.add(WarnCode.UNKNOWN_FILE)

        # Files that need no translation are never reported missing.
        ignore_missing = (
            state.ignore_all
            or state.translate != TranslatePolicy.REQUIRED
            or bool(state.ignore & {WarnCode.MISSING_FILE, "missing"})
        )
        if ignore_missing:
            file.ignore = file.ignore or set()
            file.ignore.add(WarnCode.MISSING_FILE)


def _apply_diagnostic(target: MessageInfo | TermInfo | AnnotationState, value: str) -> None:
    directive = parse_diagnostic_directive(value)
    if directive is None:
        return

    if not directive.codes:
        target.ignore_all = not directive.enable
    elif directive.enable:
        target.ignore.difference_update(directive.codes)
    else:
        target.ignore.update(directive.codes)


def _apply_param(info: MessageInfo | TermInfo, annotation: AnnotationItem) -> None:
    declaration = parse_param(annotation.name, annotation.value)
    if declaration is None:
        return

    param = declaration.param
    if declaration.attribute is None:
        info.params[param.id] = param
        return

    attribute = info.attributes.get(declaration.attribute)
    if attribute is not None:
        attribute.params[param.id] = param


def _apply_targeted(info: MessageInfo | TermInfo, annotation: AnnotationItem) -> None:
    """Apply a directive targeting the entry, one attribute, or every attribute."""
    target = strip_remark(annotation.value)

    targets: list[MessageInfo | TermInfo | AttributeInfo]
    if not target:
        targets = [info]
    elif target == ALL_ATTRIBUTES:
        targets = list(info.attributes.values())
    elif target in info.attributes:
        targets = [info.attributes[target]]
    else:
        return

    for item in targets:
        if annotation.name == _EXPECT_IDENTICAL:
            item.expect_identical = True
        else:
            item.translate = _TRANSLATE_DIRECTIVES[annotation.name]
