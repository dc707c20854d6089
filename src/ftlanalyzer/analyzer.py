"""Cross-locale analysis of resource files.

FtlAnalyzer parses every discovered file, runs intra-file checks on files
without a source counterpart, and compares every other locale of a
collection against the source locale.

Architecture:
    - read_file(): Parse and normalize one file, clearing its old results
    - check_source_group(): Duplicate ids and parameter annotations
    - compare_groups() -> compare_files() -> compare_messages(): Differential checks
    - DiagnosticStore: Diagnostics indexed by file URI

Suppression:
    A warning code is dropped when the entry's ignore set, the file's ignore
    set, or the engine-wide ignore list names the code or its category.
    An entry with ignore_all set drops every warning attached to it or to
    its attributes.

Python 3.13+.
"""

from __future__ import annotations

import hashlib
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from fluent.syntax import parse

from ftlanalyzer.constants import DEFAULT_SOURCE_LOCALE, RESOURCE_EXTENSION
from ftlanalyzer.diagnostics import (
    Diagnostic,
    DiagnosticStore,
    LineOffsetCache,
    Report,
    Span,
    WarnCode,
    create_warning,
    get_warning_category,
    span_to_range,
)
from ftlanalyzer.discovery import discover
from ftlanalyzer.entries import (
    AttributeInfo,
    EntryInfo,
    MessageInfo,
    ParamInfo,
    TermInfo,
)
from ftlanalyzer.enums import Severity, TranslatePolicy
from ftlanalyzer.locale_utils import resolve_source_group
from ftlanalyzer.model import (
    DiscoveryResult,
    FileCollection,
    FileGroup,
    FileInfo,
    bundle_display,
)
from ftlanalyzer.normalize import EntryNormalizer, patterns_equal

__all__ = ["FtlAnalyzer"]

logger = logging.getLogger(__name__)

# File-level warnings point at the start of the file.
_FILE_SPAN = Span(0, 0)

# Missing messages point at the last character of the target file.
_END_SPAN = Span(-1, -1)


def _content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]


class FtlAnalyzer:
    """Analyzer for collections of resource files.

    Example:
        >>> analyzer = FtlAnalyzer(source_locale="en")
        >>> analyzer.process_discovered_files(analyzer.discover("locales"))
        >>> for diagnostic in analyzer.get_diagnostics():
        ...     print(diagnostic.code, diagnostic.message)

    Attributes:
        source_locale: Locale every other locale is compared against
        ignore: Codes and categories suppressed everywhere
        use_relative_paths: Show paths relative to the discovery base path
    """

    __slots__ = (
        "_line_caches",
        "_normalizer",
        "_store",
        "ignore",
        "source_locale",
        "use_relative_paths",
    )

    def __init__(
        self,
        source_locale: str = DEFAULT_SOURCE_LOCALE,
        ignore: Iterable[str] = (),
        use_relative_paths: bool = False,
    ) -> None:
        """Initialize the analyzer.

        Args:
            source_locale: Locale folder name (or tag) of the source locale
            ignore: Codes and categories to suppress everywhere
            use_relative_paths: Show relative instead of absolute paths in messages
        """
        self.source_locale = source_locale
        self.ignore: set[str] = set(ignore)
        self.use_relative_paths = use_relative_paths
        self._store = DiagnosticStore()
        self._normalizer = EntryNormalizer(self)
        self._line_caches: dict[str, LineOffsetCache] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def discover(base_path: str | Path) -> DiscoveryResult:
        """Run discovery on a directory.

        Raises:
            DiscoveryError: If a directory cannot be listed
        """
        return discover(base_path)

    def get_diagnostics(self) -> list[Diagnostic]:
        """Get all diagnostics as a flat list."""
        return self._store.get_diagnostics()

    def get_diagnostics_for_uri(self, uri: str) -> list[Diagnostic]:
        """Get the diagnostics of one file."""
        return self._store.get_diagnostics_for_uri(uri)

    def process_collection(self, collection: FileCollection) -> None:
        """Analyze one collection.

        Every group is read before any comparison starts, so the source
        group is complete when other groups are compared against it.
        """
        for group in collection.groups.values():
            self.read_group(group)

        src_group = resolve_source_group(collection.groups, self.source_locale)
        if src_group is None:
            logger.debug(
                "No %s group in collection %s, running intra-file checks only",
                self.source_locale,
                collection.path.relative,
            )
            for group in collection.groups.values():
                self.check_source_group(group)
            return

        for group in collection.groups.values():
            if group is src_group:
                self.check_source_group(group)
            else:
                self.compare_groups(group, src_group)

    def process_discovered_files(self, discovered: DiscoveryResult) -> None:
        """Analyze every collection, then the ungrouped files."""
        for collection in discovered.collections:
            self.process_collection(collection)

        self.read_group(discovered.ungrouped)
        self.check_source_group(discovered.ungrouped)

    def read_group(self, group: FileGroup) -> None:
        """Read every file of a group."""
        for file in group.files.values():
            self.read_file(file)

    def read_file(self, file: FileInfo, content: str | None = None) -> None:
        """Parse a file and normalize its entries.

        Previous results for the file are dropped first, so reading a file
        twice never duplicates its entries or diagnostics. A file that
        cannot be read is logged and left empty.

        Args:
            file: File to read
            content: Content to use instead of reading the file from disk
        """
        self._store.clear(file.uri)
        self._line_caches.pop(file.uri, None)
        file.messages.clear()
        file.terms.clear()
        file.bundle = None
        file.ignore = None

        if content is None:
            try:
                content = Path(file.path.absolute).read_text(encoding="utf-8", newline="")
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Failed to read file %s: %s", file.path.absolute, e)
                file.content = ""
                file.hash = None
                return

        resource = parse(content, with_spans=True)
        file.content = content
        file.hash = _content_hash(content)

        self._normalizer.normalize(file, resource.body)
        logger.debug(
            "Parsed %s: %d messages, %d terms",
            file.path.relative,
            len(file.messages),
            len(file.terms),
        )

    # ------------------------------------------------------------------
    # Diagnostic sink
    # ------------------------------------------------------------------

    def add_error(self, file: FileInfo, report: Report) -> None:
        """Add a syntax error to a file."""
        self._add_diagnostic(Severity.ERROR, file, report)

    def add_entry_warning(
        self, file: FileInfo, entry: EntryInfo, code: WarnCode, *args: str
    ) -> None:
        """Add a warning at an entry's identifier, unless the entry suppresses it."""
        if entry.ignore_all or self._should_ignore(code, entry.ignore, file.ignore or ()):
            return

        self._add_diagnostic(Severity.WARNING, file, create_warning(code, entry.id_span, *args))

    # ------------------------------------------------------------------
    # Intra-file checks
    # ------------------------------------------------------------------

    def check_source_group(self, group: FileGroup) -> None:
        """Check a group that has no source group to compare against.

        Reports repeated message and term ids, and variables used without a
        @param declaration.
        """
        for file in group.files.values():
            seen_messages: set[str] = set()
            for message in file.messages:
                if message.id in seen_messages:
                    self.add_entry_warning(
                        file, message, WarnCode.DUPLICATE, "message", message.name
                    )
                seen_messages.add(message.id)
                self.check_message_params(file, message, is_source=True)

            self._check_duplicate_terms(file)

    def _check_duplicate_terms(self, file: FileInfo) -> None:
        seen_terms: set[str] = set()
        for term in file.terms:
            if term.id in seen_terms:
                self.add_entry_warning(file, term, WarnCode.DUPLICATE, "term", term.name)
            seen_terms.add(term.id)

    # ------------------------------------------------------------------
    # Differential checks
    # ------------------------------------------------------------------

    def compare_groups(self, group: FileGroup, src_group: FileGroup) -> None:
        """Compare the files of a locale group with the source group by name."""
        file_by_name = {file.name: file for file in group.files.values()}

        src_names: set[str] = set()
        for src_file in src_group.files.values():
            src_names.add(src_file.name)

            file = file_by_name.get(src_file.name)
            if file is None:
                self._add_missing_file_warning(src_file, group.locale)
                continue

            self.compare_files(file, src_file)

        for file in group.files.values():
            if file.name not in src_names:
                self._add_unknown_file_warning(file)

    def compare_files(self, file: FileInfo, src_file: FileInfo) -> None:
        """Compare a file with its source-locale counterpart.

        A bundle mismatch is reported alone; nothing else is compared.
        """
        if file.bundle != src_file.bundle:
            self._add_file_warning(
                file,
                WarnCode.MISMATCH_FILE_BUNDLE,
                self._display_path(file),
                bundle_display(file.bundle),
                bundle_display(src_file.bundle),
            )
            return

        src_terms = {term.id: term for term in src_file.terms}
        self._check_duplicate_terms(file)
        for term in file.terms:
            src_term = src_terms.get(term.id)
            if src_term is not None:
                self.compare_term_attributes(file, term, src_term)

        message_by_id: dict[str, MessageInfo] = {}
        for message in file.messages:
            if message.id in message_by_id:
                self.add_entry_warning(file, message, WarnCode.DUPLICATE, "message", message.name)
            message_by_id[message.id] = message

        src_ids: set[str] = set()
        for src_message in src_file.messages:
            src_ids.add(src_message.id)

            message = message_by_id.get(src_message.id)
            if message is None:
                self._add_missing_message_warning(file, src_message)
                continue

            self.compare_messages(file, message, src_message)

        for message in file.messages:
            if message.id not in src_ids:
                self.add_entry_warning(file, message, WarnCode.UNKNOWN_MESSAGE, message.id)

    def compare_messages(
        self, file: FileInfo, message: MessageInfo, src_message: MessageInfo
    ) -> None:
        """Compare a message with its source-locale counterpart."""
        if src_message.translate == TranslatePolicy.DISALLOWED:
            self.add_entry_warning(
                file, message, WarnCode.DO_NOT_TRANSLATE, "Message", message.name
            )

        # A message without a value only carries attributes; its identity
        # with the source says nothing.
        if message.value is not None:
            is_equal = patterns_equal(message.value, src_message.value)
            expect_equal = message.expect_identical or src_message.expect_identical
            if is_equal != expect_equal:
                code = WarnCode.IDENTICAL if is_equal else WarnCode.MISMATCH_IDENTICAL
                self.add_entry_warning(file, message, code, "Message", message.name)

        self.check_message_params(file, message, src_message)
        self.compare_message_attributes(file, message, src_message)

    def compare_message_attributes(
        self, file: FileInfo, message: MessageInfo, src_message: MessageInfo
    ) -> None:
        """Compare the attributes of a message with those of its source."""
        src_attributes = src_message.attributes

        for attr in message.attributes.values():
            src_attr = src_attributes.get(attr.id)
            if src_attr is None:
                self.add_entry_warning(file, attr, WarnCode.UNKNOWN_ATTRIBUTE, attr.id)
                continue

            if src_attr.translate == TranslatePolicy.DISALLOWED:
                self.add_entry_warning(
                    file, attr, WarnCode.DO_NOT_TRANSLATE, "Attribute", attr.name
                )

            is_equal = patterns_equal(attr.value, src_attr.value)
            expect_equal = attr.expect_identical or src_attr.expect_identical
            if is_equal != expect_equal:
                code = WarnCode.IDENTICAL if is_equal else WarnCode.MISMATCH_IDENTICAL
                self.add_entry_warning(file, attr, code, "Attribute", attr.name)

        for src_attr in src_attributes.values():
            if src_attr.translate != TranslatePolicy.REQUIRED:
                continue
            if src_attr.id not in message.attributes:
                self.add_entry_warning(
                    file, message, WarnCode.MISSING_ATTRIBUTE, f"{message.name}.{src_attr.id}"
                )

    def compare_term_attributes(self, file: FileInfo, term: TermInfo, src_term: TermInfo) -> None:
        """Compare the attributes of a term with those of its source.

        Term attributes are private to the locale, so only translating a
        do-not-translate attribute is reported.
        """
        for attr in term.attributes.values():
            src_attr = src_term.attributes.get(attr.id)
            if src_attr is not None and src_attr.translate == TranslatePolicy.DISALLOWED:
                self.add_entry_warning(
                    file, attr, WarnCode.DO_NOT_TRANSLATE, "Attribute", attr.name
                )

    # ------------------------------------------------------------------
    # Parameters and variables
    # ------------------------------------------------------------------

    def check_message_params(
        self,
        file: FileInfo,
        message: MessageInfo,
        src_message: MessageInfo | None = None,
        *,
        is_source: bool = False,
    ) -> None:
        """Check parameter declarations of a message and its attributes."""
        self.check_params(file, message, src_message, is_source=is_source)

        src_attributes = src_message.attributes if src_message is not None else {}
        for attr in message.attributes.values():
            self.check_params(file, attr, src_attributes.get(attr.id), is_source=is_source)

    def check_params(
        self,
        file: FileInfo,
        entry: MessageInfo | AttributeInfo,
        src_entry: MessageInfo | AttributeInfo | None = None,
        *,
        is_source: bool = False,
    ) -> None:
        """Check parameter declarations against variable references.

        Source declarations are overlaid with the entry's own declarations,
        the entry's winning on a name collision.

        Args:
            file: File holding the entry
            entry: Message or attribute to check
            src_entry: Source-locale counterpart, if any
            is_source: Whether the entry itself belongs to the source locale
        """
        is_attribute = isinstance(entry, AttributeInfo)
        kind = "attribute" if is_attribute else "message"

        def directive(param_id: str) -> str:
            if is_attribute:
                return f"@param-attribute {entry.id} ${param_id}"
            return f"@param ${param_id}"

        params: dict[str, ParamInfo] = dict(src_entry.params) if src_entry is not None else {}
        for param in entry.params.values():
            src_param = params.get(param.id)
            params[param.id] = param
            if src_param is not None and src_param.type != param.type:
                self.add_entry_warning(
                    file,
                    entry,
                    WarnCode.ANNOTATION_TYPE_MISMATCH,
                    directive(param.id),
                    kind,
                    entry.name,
                )

        for variable in sorted(entry.variables):
            if is_source and variable not in params:
                self.add_entry_warning(
                    file,
                    entry,
                    WarnCode.ANNOTATION_MISSING,
                    directive(variable),
                    kind,
                    entry.name,
                )

            if is_source or src_entry is None:
                continue

            if variable not in src_entry.variables and variable not in params:
                self.add_entry_warning(
                    file, entry, WarnCode.UNKNOWN_VARIABLE, f"${variable}", kind
                )

        for param in params.values():
            if param.required and param.id not in entry.variables:
                self.add_entry_warning(
                    file,
                    entry,
                    WarnCode.MISSING_REQUIRED_VARIABLE,
                    f"${param.id}",
                    kind,
                    entry.name,
                )

    # ------------------------------------------------------------------
    # File-level warnings
    # ------------------------------------------------------------------

    def _add_missing_file_warning(self, src_file: FileInfo, locale: str) -> None:
        """Warn on the source file that a locale lacks its counterpart."""
        if src_file.ignore and WarnCode.MISSING_FILE in src_file.ignore:
            return

        display_path = self._display_path(src_file)
        missing_path = os.path.join(
            os.path.dirname(os.path.dirname(display_path)),
            locale,
            f"{src_file.name}{RESOURCE_EXTENSION}",
        )
        self._add_file_warning(src_file, WarnCode.MISSING_FILE, missing_path)

    def _add_unknown_file_warning(self, file: FileInfo) -> None:
        if file.ignore and WarnCode.UNKNOWN_FILE in file.ignore:
            return

        self._add_file_warning(file, WarnCode.UNKNOWN_FILE, self._display_path(file))

    def _add_missing_message_warning(self, file: FileInfo, src_message: MessageInfo) -> None:
        """Warn on the target file that a required source message is absent."""
        if src_message.translate != TranslatePolicy.REQUIRED:
            return

        code = WarnCode.MISSING_MESSAGE
        if src_message.ignore_all or self._should_ignore(
            code, src_message.ignore, file.ignore or ()
        ):
            return

        self._add_diagnostic(
            Severity.WARNING, file, create_warning(code, _END_SPAN, src_message.name)
        )

    def _add_file_warning(self, file: FileInfo, code: WarnCode, *args: str) -> None:
        self._add_diagnostic(Severity.WARNING, file, create_warning(code, _FILE_SPAN, *args))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _add_diagnostic(self, severity: Severity, file: FileInfo, report: Report) -> None:
        """Place a report in a file and store it, unless ignored engine-wide."""
        if self._should_ignore(report.code):
            return

        cache = self._line_caches.get(file.uri)
        if cache is None:
            cache = LineOffsetCache(file.content)
            self._line_caches[file.uri] = cache

        self._store.add_diagnostic(
            Diagnostic(
                severity=severity,
                code=report.code,
                message=report.message,
                uri=file.uri,
                range=span_to_range(report.span, cache),
            )
        )

    def _should_ignore(self, code: str, *ignore_sets: Iterable[str]) -> bool:
        """Check whether a code or its category is suppressed.

        Args:
            code: Diagnostic code
            *ignore_sets: Entry- or file-level ignore sets; the engine-wide
                list is always consulted

        Example:
            >>> FtlAnalyzer(ignore=["missing"])._should_ignore("missing-message")
            True
            >>> FtlAnalyzer(ignore=["message"])._should_ignore("missing-message")
            False
        """
        category = get_warning_category(code)
        for ignore in (*ignore_sets, self.ignore):
            if code in ignore or category in ignore:
                return True
        return False

    def _display_path(self, file: FileInfo) -> str:
        return file.path.relative if self.use_relative_paths else file.path.absolute
