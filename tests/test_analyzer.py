"""Tests for cross-locale analysis."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ftlanalyzer import FtlAnalyzer, Severity
from ftlanalyzer.diagnostics import Diagnostic, WarnCode
from ftlanalyzer.model import FileGroup, FileInfo
from tests.strategies import ftl_identifiers, ftl_message_sources


def _write(base: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = base / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _analyze(base: Path, files: dict[str, str], **kwargs: object) -> FtlAnalyzer:
    _write(base, files)
    analyzer = FtlAnalyzer(**kwargs)  # type: ignore[arg-type]
    analyzer.process_discovered_files(analyzer.discover(base))
    return analyzer


def _uri(base: Path, relative: str) -> str:
    return (base / relative).resolve().as_uri()


def _for(analyzer: FtlAnalyzer, base: Path, relative: str) -> list[Diagnostic]:
    return analyzer.get_diagnostics_for_uri(_uri(base, relative))


def _codes(analyzer: FtlAnalyzer, base: Path, relative: str) -> list[str]:
    return [d.code for d in _for(analyzer, base, relative)]


# ============================================================================
# FILE-LEVEL CHECKS
# ============================================================================


class TestFileChecks:
    """Test missing, unknown and mismatched files."""

    def test_missing_file_in_locale(self, tmp_path: Path) -> None:
        """A source file without a counterpart is reported on the source file."""
        (tmp_path / "strings" / "fr").mkdir(parents=True)
        analyzer = _analyze(tmp_path, {"strings/en/greet.ftl": "greeting = Hello\n"})

        (diagnostic,) = analyzer.get_diagnostics()
        expected_path = tmp_path.resolve() / "strings" / "fr" / "greet.ftl"
        assert diagnostic.code == WarnCode.MISSING_FILE
        assert diagnostic.severity == Severity.WARNING
        assert diagnostic.uri == _uri(tmp_path, "strings/en/greet.ftl")
        assert diagnostic.message == f"File {expected_path} is missing"
        assert (diagnostic.line, diagnostic.column) == (1, 1)

    def test_missing_file_uses_relative_path(self, tmp_path: Path) -> None:
        """With relative paths the synthesized path is relative to the base."""
        (tmp_path / "strings" / "fr").mkdir(parents=True)
        analyzer = _analyze(
            tmp_path,
            {"strings/en/greet.ftl": "greeting = Hello\n"},
            use_relative_paths=True,
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.message == f"File {Path('strings/fr/greet.ftl')} is missing"

    def test_optional_file_is_never_missing(self, tmp_path: Path) -> None:
        """A file-wide optional policy suppresses missing-file."""
        (tmp_path / "strings" / "fr").mkdir(parents=True)
        analyzer = _analyze(
            tmp_path,
            {"strings/en/greet.ftl": "### @translate-optional\n\ngreeting = Hello\n"},
        )

        assert analyzer.get_diagnostics() == []

    def test_unknown_file(self, tmp_path: Path) -> None:
        """A target file without a source counterpart is reported on itself."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "a = A\n",
                "strings/fr/a.ftl": "a = B\n",
                "strings/fr/extra.ftl": "x = X\n",
            },
        )

        assert _codes(analyzer, tmp_path, "strings/fr/extra.ftl") == [WarnCode.UNKNOWN_FILE]
        assert _codes(analyzer, tmp_path, "strings/fr/a.ftl") == []

    def test_unknown_file_can_be_disabled(self, tmp_path: Path) -> None:
        """A resource-level directive suppresses unknown-file."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "a = A\n",
                "strings/fr/a.ftl": "a = B\n",
                "strings/fr/extra.ftl": "### @diagnostic disable unknown-file\n\nx = X\n",
            },
        )

        assert analyzer.get_diagnostics() == []

    def test_bundle_mismatch_stops_comparison(self, tmp_path: Path) -> None:
        """Files in different bundles are not compared any further."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "### @bundle menu\n\na = A\nb = B\n",
                "strings/fr/a.ftl": "a = A\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        path = tmp_path.resolve() / "strings" / "fr" / "a.ftl"
        assert diagnostic.code == WarnCode.MISMATCH_FILE_BUNDLE
        assert diagnostic.message == (
            f'File {path} is assigned to the default bundle, but to the "menu" bundle '
            "in the source locale"
        )


# ============================================================================
# MESSAGE-LEVEL CHECKS
# ============================================================================


class TestMessageChecks:
    """Test message comparison against the source locale."""

    def test_duplicate_message_points_at_second_id(self, tmp_path: Path) -> None:
        """Only the repeated id is reported."""
        analyzer = _analyze(tmp_path, {"en/a.ftl": "msg = Hi\nmsg = Hi\n"})

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.DUPLICATE
        assert diagnostic.message == 'Duplicate message "msg"'
        assert (diagnostic.line, diagnostic.column) == (2, 1)

    def test_duplicate_term_in_target_file(self, tmp_path: Path) -> None:
        """Repeated terms are reported in target files too."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "-brand = Firefox\n",
                "strings/fr/a.ftl": "-brand = Firefox\n-brand = Firefox\n",
            },
        )

        diagnostics = _for(analyzer, tmp_path, "strings/fr/a.ftl")
        assert [d.message for d in diagnostics] == ['Duplicate term "-brand"']

    def test_optional_message_is_not_missing(self, tmp_path: Path) -> None:
        """A source message with an optional policy may be absent."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @translate-optional\nmsg = Hi\nother = Other\n",
                "strings/fr/a.ftl": "other = Autre\n",
            },
        )

        assert WarnCode.MISSING_MESSAGE not in _codes(analyzer, tmp_path, "strings/fr/a.ftl")
        assert analyzer.get_diagnostics() == []

    def test_missing_message_points_at_end_of_file(self, tmp_path: Path) -> None:
        """Missing messages are placed on the last character of the target."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "a = A\nb = B\nc = C\n",
                "strings/fr/a.ftl": "a = X\nb = Y\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.MISSING_MESSAGE
        assert diagnostic.message == 'Message "c" is missing'
        assert diagnostic.uri == _uri(tmp_path, "strings/fr/a.ftl")
        assert (diagnostic.line, diagnostic.column) == (2, 6)

    def test_unknown_message(self, tmp_path: Path) -> None:
        """Target messages absent from the source are reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "a = A\n",
                "strings/fr/a.ftl": "a = X\nextra = Y\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.UNKNOWN_MESSAGE
        assert (diagnostic.line, diagnostic.column) == (2, 1)

    def test_identical_translation(self, tmp_path: Path) -> None:
        """An untranslated value is reported."""
        analyzer = _analyze(
            tmp_path,
            {"strings/en/a.ftl": "msg = Hello\n", "strings/fr/a.ftl": "msg = Hello\n"},
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.IDENTICAL
        assert diagnostic.message == (
            'Message "msg" is identical to the source locale message'
        )

    def test_expected_identical_translation(self, tmp_path: Path) -> None:
        """@expect-identical flips the identity check."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @expect-identical\nbrand = Firefox\nname = Name\n",
                "strings/fr/a.ftl": "brand = Feuerfuchs\nname = Nom\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.MISMATCH_IDENTICAL
        assert (diagnostic.line, diagnostic.column) == (1, 1)

    def test_value_less_target_is_never_mismatched(self, tmp_path: Path) -> None:
        """A target without a value is not reported as differing from the source."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @expect-identical\nmsg = Hello\n",
                "strings/fr/a.ftl": "msg =\n    .t = X\n",
            },
        )

        assert [d.code for d in analyzer.get_diagnostics()] == [WarnCode.UNKNOWN_ATTRIBUTE]

    def test_value_less_messages_are_never_identical(self, tmp_path: Path) -> None:
        """Two messages without values are not reported as untranslated."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "msg =\n    .t = A\n",
                "strings/fr/a.ftl": "msg =\n    .t = B\n",
            },
        )

        assert analyzer.get_diagnostics() == []

    def test_do_not_translate(self, tmp_path: Path) -> None:
        """Translating a do-not-translate message is reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @do-not-translate\nbrand = Firefox\n",
                "strings/fr/a.ftl": "brand = Feuerfuchs\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.DO_NOT_TRANSLATE
        assert diagnostic.message == 'Message "brand" should not be translated'

    def test_attribute_differences(self, tmp_path: Path) -> None:
        """Missing and unknown attributes are both reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "msg = M\n    .title = T\n",
                "strings/fr/a.ftl": "msg = N\n    .label = L\n",
            },
        )

        messages = {d.code: d.message for d in analyzer.get_diagnostics()}
        assert messages == {
            WarnCode.UNKNOWN_ATTRIBUTE: (
                'Attribute "label" is defined here, but is not defined in the source locale'
            ),
            WarnCode.MISSING_ATTRIBUTE: 'Attribute "msg.title" is missing',
        }

    def test_term_attribute_do_not_translate(self, tmp_path: Path) -> None:
        """Translating a do-not-translate term attribute is reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": (
                    "# @do-not-translate title\n-brand = Firefox\n    .title = Firefox\n"
                ),
                "strings/fr/a.ftl": "-brand = Feuerfuchs\n    .title = Feuerfuchs\n",
            },
        )

        reported = [(d.code, d.message) for d in analyzer.get_diagnostics()]
        assert reported == [
            (WarnCode.DO_NOT_TRANSLATE, 'Attribute "-brand.title" should not be translated')
        ]

    def test_message_attribute_do_not_translate(self, tmp_path: Path) -> None:
        """Translating a do-not-translate message attribute is reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @do-not-translate title\nm = M\n    .title = T\n",
                "strings/fr/a.ftl": "m = N\n    .title = Titre\n",
            },
        )

        reported = [(d.code, d.message) for d in analyzer.get_diagnostics()]
        assert reported == [
            (WarnCode.DO_NOT_TRANSLATE, 'Attribute "m.title" should not be translated')
        ]

    def test_identical_attribute(self, tmp_path: Path) -> None:
        """An attribute copied unchanged from the source is reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "m = M\n    .title = T\n",
                "strings/fr/a.ftl": "m = N\n    .title = T\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.IDENTICAL
        assert diagnostic.message == (
            'Attribute "m.title" is identical to the source locale attribute'
        )
        assert (diagnostic.line, diagnostic.column) == (2, 6)

    def test_expected_identical_attribute(self, tmp_path: Path) -> None:
        """An attribute expected to match the source but differing is reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @expect-identical label\nm = M\n    .label = L\n",
                "strings/fr/a.ftl": "m = N\n    .label = X\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.MISMATCH_IDENTICAL
        assert diagnostic.message == (
            'Attribute "m.label" should be identical to the source locale attribute'
        )

    def test_attribute_checks_in_target_order(self, tmp_path: Path) -> None:
        """Policy and identity checks run per attribute, in target order."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": (
                    "# @do-not-translate title\n# @expect-identical label\n"
                    "m = M\n    .title = T\n    .label = L\n"
                ),
                "strings/fr/a.ftl": "m = N\n    .title = T\n    .label = X\n",
            },
        )

        reported = [(d.code, d.message.split('"')[1]) for d in analyzer.get_diagnostics()]
        assert reported == [
            (WarnCode.DO_NOT_TRANSLATE, "m.title"),
            (WarnCode.IDENTICAL, "m.title"),
            (WarnCode.MISMATCH_IDENTICAL, "m.label"),
        ]

    def test_source_locale_matches_other_spellings(self, tmp_path: Path) -> None:
        """The source folder is found through its canonical locale."""
        analyzer = _analyze(
            tmp_path,
            {"strings/en-US/a.ftl": "a = A\nb = B\n", "strings/fr/a.ftl": "a = X\n"},
            source_locale="en_us",
        )

        assert _codes(analyzer, tmp_path, "strings/fr/a.ftl") == [WarnCode.MISSING_MESSAGE]

    def test_collection_without_source_locale(self, tmp_path: Path) -> None:
        """Without a source group every group gets intra-file checks only."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/de/a.ftl": "a = A\na = A\n",
                "strings/fr/b.ftl": "b = B\n",
            },
        )

        assert [d.code for d in analyzer.get_diagnostics()] == [WarnCode.DUPLICATE]


# ============================================================================
# PARAMETERS AND VARIABLES
# ============================================================================


class TestParamChecks:
    """Test @param declarations against variable references."""

    def test_missing_required_variable(self, tmp_path: Path) -> None:
        """Dropping a required variable in a translation is reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @param $name\nmsg = Hi { $name }\n",
                "strings/fr/a.ftl": "msg = Salut\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.MISSING_REQUIRED_VARIABLE
        assert diagnostic.uri == _uri(tmp_path, "strings/fr/a.ftl")
        assert diagnostic.message == 'Variable $name is required, but missing in message "msg"'

    def test_optional_variable_may_be_dropped(self, tmp_path: Path) -> None:
        """An optional parameter is not required in translations."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @param $name?\nmsg = Hi { $name }\n",
                "strings/fr/a.ftl": "msg = Salut\n",
            },
        )

        assert analyzer.get_diagnostics() == []

    def test_unknown_variable(self, tmp_path: Path) -> None:
        """A variable neither used nor declared in the source is reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "msg = Hi\n",
                "strings/fr/a.ftl": "msg = Salut { $name }\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.UNKNOWN_VARIABLE
        assert diagnostic.message == (
            'Variable "$name" is used here, but is not used or declared in the source '
            "locale message"
        )

    def test_annotation_missing_in_source(self, tmp_path: Path) -> None:
        """Source variables without a declaration are reported."""
        analyzer = _analyze(tmp_path, {"main.ftl": "msg = Hi { $name }\n    .title = { $user }\n"})

        messages = [d.message for d in analyzer.get_diagnostics()]
        assert messages == [
            'Annotation "@param $name" is missing for message "msg"',
            'Annotation "@param-attribute title $user" is missing for attribute "msg.title"',
        ]

    def test_annotation_type_mismatch(self, tmp_path: Path) -> None:
        """A translation redeclaring a parameter with another type is reported."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "# @param $count number\nmsg = { $count }\n",
                "strings/fr/a.ftl": "# @param $count string\nmsg = { $count } !\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.ANNOTATION_TYPE_MISMATCH


# ============================================================================
# SUPPRESSION
# ============================================================================


class TestSuppression:
    """Test entry, file and engine-wide ignores."""

    def test_engine_ignore_by_category(self, tmp_path: Path) -> None:
        """Ignoring a category drops every code in it."""
        (tmp_path / "strings" / "fr").mkdir(parents=True)
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "a = A\n",
                "strings/en/b.ftl": "b = B\n",
                "strings/fr/a.ftl": "\n",
            },
            ignore=["missing"],
        )

        assert analyzer.get_diagnostics() == []

    def test_engine_ignore_covers_errors(self, tmp_path: Path) -> None:
        """Syntax error codes can be ignored too."""
        analyzer = _analyze(tmp_path, {"main.ftl": "hello\n"}, ignore=["E0003"])

        assert analyzer.get_diagnostics() == []

    def test_entry_directive_suppresses_code(self, tmp_path: Path) -> None:
        """An entry-level disable drops only the named code."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "a = Same\nb = Same\n",
                "strings/fr/a.ftl": "# @diagnostic disable identical\na = Same\nb = Same\n",
            },
        )

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.code == WarnCode.IDENTICAL
        assert diagnostic.message.startswith('Message "b"')

    def test_source_directive_suppresses_missing_message(self, tmp_path: Path) -> None:
        """Missing-message honours the source message's ignores."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "a = A\n# @diagnostic disable missing\nb = B\n",
                "strings/fr/a.ftl": "a = X\n",
            },
        )

        assert analyzer.get_diagnostics() == []

    def test_disabled_entry_silences_its_attributes(self, tmp_path: Path) -> None:
        """A bare disable on an entry covers its attributes."""
        analyzer = _analyze(
            tmp_path,
            {
                "strings/en/a.ftl": "msg = M\n    .title = T\n",
                "strings/fr/a.ftl": "# @diagnostic disable\nmsg = N\n    .title = T\n    .x = X\n",
            },
        )

        assert analyzer.get_diagnostics() == []


# ============================================================================
# READING AND ERRORS
# ============================================================================


class TestReadFile:
    """Test parsing, re-parsing and syntax errors."""

    def test_junk_is_reported_as_error(self, tmp_path: Path) -> None:
        """Unparseable content becomes an error diagnostic."""
        analyzer = _analyze(tmp_path, {"main.ftl": "hello\nworld = ok\n"})

        (diagnostic,) = analyzer.get_diagnostics()
        assert diagnostic.severity == Severity.ERROR
        assert diagnostic.code == "E0003"
        assert diagnostic.line == 1

    def test_reparse_replaces_previous_results(self, tmp_path: Path) -> None:
        """Reading a file again drops its old entries and diagnostics."""
        analyzer = FtlAnalyzer()
        file = FileInfo.create(tmp_path / "main.ftl", tmp_path)

        analyzer.read_file(file, content="hello\n")
        analyzer.read_file(file, content="hello\n")
        assert len(analyzer.get_diagnostics_for_uri(file.uri)) == 1

        analyzer.read_file(file, content="hello = Hi\n")
        assert analyzer.get_diagnostics_for_uri(file.uri) == []
        assert [m.id for m in file.messages] == ["hello"]
        assert file.needs_parse is False

    def test_reparse_changes_hash(self, tmp_path: Path) -> None:
        """The content digest follows the content."""
        analyzer = FtlAnalyzer()
        file = FileInfo.create(tmp_path / "main.ftl", tmp_path)

        analyzer.read_file(file, content="a = A\n")
        first = file.hash
        analyzer.read_file(file, content="a = B\n")

        assert first is not None
        assert file.hash != first

    def test_unreadable_file_is_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A file that cannot be read is left empty."""
        analyzer = FtlAnalyzer()
        file = FileInfo.create(tmp_path / "gone.ftl", tmp_path)

        with caplog.at_level(logging.ERROR, logger="ftlanalyzer.analyzer"):
            analyzer.read_file(file)

        assert "Failed to read file" in caplog.text
        assert file.messages == []
        assert file.needs_parse is True

    @given(name=ftl_identifiers(), count=st.integers(min_value=1, max_value=6))
    def test_duplicates_reported_once_per_repeat(self, name: str, count: int) -> None:
        """PROPERTY: n definitions of one id yield n - 1 duplicate warnings."""
        analyzer = FtlAnalyzer()
        file = FileInfo.create("/locales/main.ftl", "/locales")
        group = FileGroup(locale="")
        group.add(file)

        analyzer.read_file(file, content=f"{name} = Value\n" * count)
        analyzer.check_source_group(group)

        codes = [d.code for d in analyzer.get_diagnostics()]
        assert codes == [WarnCode.DUPLICATE] * (count - 1)


class TestComparisonProperties:
    """Property tests over generated resources."""

    @staticmethod
    def _compare_copy(source: str) -> tuple[FtlAnalyzer, FileInfo, FileInfo]:
        analyzer = FtlAnalyzer()
        src_file = FileInfo.create("/locales/en/main.ftl", "/locales")
        file = FileInfo.create("/locales/fr/main.ftl", "/locales")

        analyzer.read_file(src_file, content=source)
        analyzer.read_file(file, content=source)
        analyzer.compare_files(file, src_file)
        return analyzer, src_file, file

    @settings(max_examples=25)
    @given(source=ftl_message_sources(max_size=5))
    def test_untranslated_copy_is_identical(self, source: str) -> None:
        """PROPERTY: A verbatim copy of a small resource is identical per message."""
        analyzer, src_file, file = self._compare_copy(source)

        assert analyzer.get_diagnostics_for_uri(src_file.uri) == []
        codes = [d.code for d in analyzer.get_diagnostics_for_uri(file.uri)]
        assert codes == [WarnCode.IDENTICAL] * source.count("\n")

    @pytest.mark.fuzz
    @given(source=ftl_message_sources(max_size=20))
    def test_untranslated_copy_is_identical_everywhere(self, source: str) -> None:
        """PROPERTY: A verbatim copy yields one identical warning per message."""
        analyzer, src_file, file = self._compare_copy(source)

        diagnostics = analyzer.get_diagnostics()
        assert analyzer.get_diagnostics_for_uri(src_file.uri) == []
        assert [d.code for d in diagnostics] == [WarnCode.IDENTICAL] * len(file.messages)
        assert len(file.messages) == source.count("\n")
