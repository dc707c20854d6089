"""Command line interface: ftl-analyze.

Usage:
    ftl-analyze [path] [-f text|json|github|silent] [-s LOCALE]
                [--ignore CODE ...] [--strict] [-v]

Exit codes:
    0: No errors (and no warnings with --strict)
    1: Errors found, or warnings found with --strict
    2: Invalid arguments or unreadable directory structure

Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from ftlanalyzer import __version__
from ftlanalyzer.analyzer import FtlAnalyzer
from ftlanalyzer.constants import DEFAULT_SOURCE_LOCALE
from ftlanalyzer.diagnostics import OutputFormat, get_report
from ftlanalyzer.errors import DiscoveryError

__all__ = ["main", "parse_args"]

logger = logging.getLogger(__name__)


def _directory(value: str) -> Path:
    """Resolve a path argument, requiring an existing directory."""
    path = Path(value).resolve()
    if not path.exists():
        msg = f'"{path}" does not exist'
        raise argparse.ArgumentTypeError(msg)
    if not path.is_dir():
        msg = f'"{path}" is not a directory'
        raise argparse.ArgumentTypeError(msg)
    return path


def _default_format() -> OutputFormat:
    # Running as a GitHub Actions step.
    if os.environ.get("GITHUB_ACTIONS") == "true":
        return OutputFormat.GITHUB
    return OutputFormat.TEXT


def parse_args(args: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ftl-analyze",
        description="Analyzes Fluent translation files for syntax errors and problems.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "path",
        type=_directory,
        nargs="?",
        default=".",
        help="The path to search for .ftl files within (default: .)",
    )
    parser.add_argument(
        "-f",
        "--format",
        type=str.lower,
        choices=[output_format.value for output_format in OutputFormat],
        default=_default_format().value,
        help="The format to use for output",
    )
    parser.add_argument(
        "-s",
        "--source-locale",
        default=DEFAULT_SOURCE_LOCALE,
        help="The locale to use for comparing against other locales (default: en)",
    )
    parser.add_argument(
        "--ignore",
        nargs="+",
        action="extend",
        default=[],
        metavar="CODE",
        help="Warning codes and categories to ignore",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors for the exit code",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log discovery and parsing details to stderr",
    )

    return parser.parse_args(args)


def main(args: Sequence[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments (None uses sys.argv)

    Returns:
        Exit code: 0 success, 1 problems found, 2 fatal error
    """
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    output_format = OutputFormat(parsed.format)
    is_github = output_format == OutputFormat.GITHUB
    base_path: Path = parsed.path

    analyzer = FtlAnalyzer(
        source_locale=parsed.source_locale,
        ignore=parsed.ignore,
        use_relative_paths=is_github,
    )

    try:
        discovered = analyzer.discover(base_path)
    except DiscoveryError as e:
        logger.error("Discovery failed: %s", e)
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    if not discovered.uris:
        print(f"No .ftl files found in {base_path}")
        return 0

    analyzer.process_discovered_files(discovered)

    report = get_report(
        analyzer.get_diagnostics(),
        output_format,
        str(base_path),
        warnings_as_errors=is_github and parsed.strict,
    )

    if report.output:
        print(report.output)

    if report.has_errors or (parsed.strict and report.has_warnings):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
