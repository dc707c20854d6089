"""File inventory types produced by discovery and filled in by analysis.

FileInfo records are created with empty entry lists at discovery time and
mutated in place when the analyzer parses them. Groups and collections
only organize FileInfo records; they carry no analysis state of their own.

Python 3.13+.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from ftlanalyzer.constants import RESOURCE_EXTENSION

if TYPE_CHECKING:
    from ftlanalyzer.entries import MessageInfo, TermInfo

__all__ = [
    "DiscoveryResult",
    "FileCollection",
    "FileGroup",
    "FileInfo",
    "PathInfo",
    "bundle_display",
]


@dataclass(frozen=True, slots=True)
class PathInfo:
    """Location of a file or directory.

    Attributes:
        uri: file:// URI used as the stable identity
        absolute: Absolute filesystem path
        relative: Path relative to the discovery base path
    """

    uri: str
    absolute: str
    relative: str

    @classmethod
    def create(cls, item_path: str | Path, base_path: str | Path) -> PathInfo:
        """Build path information for a path below a base path.

        Args:
            item_path: Path of the file or directory
            base_path: Discovery base path

        Returns:
            PathInfo with URI, absolute and relative forms
        """
        absolute = Path(item_path).resolve()
        relative = os.path.relpath(absolute, Path(base_path).resolve())
        return cls(uri=absolute.as_uri(), absolute=str(absolute), relative=relative)


@dataclass(slots=True)
class FileInfo:
    """One resource file.

    Attributes:
        name: Basename without the resource extension
        path: Location of the file
        content: Raw content; meaningless while hash is None
        terms: Normalized terms, in file order
        messages: Normalized messages, in file order
        bundle: None for the default bundle, "" for the global bundle,
            otherwise a named bundle
        ignore: File-level diagnostic codes to suppress
        hash: Digest of the last parsed content; None means the file
            still needs to be parsed
    """

    name: str
    path: PathInfo
    content: str = ""
    terms: list[TermInfo] = field(default_factory=list)
    messages: list[MessageInfo] = field(default_factory=list)
    bundle: str | None = None
    ignore: set[str] | None = None
    hash: str | None = None

    @classmethod
    def create(cls, file_path: str | Path, base_path: str | Path) -> FileInfo:
        """Create an unparsed record for a resource file.

        Args:
            file_path: Path of the resource file
            base_path: Discovery base path

        Returns:
            FileInfo with empty entry lists
        """
        path = PathInfo.create(file_path, base_path)
        name = Path(path.absolute).name
        if name.lower().endswith(RESOURCE_EXTENSION):
            name = name[: -len(RESOURCE_EXTENSION)]
        return cls(name=name, path=path)

    @property
    def uri(self) -> str:
        """Stable identity of the file."""
        return self.path.uri

    @property
    def needs_parse(self) -> bool:
        """Check whether the file has not been parsed since discovery."""
        return self.hash is None


@dataclass(slots=True)
class FileGroup:
    """All files of one locale within a collection.

    The ungrouped files of a discovery run form a group with an empty locale.

    Attributes:
        locale: Locale folder name
        files: File URIs mapped to file records
    """

    locale: str
    files: dict[str, FileInfo] = field(default_factory=dict)

    def add(self, file: FileInfo) -> None:
        """Add a file to the group, keyed by its URI."""
        self.files[file.uri] = file


@dataclass(slots=True)
class FileCollection:
    """A directory whose immediate subdirectories are locale folders.

    Attributes:
        path: Location of the collection directory
        groups: Locale folder names mapped to file groups
    """

    path: PathInfo
    groups: dict[str, FileGroup] = field(default_factory=dict)

    def get_group(self, locale: str) -> FileGroup:
        """Get the group for a locale, creating it on first use."""
        group = self.groups.get(locale)
        if group is None:
            group = FileGroup(locale=locale)
            self.groups[locale] = group
        return group


@dataclass(slots=True)
class DiscoveryResult:
    """Result of resource file discovery.

    Attributes:
        collections: Locale collections found below the base path
        ungrouped: Loose files that belong to no collection
        uris: URIs of every collected file
    """

    collections: list[FileCollection] = field(default_factory=list)
    ungrouped: FileGroup = field(default_factory=lambda: FileGroup(locale=""))
    uris: set[str] = field(default_factory=set)

    def claim(self, collection: FileCollection) -> None:
        """Record a collection and mark all of its files as collected."""
        for group in collection.groups.values():
            self.uris.update(group.files)
        self.collections.append(collection)

    def add_ungrouped(self, file: FileInfo) -> None:
        """Record a loose file."""
        self.uris.add(file.uri)
        self.ungrouped.add(file)


def bundle_display(bundle: str | None) -> str:
    """Get the display string to use for a bundle.

    Example:
        >>> bundle_display(None)
        'default'
        >>> bundle_display("")
        'global'
        >>> bundle_display("menu")
        '"menu"'
    """
    match bundle:
        case None:
            return "default"
        case "":
            return "global"
        case _:
            return f'"{bundle}"'
