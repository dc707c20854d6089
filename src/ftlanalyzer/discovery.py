"""Discovery of resource files below a base directory.

A collection is a directory whose visible children are all locale folders,
each holding nothing but resource files. Every other resource file is
ungrouped.

Architecture:
    - discover(): Depth-first walk in sorted name order
    - is_collection_layout(): Side-effect-free shape test over snapshots
    - DirectorySnapshot: One directory listing, taken once per directory

Names starting with "." are neither walked nor classified.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ftlanalyzer.constants import HIDDEN_PREFIX, RESOURCE_EXTENSION
from ftlanalyzer.errors import DiscoveryError
from ftlanalyzer.model import DiscoveryResult, FileCollection, FileInfo, PathInfo

__all__ = [
    "DirectorySnapshot",
    "EntrySnapshot",
    "discover",
    "is_collection_layout",
    "is_resource_name",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntrySnapshot:
    """One directory entry as seen at listing time.

    Symbolic links are neither directories nor files here, so a link cycle
    can never be walked.

    Attributes:
        name: Entry name
        is_dir: Whether the entry is a real directory
        is_file: Whether the entry is a regular file
    """

    name: str
    is_dir: bool
    is_file: bool


@dataclass(frozen=True, slots=True)
class DirectorySnapshot:
    """Visible entries of one directory, in sorted name order.

    Attributes:
        path: Directory that was listed
        entries: Entries whose names do not start with "."
    """

    path: Path
    entries: tuple[EntrySnapshot, ...]

    @classmethod
    def take(cls, path: Path) -> DirectorySnapshot:
        """List a directory.

        Args:
            path: Directory to list

        Returns:
            Snapshot of the visible entries

        Raises:
            DiscoveryError: If the directory cannot be listed
        """
        try:
            children = sorted(path.iterdir(), key=lambda child: child.name)
            entries = tuple(
                EntrySnapshot(
                    name=child.name,
                    is_dir=child.is_dir(follow_symlinks=False),
                    is_file=child.is_file(follow_symlinks=False),
                )
                for child in children
                if not child.name.startswith(HIDDEN_PREFIX)
            )
        except OSError as e:
            msg = f"Cannot list directory {path}: {e}"
            raise DiscoveryError(msg, path) from e

        return cls(path=path, entries=entries)


def is_resource_name(name: str) -> bool:
    """Check whether a file name carries the resource extension.

    Example:
        >>> is_resource_name("main.FTL")
        True
        >>> is_resource_name("main.ftl.bak")
        False
    """
    return name.lower().endswith(RESOURCE_EXTENSION)


def is_collection_layout(
    children: Sequence[EntrySnapshot],
    locale_children: Mapping[str, Sequence[EntrySnapshot]],
) -> bool:
    """Check whether a directory has the shape of a collection.

    Args:
        children: Visible entries of the candidate directory
        locale_children: Visible entries of each child directory, by name

    Returns:
        True if every child is a directory and every entry of every child
        directory is a resource file
    """
    if not children:
        return False

    for child in children:
        if not child.is_dir:
            return False

        for entry in locale_children.get(child.name, ()):
            if not entry.is_file or not is_resource_name(entry.name):
                return False

    return True


def _is_strictly_inside(path: Path, base_path: Path) -> bool:
    return path != base_path and path.is_relative_to(base_path)


def _get_collection(path: Path, base_path: Path) -> FileCollection | None:
    """Collect every file of a candidate directory, or None if it does not qualify."""
    snapshot = DirectorySnapshot.take(path)
    if any(not entry.is_dir for entry in snapshot.entries):
        return None

    locale_snapshots = {
        entry.name: DirectorySnapshot.take(path / entry.name) for entry in snapshot.entries
    }
    locale_children = {name: s.entries for name, s in locale_snapshots.items()}
    if not is_collection_layout(snapshot.entries, locale_children):
        return None

    collection = FileCollection(path=PathInfo.create(path, base_path))
    # An empty locale folder still forms a group, so every source file is
    # reported missing from it.
    for locale, locale_snapshot in locale_snapshots.items():
        group = collection.get_group(locale)
        for entry in locale_snapshot.entries:
            group.add(FileInfo.create(locale_snapshot.path / entry.name, base_path))

    return collection


def discover(base_path: str | Path) -> DiscoveryResult:
    """Discover resource files below a base directory.

    Each directory's files are handled before its subdirectories. The
    first file found below a qualifying collection claims the whole
    collection; its other files are then skipped by URI.

    Args:
        base_path: Directory to walk

    Returns:
        Collections and ungrouped files, every file exactly once

    Raises:
        DiscoveryError: If any directory below base_path cannot be listed
    """
    base = Path(base_path).resolve()
    result = DiscoveryResult()
    rejected: set[Path] = set()
    pending: list[Path] = [base]

    while pending:
        snapshot = DirectorySnapshot.take(pending.pop())
        subdirs: list[Path] = []

        for entry in snapshot.entries:
            if entry.is_dir:
                subdirs.append(snapshot.path / entry.name)
                continue
            if not entry.is_file or not is_resource_name(entry.name):
                continue

            file = FileInfo.create(snapshot.path / entry.name, base)
            if file.uri in result.uris:
                continue

            candidate = snapshot.path.parent
            collection = None
            if candidate not in rejected and _is_strictly_inside(candidate, base):
                collection = _get_collection(candidate, base)
                if collection is None:
                    rejected.add(candidate)

            if collection is None:
                logger.debug("Ungrouped file: %s", file.path.relative)
                result.add_ungrouped(file)
                continue

            logger.debug(
                "Collection %s with locales %s",
                collection.path.relative,
                ", ".join(collection.groups),
            )
            result.claim(collection)

        pending.extend(reversed(subdirs))

    logger.info(
        "Discovered %d collections and %d files in %s",
        len(result.collections),
        len(result.uris),
        base,
    )
    return result
