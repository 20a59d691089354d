"""Domain datatypes shared by the resolver, git aggregator, and renderers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class FileKind(Enum):
    """Filesystem node kind derived from ``st_mode``."""

    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    BLOCK_DEVICE = "block-device"
    CHAR_DEVICE = "char-device"
    PIPE = "pipe"
    SOCKET = "socket"
    WHITEOUT = "whiteout"
    DOOR = "door"
    PORT = "port"
    UNKNOWN = "unknown"

    @property
    def code(self) -> str:
        """Single-character type code shown in front of the permission triads."""
        return _KIND_CODES[self]


_KIND_CODES: dict[FileKind, str] = {
    FileKind.REGULAR: "-",
    FileKind.DIRECTORY: "d",
    FileKind.SYMLINK: "l",
    FileKind.BLOCK_DEVICE: "b",
    FileKind.CHAR_DEVICE: "c",
    FileKind.PIPE: "p",
    FileKind.SOCKET: "s",
    FileKind.WHITEOUT: "w",
    FileKind.DOOR: "D",
    FileKind.PORT: "P",
    FileKind.UNKNOWN: "?",
}


class VcsStatus(Enum):
    """Working-tree status of one path, after aggregation."""

    UP_TO_DATE = "up-to-date"
    MODIFIED = "modified"
    UNTRACKED = "untracked"
    ADDED = "added"
    REMOVED = "removed"
    RENAMED = "renamed"
    IGNORED = "ignored"
    UNKNOWN = "unknown"


class TimestampKind(Enum):
    """Which inode timestamp a date or time column shows."""

    MODIFIED = "modified"
    ACCESSED = "accessed"
    CREATED = "created"


@dataclass(frozen=True)
class VcsState:
    """Status assigned to a path plus the pre-rename path for renames."""

    status: VcsStatus
    renamed_from: Path | None = None


@dataclass(frozen=True)
class Triad:
    """One read/write/execute permission class."""

    read: bool
    write: bool
    execute: bool

    def __str__(self) -> str:
        return "".join(
            (
                "r" if self.read else "-",
                "w" if self.write else "-",
                "x" if self.execute else "-",
            )
        )


@dataclass(frozen=True)
class Permissions:
    owner: Triad
    group: Triad
    other: Triad


@dataclass
class FileRecord:
    """Normalized metadata for one listed filesystem entry.

    Every field except ``vcs`` is filled by the resolver and left untouched
    afterwards. ``vcs`` is assigned exactly once, by
    :func:`lsgit.git_status.annotate`.

    ``directory`` is the absolute directory the entry was named from, so
    ``dir/.`` and ``dir/..`` both belong to ``dir``.
    """

    path: Path
    directory: Path
    canonical_path: Path
    base_name: str
    kind: FileKind
    size: int
    uid: int
    gid: int
    permissions: Permissions
    accessed: datetime
    modified: datetime
    created: datetime
    link_count: int
    block_count: int
    block_size: int
    inode: int
    device: int
    link_target: str | None = None
    vcs: VcsState | None = None

    @property
    def executable(self) -> bool:
        perms = self.permissions
        return perms.owner.execute or perms.group.execute or perms.other.execute

    @property
    def vcs_status(self) -> VcsStatus:
        return self.vcs.status if self.vcs is not None else VcsStatus.UNKNOWN

    def timestamp(self, kind: TimestampKind) -> datetime:
        if kind is TimestampKind.ACCESSED:
            return self.accessed
        if kind is TimestampKind.CREATED:
            return self.created
        return self.modified


@dataclass(frozen=True)
class UnresolvedRecord:
    """Stand-in for an entry whose metadata query failed.

    Only ``path`` and ``error`` exist; callers must report and skip it.
    """

    path: str
    error: OSError


ResolvedEntry = FileRecord | UnresolvedRecord


__all__ = [
    "FileKind",
    "VcsStatus",
    "TimestampKind",
    "VcsState",
    "Triad",
    "Permissions",
    "FileRecord",
    "UnresolvedRecord",
    "ResolvedEntry",
]
