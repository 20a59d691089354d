"""Filesystem metadata resolution.

Turns one path into a :class:`FileRecord` using a non-dereferencing ``lstat``.
Failures never raise; they come back as :class:`UnresolvedRecord`.
"""

from __future__ import annotations

import grp
import os
import pwd
import stat
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from .types import FileKind, FileRecord, Permissions, Triad, UnresolvedRecord

# Checked in order; the first predicate that matches wins.
_KIND_PREDICATES: tuple[tuple[Callable[[int], bool], FileKind], ...] = (
    (stat.S_ISREG, FileKind.REGULAR),
    (stat.S_ISDIR, FileKind.DIRECTORY),
    (stat.S_ISLNK, FileKind.SYMLINK),
    (stat.S_ISBLK, FileKind.BLOCK_DEVICE),
    (stat.S_ISCHR, FileKind.CHAR_DEVICE),
    (stat.S_ISFIFO, FileKind.PIPE),
    (stat.S_ISSOCK, FileKind.SOCKET),
    (stat.S_ISWHT, FileKind.WHITEOUT),
    (stat.S_ISDOOR, FileKind.DOOR),
    (stat.S_ISPORT, FileKind.PORT),
)


def kind_from_mode(mode: int) -> FileKind:
    for predicate, kind in _KIND_PREDICATES:
        if predicate(mode):
            return kind
    return FileKind.UNKNOWN


def permissions_from_mode(mode: int) -> Permissions:
    """Split permission bits into owner/group/other triads."""
    return Permissions(
        owner=Triad(bool(mode & stat.S_IRUSR), bool(mode & stat.S_IWUSR), bool(mode & stat.S_IXUSR)),
        group=Triad(bool(mode & stat.S_IRGRP), bool(mode & stat.S_IWGRP), bool(mode & stat.S_IXGRP)),
        other=Triad(bool(mode & stat.S_IROTH), bool(mode & stat.S_IWOTH), bool(mode & stat.S_IXOTH)),
    )


def _default_user_lookup(uid: int) -> str:
    return pwd.getpwuid(uid).pw_name


def _default_group_lookup(gid: int) -> str:
    return grp.getgrgid(gid).gr_name


class NameCache:
    """Memoized uid/gid to name lookups for one program run.

    Entries are inserted on first use and never invalidated. A failed lookup
    caches the stringified numeric ID.
    """

    def __init__(
        self,
        user_lookup: Callable[[int], str] | None = None,
        group_lookup: Callable[[int], str] | None = None,
    ) -> None:
        self._user_lookup = user_lookup or _default_user_lookup
        self._group_lookup = group_lookup or _default_group_lookup
        self._users: dict[int, str] = {}
        self._groups: dict[int, str] = {}

    def user_name(self, uid: int) -> str:
        cached = self._users.get(uid)
        if cached is not None:
            return cached
        name = _lookup_or_id(self._user_lookup, uid)
        self._users[uid] = name
        return name

    def group_name(self, gid: int) -> str:
        cached = self._groups.get(gid)
        if cached is not None:
            return cached
        name = _lookup_or_id(self._group_lookup, gid)
        self._groups[gid] = name
        return name


def _lookup_or_id(lookup: Callable[[int], str], numeric_id: int) -> str:
    try:
        name = lookup(numeric_id)
    except (KeyError, OverflowError):
        return str(numeric_id)
    return name or str(numeric_id)


def absolute_path(path: str) -> Path:
    """Make ``path`` absolute and collapse ``.``/``..`` without resolving symlinks."""
    return Path(os.path.abspath(path))


def base_name(path: str) -> str:
    """Return the display name for ``path`` as written by the caller."""
    stripped = path.rstrip("/")
    if not stripped:
        return path
    return os.path.basename(stripped)


def _instant(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def resolve(path: str) -> FileRecord | UnresolvedRecord:
    """Stat ``path`` without following a final symlink.

    Returns an :class:`UnresolvedRecord` carrying the ``OSError`` when the
    path cannot be queried.
    """
    try:
        st = os.lstat(path)
    except OSError as exc:
        return UnresolvedRecord(path=path, error=exc)

    kind = kind_from_mode(st.st_mode)
    link_target: str | None = None
    if kind is FileKind.SYMLINK:
        try:
            link_target = os.readlink(path)
        except OSError:
            link_target = None

    return FileRecord(
        path=absolute_path(path),
        directory=absolute_path(os.path.dirname(path) or "."),
        canonical_path=Path(os.path.realpath(path)),
        base_name=base_name(path),
        kind=kind,
        size=int(st.st_size),
        uid=int(st.st_uid),
        gid=int(st.st_gid),
        permissions=permissions_from_mode(st.st_mode),
        accessed=_instant(st.st_atime),
        modified=_instant(st.st_mtime),
        created=_instant(getattr(st, "st_birthtime", st.st_ctime)),
        link_count=int(st.st_nlink),
        block_count=int(getattr(st, "st_blocks", 0)),
        block_size=int(getattr(st, "st_blksize", 0)),
        inode=int(st.st_ino),
        device=int(st.st_dev),
        link_target=link_target,
    )


__all__ = [
    "NameCache",
    "kind_from_mode",
    "permissions_from_mode",
    "absolute_path",
    "base_name",
    "resolve",
]
