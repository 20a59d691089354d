"""Git status aggregation for listed entries.

Queries each working tree touched by a listing batch once, then bubbles
per-file states up to ancestor directories so a directory badge reflects the
strongest change found beneath it.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Iterable
from pathlib import Path

from .types import FileKind, FileRecord, VcsState, VcsStatus

logger = logging.getLogger(__name__)

GitRunner = Callable[[Path, list[str]], str | None]

_CHANGE_STATUSES = frozenset({VcsStatus.MODIFIED, VcsStatus.ADDED, VcsStatus.REMOVED, VcsStatus.RENAMED})


def run_git(cwd: Path, args: list[str]) -> str | None:
    """Run ``git -C cwd *args`` and return stdout, or ``None`` on any failure."""
    try:
        proc = subprocess.run(
            ["git", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git %s in %s failed to start: %s", " ".join(args), cwd, exc)
        return None
    if proc.returncode != 0:
        logger.debug("git %s in %s exited with %d", " ".join(args), cwd, proc.returncode)
        return None
    return proc.stdout


def find_tree_root(directory: Path, run: GitRunner = run_git) -> Path | None:
    """Return the canonical working-tree root containing ``directory``.

    Git reports the top level with symlinks resolved, so the result is
    compared against canonical record locations, never the paths as listed.
    """
    output = run(directory, ["rev-parse", "--show-toplevel"])
    if output is None:
        return None
    toplevel = output.strip()
    if not toplevel:
        return None
    return Path(os.path.realpath(toplevel))


def status_path(record: FileRecord) -> Path:
    """Return the canonical location git reports for ``record``.

    A final symlink is kept as is; git tracks the link, not its target.
    """
    if record.kind is not FileKind.SYMLINK:
        return record.canonical_path
    return Path(os.path.realpath(record.path.parent)) / record.path.name


def _split_z(output: str) -> list[str]:
    return [token for token in output.split("\0") if token]


def _tree_relative(root: Path, rel_path: str) -> Path:
    return root / rel_path.rstrip("/")


def _change_status(xy: str) -> VcsStatus:
    if xy[:1] == "A":
        return VcsStatus.ADDED
    if "D" in xy:
        return VcsStatus.REMOVED
    return VcsStatus.MODIFIED


def parse_porcelain_v2(root: Path, output: str) -> list[tuple[Path, VcsState]]:
    """Parse ``git status --porcelain=v2 -z`` output into path states."""
    records: list[tuple[Path, VcsState]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue

        tag = token[0]
        if tag == "?":
            records.append((_tree_relative(root, token[2:]), VcsState(VcsStatus.UNTRACKED)))
        elif tag == "!":
            records.append((_tree_relative(root, token[2:]), VcsState(VcsStatus.IGNORED)))
        elif tag == "1":
            fields = token.split(" ", 8)
            if len(fields) == 9:
                records.append((_tree_relative(root, fields[8]), VcsState(_change_status(fields[1]))))
        elif tag == "2":
            fields = token.split(" ", 9)
            # Renames carry the original path as the following NUL-separated token.
            original = tokens[index] if index < len(tokens) else ""
            index += 1
            if len(fields) == 10:
                renamed_from = _tree_relative(root, original) if original else None
                records.append(
                    (
                        _tree_relative(root, fields[9]),
                        VcsState(VcsStatus.RENAMED, renamed_from=renamed_from),
                    )
                )
        elif tag == "u":
            fields = token.split(" ", 10)
            if len(fields) == 11:
                records.append((_tree_relative(root, fields[10]), VcsState(VcsStatus.MODIFIED)))
    return records


def collect_tree_statuses(root: Path, run: GitRunner = run_git) -> list[tuple[Path, VcsState]] | None:
    """Gather tracked, ignored, and changed paths for the tree at ``root``.

    Entries come back in override order: tracked baseline first, then ignored
    paths, then working-tree deltas. ``None`` means any query failed.
    """
    tracked = run(root, ["ls-files", "-z"])
    if tracked is None:
        return None
    ignored = run(root, ["ls-files", "-z", "--others", "-i", "--exclude-standard", "--directory"])
    if ignored is None:
        return None
    deltas = run(root, ["status", "--porcelain=v2", "-z", "--untracked-files=normal"])
    if deltas is None:
        return None

    entries: list[tuple[Path, VcsState]] = []
    entries.extend((_tree_relative(root, rel), VcsState(VcsStatus.UP_TO_DATE)) for rel in _split_z(tracked))
    entries.extend((_tree_relative(root, rel), VcsState(VcsStatus.IGNORED)) for rel in _split_z(ignored))
    entries.extend(parse_porcelain_v2(root, deltas))
    return entries


def bubbled_status(child: VcsStatus, current: VcsStatus) -> VcsStatus | None:
    """Return the status an ancestor takes from ``child``, or ``None`` to keep ``current``."""
    if child in _CHANGE_STATUSES:
        return VcsStatus.MODIFIED
    if child is VcsStatus.UNTRACKED:
        if current in (VcsStatus.UNKNOWN, VcsStatus.IGNORED, VcsStatus.UP_TO_DATE):
            return VcsStatus.UNTRACKED
        return None
    if child is VcsStatus.UP_TO_DATE:
        if current in (VcsStatus.UNKNOWN, VcsStatus.IGNORED):
            return VcsStatus.UP_TO_DATE
        return None
    if child is VcsStatus.IGNORED:
        if current is VcsStatus.UNKNOWN:
            return VcsStatus.IGNORED
        return None
    if child is VcsStatus.UNKNOWN:
        return None
    raise ValueError(f"unhandled status: {child!r}")


def merge_tree_statuses(
    statuses: dict[Path, VcsState],
    root: Path,
    entries: Iterable[tuple[Path, VcsState]],
) -> None:
    """Record ``entries`` into ``statuses`` and bubble each toward ``root``.

    Ancestors strictly between an entry and ``root`` are updated; ``root``
    itself never receives a bubbled status.
    """
    for path, state in entries:
        statuses[path] = state
        parent = path.parent
        while parent != root and parent.is_relative_to(root):
            current = statuses.get(parent)
            current_status = current.status if current is not None else VcsStatus.UNKNOWN
            promoted = bubbled_status(state.status, current_status)
            if promoted is not None and promoted is not current_status:
                statuses[parent] = VcsState(promoted)
            next_parent = parent.parent
            if next_parent == parent:
                break
            parent = next_parent


def lookup_status(statuses: dict[Path, VcsState], path: Path) -> VcsState | None:
    """Return the exact status of ``path`` or of its nearest known ancestor."""
    state = statuses.get(path)
    if state is not None:
        return state
    for ancestor in path.parents:
        if ancestor == ancestor.parent:
            break
        state = statuses.get(ancestor)
        if state is not None:
            return state
    return None


def annotate(records: list[FileRecord], run: GitRunner = run_git) -> None:
    """Assign ``vcs`` on every record that lies inside a git working tree.

    Each distinct containing directory is probed once; each tree root is
    scanned once per call. Query failures leave the affected records without
    status.
    """
    statuses: dict[Path, VcsState] = {}
    visited_dirs: set[Path] = set()
    loaded_roots: set[Path] = set()

    for record in sorted(records, key=lambda item: str(item.path)):
        directory = record.directory
        if directory in visited_dirs:
            continue
        visited_dirs.add(directory)

        root = find_tree_root(directory, run)
        if root is None or root in loaded_roots:
            continue
        entries = collect_tree_statuses(root, run)
        if entries is None:
            logger.debug("no git status available for %s", directory)
            continue
        loaded_roots.add(root)
        merge_tree_statuses(statuses, root, entries)

    if not statuses:
        return
    for record in records:
        record.vcs = lookup_status(statuses, status_path(record))


__all__ = [
    "GitRunner",
    "run_git",
    "find_tree_root",
    "status_path",
    "parse_porcelain_v2",
    "collect_tree_statuses",
    "bubbled_status",
    "merge_tree_statuses",
    "lookup_status",
    "annotate",
]
