"""Listing orchestration: argument classification, enumeration, and output.

Drives one invocation end to end. Command-line arguments are split into
direct entries and directories; direct entries print as one batch, then each
directory prints as its own batch with its own column widths. Per-entry
failures are reported to the error stream and raise the exit status without
stopping the run.
"""

from __future__ import annotations

import logging
import os
import stat
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TextIO

from .components import render_entries
from .git_status import GitRunner, annotate, run_git
from .layout import format_entries
from .metadata import resolve
from .options import HiddenEntries, ListingOptions, SymlinkPolicy
from .types import FileRecord, UnresolvedRecord

logger = logging.getLogger(__name__)

PROG_NAME = "ls-git"
EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass
class ArgumentPlan:
    """Command-line arguments sorted into what gets listed how."""

    files: list[str] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def listing_count(self) -> int:
        return (1 if self.files else 0) + len(self.directories)


def _describe(exc: OSError) -> str:
    return exc.strerror or str(exc)


def classify_arguments(paths: Sequence[str], cli_symlinks: SymlinkPolicy) -> ArgumentPlan:
    """Decide for each argument whether it is listed as an entry or as a directory.

    A trailing slash asks for directory treatment and is an error on anything
    but a directory or symlink. Otherwise a real directory is listed, and a
    symlink is listed as a directory only under the follow policy.
    """
    plan = ArgumentPlan()
    for path in paths:
        try:
            st = os.lstat(path)
        except OSError as exc:
            plan.errors.append((path, _describe(exc)))
            continue

        follow = stat.S_ISDIR(st.st_mode)
        if path.endswith("/"):
            if not (stat.S_ISDIR(st.st_mode) or stat.S_ISLNK(st.st_mode)):
                plan.errors.append((path, "Not a directory"))
                continue
            follow = True

        if not follow and stat.S_ISLNK(st.st_mode):
            follow = cli_symlinks is SymlinkPolicy.FOLLOW

        if follow and os.path.isdir(path):
            plan.directories.append(path)
        else:
            plan.files.append(path)
    return plan


def _include_name(name: str, hidden: HiddenEntries) -> bool:
    if not name.startswith("."):
        return True
    return hidden is not HiddenEntries.NONE


def enumerate_directory(directory: str, hidden: HiddenEntries) -> list[str]:
    """Return the visible children of ``directory`` as joined paths, sorted by name.

    Raises ``OSError`` when the directory cannot be read.
    """
    with os.scandir(directory) as entries:
        names = [entry.name for entry in entries if _include_name(entry.name, hidden)]
    if hidden is HiddenEntries.ALL:
        names.extend((".", ".."))
    names.sort()
    return [os.path.join(directory, name) for name in names]


class Lister:
    """Runs listings for one invocation and tracks the overall exit status."""

    def __init__(
        self,
        options: ListingOptions,
        out: TextIO | None = None,
        err: TextIO | None = None,
        git_runner: GitRunner = run_git,
        prog: str = PROG_NAME,
    ) -> None:
        self.options = options
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.git_runner = git_runner
        self.prog = prog
        self.exit_status = EXIT_OK
        self._printed_any = False

    def report(self, path: str, message: str) -> None:
        self.err.write(f"{self.prog}: {path}: {message}\n")
        self.exit_status = EXIT_FAILURE

    def _write_lines(self, lines: Sequence[str]) -> None:
        for line in lines:
            self.out.write(line + "\n")
        if lines:
            self._printed_any = True

    def resolve_batch(self, paths: Sequence[str]) -> list[FileRecord]:
        """Resolve ``paths``, reporting and dropping any that fail."""
        records: list[FileRecord] = []
        for path in paths:
            resolved = resolve(path)
            if isinstance(resolved, UnresolvedRecord):
                self.report(resolved.path, _describe(resolved.error))
                continue
            records.append(resolved)
        return records

    def render_batch(self, records: list[FileRecord], show_total: bool = False) -> list[str]:
        """Annotate, render, and lay out one batch; returns output lines."""
        if not records:
            return []
        annotate(records, run=self.git_runner)
        rendered = render_entries(records, self.options)
        lines: list[str] = []
        if show_total:
            lines.append(f"total {sum(record.block_count for record in records)}")
        lines.extend(format_entries(rendered, self.options.single_column, self.options.terminal_width))
        return lines

    def list_files(self, paths: Sequence[str]) -> None:
        records = self.resolve_batch(paths)
        self._write_lines(self.render_batch(records))

    def list_directory(self, directory: str, show_header: bool) -> None:
        if show_header:
            if self._printed_any:
                self.out.write("\n")
            self.out.write(f"{directory}:\n")
            self._printed_any = True
        try:
            children = enumerate_directory(directory, self.options.hidden)
        except OSError as exc:
            self.report(directory, _describe(exc))
            return
        logger.debug("listing %d entries in %s", len(children), directory)
        records = self.resolve_batch(children)
        self._write_lines(self.render_batch(records, show_total=self.options.show_total))

    def run(self, paths: Sequence[str]) -> int:
        """List every argument (``.`` when none) and return the exit status."""
        targets = list(paths) or ["."]
        plan = classify_arguments(targets, self.options.cli_symlinks)
        for path, message in plan.errors:
            self.report(path, message)

        show_headers = plan.listing_count > 1
        if plan.files:
            self.list_files(plan.files)
        for directory in plan.directories:
            self.list_directory(directory, show_headers)
        return self.exit_status


def run_listing(
    paths: Sequence[str],
    options: ListingOptions,
    out: TextIO | None = None,
    err: TextIO | None = None,
    git_runner: GitRunner = run_git,
) -> int:
    return Lister(options, out=out, err=err, git_runner=git_runner).run(paths)


__all__ = [
    "PROG_NAME",
    "EXIT_OK",
    "EXIT_FAILURE",
    "ArgumentPlan",
    "classify_arguments",
    "enumerate_directory",
    "Lister",
    "run_listing",
]
