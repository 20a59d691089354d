"""End-to-end tests for argument classification and listing output."""

from __future__ import annotations

import io
import os
import shutil
import subprocess
import tempfile
import unittest
from datetime import datetime, timedelta
from pathlib import Path

from lsgit.git_status import run_git
from lsgit.listing import EXIT_FAILURE, EXIT_OK, classify_arguments, enumerate_directory, run_listing
from lsgit.metadata import NameCache
from lsgit.options import Flags, HiddenEntries, SymlinkPolicy, options_from_flags


def _no_git(cwd: Path, args: list[str]) -> str | None:
    return None


def _names() -> NameCache:
    return NameCache(user_lookup=lambda uid: "alice", group_lookup=lambda gid: "staff")


def _run(paths: list[str], flags: Flags, git_runner=_no_git, now: datetime | None = None) -> tuple[int, str, str]:
    options = options_from_flags(flags, {}, stdout_is_tty=False, now=now, names=_names())
    out = io.StringIO()
    err = io.StringIO()
    status = run_listing(paths, options, out=out, err=err, git_runner=git_runner)
    return status, out.getvalue(), err.getvalue()


class ClassifyArgumentsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name).resolve()
        (self.root / "d").mkdir()
        (self.root / "f.txt").write_text("x", encoding="utf-8")
        os.symlink("d", self.root / "link")

    def _path(self, name: str) -> str:
        return os.path.join(self.root, name)

    def test_directory_and_file(self) -> None:
        plan = classify_arguments([self._path("f.txt"), self._path("d")], SymlinkPolicy.NOFOLLOW)
        self.assertEqual(plan.files, [self._path("f.txt")])
        self.assertEqual(plan.directories, [self._path("d")])
        self.assertEqual(plan.errors, [])
        self.assertEqual(plan.listing_count, 2)

    def test_symlink_to_directory_without_slash_is_an_entry(self) -> None:
        plan = classify_arguments([self._path("link")], SymlinkPolicy.NOFOLLOW)
        self.assertEqual(plan.files, [self._path("link")])
        self.assertEqual(plan.directories, [])

    def test_symlink_followed_with_slash_or_follow_policy(self) -> None:
        plan = classify_arguments([self._path("link") + "/"], SymlinkPolicy.NOFOLLOW)
        self.assertEqual(plan.directories, [self._path("link") + "/"])

        plan = classify_arguments([self._path("link")], SymlinkPolicy.FOLLOW)
        self.assertEqual(plan.directories, [self._path("link")])

    def test_trailing_slash_on_file_is_an_error(self) -> None:
        plan = classify_arguments([self._path("f.txt") + "/"], SymlinkPolicy.NOFOLLOW)
        self.assertEqual(plan.errors, [(self._path("f.txt") + "/", "Not a directory")])
        self.assertEqual(plan.listing_count, 0)

    def test_missing_path_is_an_error(self) -> None:
        plan = classify_arguments([self._path("missing")], SymlinkPolicy.NOFOLLOW)
        self.assertEqual(len(plan.errors), 1)
        self.assertEqual(plan.errors[0][0], self._path("missing"))


class EnumerateDirectoryTests(unittest.TestCase):
    def test_hidden_entry_policies(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            for name in ("b.txt", "a.txt", ".hidden"):
                Path(tmp, name).write_text("x", encoding="utf-8")

            def names(hidden: HiddenEntries) -> list[str]:
                return [os.path.basename(path) for path in enumerate_directory(tmp, hidden)]

            self.assertEqual(names(HiddenEntries.NONE), ["a.txt", "b.txt"])
            self.assertEqual(names(HiddenEntries.DOTFILES), [".hidden", "a.txt", "b.txt"])
            self.assertEqual(names(HiddenEntries.ALL), [".", "..", ".hidden", "a.txt", "b.txt"])


class RunListingTests(unittest.TestCase):
    def test_short_listing_of_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            for name in ("b.txt", "a.txt", ".hidden"):
                Path(tmp, name).write_text("x", encoding="utf-8")

            status, out, err = _run([tmp], Flags())
            self.assertEqual(status, EXIT_OK)
            self.assertEqual(out, "a.txt\nb.txt\n")
            self.assertEqual(err, "")

            status, out, _err = _run([tmp], Flags(all=True))
            self.assertEqual(out.splitlines(), [".", "..", ".hidden", "a.txt", "b.txt"])

    def test_long_listing_of_single_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "f.txt"
            path.write_text("hello", encoding="utf-8")
            os.chmod(path, 0o644)
            stamp = 1_700_000_000
            os.utime(path, (stamp, stamp))
            local = datetime.fromtimestamp(stamp).astimezone()
            now = local + timedelta(days=1)

            status, out, err = _run([str(path)], Flags(long=True), now=now)

            expected = f"-rw-r--r--  1 alice  staff   5 {local:%b %d} {local:%H:%M} f.txt\n"
            self.assertEqual(status, EXIT_OK)
            self.assertEqual(out, expected)
            self.assertEqual(err, "")

    def test_long_directory_listing_prints_total(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "a").write_text("a", encoding="utf-8")
            Path(tmp, "b").write_text("b", encoding="utf-8")

            status, out, _err = _run([tmp], Flags(long=True))

            lines = out.splitlines()
            self.assertEqual(status, EXIT_OK)
            self.assertTrue(lines[0].startswith("total "))
            self.assertEqual(len(lines), 3)
            self.assertTrue(lines[1].endswith(" a"))
            self.assertTrue(lines[2].endswith(" b"))

    def test_failure_does_not_stop_remaining_arguments(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = os.path.join(tmp, "x")
            directory = Path(tmp) / "y"
            directory.mkdir()
            (directory / "inside.txt").write_text("x", encoding="utf-8")

            status, out, err = _run([missing, str(directory)], Flags())

            self.assertEqual(status, EXIT_FAILURE)
            self.assertEqual(err, f"ls-git: {missing}: No such file or directory\n")
            self.assertEqual(out, "inside.txt\n")

    def test_multiple_directories_get_headers(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            first = Path(tmp) / "one"
            second = Path(tmp) / "two"
            first.mkdir()
            second.mkdir()
            (first / "a").write_text("a", encoding="utf-8")
            (second / "b").write_text("b", encoding="utf-8")

            status, out, _err = _run([str(first), str(second)], Flags())

            self.assertEqual(status, EXIT_OK)
            self.assertEqual(out, f"{first}:\na\n\n{second}:\nb\n")

    def test_files_listed_before_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            directory = Path(tmp) / "d"
            directory.mkdir()
            (directory / "inner").write_text("i", encoding="utf-8")
            loose = Path(tmp) / "loose.txt"
            loose.write_text("l", encoding="utf-8")

            _status, out, _err = _run([str(directory), str(loose)], Flags())

            self.assertEqual(out, f"loose.txt\n\n{directory}:\ninner\n")

    @unittest.skipIf(shutil.which("git") is None, "git is required for status badge tests")
    def test_status_badges_in_git_repository(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()

            def git(*args: str) -> None:
                subprocess.run(["git", *args], cwd=root, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)

            git("init", "-q")
            git("config", "user.email", "tests@example.com")
            git("config", "user.name", "Tests")
            git("config", "commit.gpgsign", "false")
            (root / "a.txt").write_text("a\n", encoding="utf-8")
            (root / "b.txt").write_text("b\n", encoding="utf-8")
            git("add", "-A")
            git("commit", "-q", "-m", "initial")
            (root / "b.txt").write_text("changed\n", encoding="utf-8")
            (root / ".hidden").write_text("h\n", encoding="utf-8")

            _status, out, _err = _run([str(root)], Flags(), git_runner=run_git)
            self.assertEqual(out.splitlines(), ["[ ] a.txt", "[~] b.txt"])

            _status, out, _err = _run([str(root)], Flags(all=True), git_runner=run_git)
            self.assertIn("[?] .hidden", out.splitlines())

    @unittest.skipIf(shutil.which("git") is None, "git is required for status badge tests")
    def test_status_badges_through_symlinked_subdirectory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp).resolve()
            root = base / "repo"
            (root / "sub").mkdir(parents=True)

            def git(*args: str) -> None:
                subprocess.run(["git", *args], cwd=root, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)

            git("init", "-q")
            git("config", "user.email", "tests@example.com")
            git("config", "user.name", "Tests")
            git("config", "commit.gpgsign", "false")
            (root / "sub" / "f.txt").write_text("one\n", encoding="utf-8")
            (root / "sub" / "g.txt").write_text("two\n", encoding="utf-8")
            git("add", "-A")
            git("commit", "-q", "-m", "initial")
            (root / "sub" / "f.txt").write_text("changed\n", encoding="utf-8")
            link = base / "link"
            os.symlink(root / "sub", link)

            _status, out, _err = _run([str(link) + "/"], Flags(), git_runner=run_git)
            self.assertEqual(out.splitlines(), ["[~] f.txt", "[ ] g.txt"])


if __name__ == "__main__":
    unittest.main()
