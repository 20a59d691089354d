"""Command-line front door for ls-git.

Validates and parses ``ls``-style flags, loads the config file, and builds
the option structures. Then dispatches into the listing orchestrator.
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
from collections.abc import Sequence

from .config import COLOR_MODES, load_config
from .listing import EXIT_FAILURE, PROG_NAME, run_listing
from .options import Flags, options_from_flags

SHORT_FLAGS: dict[str, str] = {
    "1": "One entry per line.",
    "a": "Show all entries, including . and ..",
    "A": "Show dotfiles, except . and ..",
    "f": "Same as -a.",
    "g": "Do not show the owner column.",
    "G": "Enable colors.",
    "H": "Follow symlinks given as arguments.",
    "h": "Human-readable sizes.",
    "i": "Show inode numbers.",
    "l": "Long listing format.",
    "n": "Show numeric owner and group IDs.",
    "o": "Do not show the group column.",
    "P": "Do not follow symlinks given as arguments.",
    "s": "Show block counts.",
}
LONG_OPTIONS = ("--color", "--help")
USAGE = f"{PROG_NAME} [-{''.join(SHORT_FLAGS)}] [--color[=WHEN]] [file ...]"
LOG_LEVEL_ENV = "LSGIT_LOG_LEVEL"


class UsageError(Exception):
    """An option that ``ls-git`` does not recognize."""

    def __init__(self, option: str) -> None:
        super().__init__(option)
        self.option = option


def check_options(argv: Sequence[str]) -> None:
    """Reject unknown flags before argparse sees them.

    Short flags may be bundled (``-la``); each letter is checked. Scanning
    stops at ``--``.
    """
    for token in argv:
        if token == "--":
            return
        if token.startswith("--"):
            name = token.split("=", 1)[0]
            if name not in LONG_OPTIONS:
                raise UsageError(name[2:])
            continue
        if token.startswith("-") and len(token) > 1:
            for flag in token[1:]:
                if flag not in SHORT_FLAGS:
                    raise UsageError(flag)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        usage=USAGE,
        description="List directory contents annotated with git status.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-1", dest="one_per_line", action="store_true", help=SHORT_FLAGS["1"])
    parser.add_argument("-a", "-f", dest="all", action="store_true", help=SHORT_FLAGS["a"])
    parser.add_argument("-A", dest="almost_all", action="store_true", help=SHORT_FLAGS["A"])
    parser.add_argument("-g", dest="no_owner", action="store_true", help=SHORT_FLAGS["g"])
    parser.add_argument("-G", dest="colorize", action="store_true", help=SHORT_FLAGS["G"])
    parser.add_argument("-H", dest="cli_symlinks", action="store_const", const="follow", help=SHORT_FLAGS["H"])
    parser.add_argument("-P", dest="cli_symlinks", action="store_const", const="nofollow", help=SHORT_FLAGS["P"])
    parser.add_argument("-h", dest="human", action="store_true", help=SHORT_FLAGS["h"])
    parser.add_argument("-i", dest="inode", action="store_true", help=SHORT_FLAGS["i"])
    parser.add_argument("-l", dest="long", action="store_true", help=SHORT_FLAGS["l"])
    parser.add_argument("-n", dest="numeric", action="store_true", help=SHORT_FLAGS["n"])
    parser.add_argument("-o", dest="no_group", action="store_true", help=SHORT_FLAGS["o"])
    parser.add_argument("-s", dest="blocks", action="store_true", help=SHORT_FLAGS["s"])
    parser.add_argument(
        "--color",
        nargs="?",
        const="always",
        default=None,
        choices=COLOR_MODES,
        metavar="WHEN",
        help="Colorize output: auto, always, or never.",
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit.")
    parser.add_argument("paths", nargs="*", metavar="file", help="Paths to list. Defaults to the current directory.")
    return parser


def _normalize_argv(argv: Sequence[str]) -> list[str]:
    # A bare ``--color`` must not swallow the following path as its value.
    normalized: list[str] = []
    for index, token in enumerate(argv):
        if token == "--":
            normalized.extend(argv[index:])
            break
        normalized.append("--color=always" if token == "--color" else token)
    return normalized


def parse_flags(argv: Sequence[str]) -> Flags:
    """Parse ``argv`` (without the program name) into :class:`Flags`.

    Flags and paths may be interleaved in any order.

    Raises :class:`UsageError` for unknown flags; argparse exits with status 2
    on malformed values such as ``--color=sometimes``.
    """
    check_options(argv)
    args = build_parser().parse_intermixed_args(_normalize_argv(argv))
    values = vars(args)
    paths = tuple(values.pop("paths"))
    return Flags(paths=paths, **values)


def _configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not level_name:
        return
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(name)s: %(levelname)s: %(message)s")


def _terminal_width() -> int:
    """Resolve grid width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse CLI arguments, list the requested paths, and return the exit status."""
    _configure_logging()
    if argv is None:
        argv = sys.argv[1:]
    try:
        flags = parse_flags(argv)
    except UsageError as exc:
        sys.stderr.write(f"{PROG_NAME}: illegal option -- {exc.option}\n")
        sys.stderr.write(f"usage: {USAGE}\n")
        return EXIT_FAILURE

    options = options_from_flags(
        flags,
        load_config(),
        stdout_is_tty=sys.stdout.isatty(),
        terminal_width=_terminal_width(),
    )
    try:
        return run_listing(flags.paths, options)
    except BrokenPipeError:
        # Downstream closed early (e.g. piped into ``head``); silence the flush at exit.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
