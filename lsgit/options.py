"""Explicit option structures for rendering and listing.

Each render component reads its own frozen options object; ``ListingOptions``
bundles them with the column selection and enumeration policy. Parsed CLI
flags plus the config file are folded into these once at startup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from . import config as config_mod
from .metadata import NameCache
from .types import TimestampKind
from .ui_theme import PLAIN_THEME, ListingTheme, resolve_theme


class HiddenEntries(Enum):
    """Which dot-entries a directory enumeration includes."""

    NONE = "none"
    DOTFILES = "dotfiles"
    ALL = "all"


class SymlinkPolicy(Enum):
    """Whether a symlink named on the command line is listed as its target directory."""

    FOLLOW = "follow"
    NOFOLLOW = "nofollow"


@dataclass(frozen=True)
class SizeOptions:
    human: bool = False
    compact: bool = False


@dataclass(frozen=True)
class OwnerOptions:
    numeric: bool = False


@dataclass(frozen=True)
class NameOptions:
    show_link_target: bool = False


@dataclass(frozen=True)
class DateOptions:
    """Timestamp selection and strftime patterns for date/time columns."""

    kind: TimestampKind = TimestampKind.MODIFIED
    date_recent: str = config_mod.DEFAULT_DATE_FORMAT_RECENT
    date_distant: str = config_mod.DEFAULT_DATE_FORMAT_DISTANT
    time_recent: str = config_mod.DEFAULT_TIME_FORMAT_RECENT
    time_distant: str = config_mod.DEFAULT_TIME_FORMAT_DISTANT


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RenderOptions:
    """Everything a render component may consult besides the record itself.

    ``now`` anchors recent/distant date classification for every row of a
    listing; it defaults to the wall clock when the options are built.
    """

    size: SizeOptions = SizeOptions()
    owner: OwnerOptions = OwnerOptions()
    name: NameOptions = NameOptions()
    dates: DateOptions = DateOptions()
    theme: ListingTheme = PLAIN_THEME
    now: datetime = field(default_factory=_utc_now)
    names: NameCache = field(default_factory=NameCache, compare=False)


@dataclass(frozen=True)
class ListingOptions:
    """Column selection, display mode, and enumeration policy for one run."""

    long_format: bool = False
    single_column: bool = False
    show_inode: bool = False
    show_blocks: bool = False
    show_owner: bool = False
    show_group: bool = False
    hidden: HiddenEntries = HiddenEntries.NONE
    cli_symlinks: SymlinkPolicy = SymlinkPolicy.NOFOLLOW
    terminal_width: int = 80
    render: RenderOptions = field(default_factory=RenderOptions)

    @property
    def show_total(self) -> bool:
        return self.long_format


@dataclass(frozen=True)
class Flags:
    """Command-line switches after parsing; one attribute per flag."""

    one_per_line: bool = False
    all: bool = False
    almost_all: bool = False
    no_owner: bool = False
    colorize: bool = False
    human: bool = False
    inode: bool = False
    long: bool = False
    numeric: bool = False
    no_group: bool = False
    blocks: bool = False
    cli_symlinks: str | None = None
    color: str | None = None
    paths: tuple[str, ...] = ()


def _color_enabled(flags: Flags, config: dict[str, object], stdout_is_tty: bool) -> bool:
    if flags.color == "never":
        return False
    if flags.colorize or flags.color == "always":
        return True
    if flags.color == "auto":
        return stdout_is_tty
    mode = config_mod.load_color_mode(config)
    if mode == "auto":
        return stdout_is_tty
    return mode == "always"


def options_from_flags(
    flags: Flags,
    config: dict[str, object] | None = None,
    *,
    stdout_is_tty: bool = True,
    terminal_width: int = 80,
    now: datetime | None = None,
    names: NameCache | None = None,
) -> ListingOptions:
    """Fold parsed flags and config values into a :class:`ListingOptions`."""
    data = {} if config is None else config
    color = _color_enabled(flags, data, stdout_is_tty)
    date_recent, date_distant = config_mod.load_date_patterns(data)
    time_recent, time_distant = config_mod.load_time_patterns(data)

    render = RenderOptions(
        size=SizeOptions(human=flags.human, compact=config_mod.load_compact_sizes(data)),
        owner=OwnerOptions(numeric=flags.numeric),
        name=NameOptions(show_link_target=flags.long),
        dates=DateOptions(
            kind=TimestampKind.MODIFIED,
            date_recent=date_recent,
            date_distant=date_distant,
            time_recent=time_recent,
            time_distant=time_distant,
        ),
        theme=resolve_theme(config_mod.load_theme_name(data), color=color),
        now=now if now is not None else _utc_now(),
        names=names or NameCache(),
    )

    if flags.all:
        hidden = HiddenEntries.ALL
    elif flags.almost_all:
        hidden = HiddenEntries.DOTFILES
    else:
        hidden = HiddenEntries.NONE

    cli_symlinks = SymlinkPolicy.FOLLOW if flags.cli_symlinks == "follow" else SymlinkPolicy.NOFOLLOW

    return ListingOptions(
        long_format=flags.long,
        single_column=flags.one_per_line or flags.long or not stdout_is_tty,
        show_inode=flags.inode,
        show_blocks=flags.blocks,
        show_owner=flags.long and not flags.no_owner,
        show_group=flags.long and not flags.no_group,
        hidden=hidden,
        cli_symlinks=cli_symlinks,
        terminal_width=max(1, terminal_width),
        render=render,
    )


__all__ = [
    "HiddenEntries",
    "SymlinkPolicy",
    "SizeOptions",
    "OwnerOptions",
    "NameOptions",
    "DateOptions",
    "RenderOptions",
    "ListingOptions",
    "Flags",
    "options_from_flags",
]
