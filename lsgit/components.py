"""Render components: one pure function per listing column.

Each component turns a :class:`FileRecord` plus :class:`RenderOptions` into an
ordered list of styled :class:`RenderSegment` values. Components never look at
other entries or at the output mode; alignment across entries is the layout
engine's job.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from .ansi import display_width, sanitize_terminal_text
from .formatting import format_size, format_timestamp
from .options import ListingOptions, RenderOptions
from .types import FileKind, FileRecord, VcsStatus

VCS_BADGE_WIDTH = 3


class Alignment(Enum):
    """Side of a padded column the text sticks to."""

    LEFT = "left"
    RIGHT = "right"


_STATUS_SYMBOLS: dict[VcsStatus, str] = {
    VcsStatus.UP_TO_DATE: " ",
    VcsStatus.MODIFIED: "~",
    VcsStatus.UNTRACKED: "?",
    VcsStatus.ADDED: "+",
    VcsStatus.REMOVED: "-",
    VcsStatus.RENAMED: "~",
    VcsStatus.IGNORED: "i",
    VcsStatus.UNKNOWN: "x",
}


@dataclass(frozen=True)
class RenderSegment:
    """Atomic piece of styled text.

    Color codes never count toward width. ``is_margin`` on a component's first
    segment suppresses the separator the layout would otherwise insert before
    it. ``alignment`` on the first segment overrides the column default.
    """

    text: str
    color_prefix: str = ""
    color_suffix: str = ""
    min_width: int = 0
    is_margin: bool = False
    alignment: Alignment | None = None

    @property
    def width(self) -> int:
        return max(display_width(self.text), self.min_width)

    def styled(self) -> str:
        if not self.color_prefix:
            return self.text
        return f"{self.color_prefix}{self.text}{self.color_suffix}"


Renderer = Callable[[FileRecord, RenderOptions], list[RenderSegment]]
Component = tuple[RenderSegment, ...]


@dataclass(frozen=True)
class RenderedEntry:
    """A record paired with one segment group per active column."""

    record: FileRecord
    components: tuple[Component, ...]


def _colored(text: str, color: str, reset: str, **kwargs: object) -> RenderSegment:
    if not color:
        return RenderSegment(text, **kwargs)
    return RenderSegment(text, color_prefix=color, color_suffix=reset, **kwargs)


def render_inode(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    return [RenderSegment(str(record.inode))]


def render_blocks(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    return [RenderSegment(str(record.block_count))]


def render_permissions(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    """Type code followed by the owner, group, and other triads."""
    perms = record.permissions
    return [
        RenderSegment(record.kind.code),
        RenderSegment(str(perms.owner)),
        RenderSegment(str(perms.group)),
        RenderSegment(str(perms.other)),
    ]


def render_link_count(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    return [RenderSegment(str(record.link_count))]


def render_owner(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    if options.owner.numeric:
        return [RenderSegment(str(record.uid), alignment=Alignment.LEFT)]
    return [RenderSegment(options.names.user_name(record.uid), alignment=Alignment.LEFT)]


def render_group(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    if options.owner.numeric:
        return [RenderSegment(str(record.gid), alignment=Alignment.LEFT)]
    return [RenderSegment(options.names.group_name(record.gid), alignment=Alignment.LEFT)]


def render_size(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    if options.size.human:
        return [RenderSegment(format_size(record.size, compact=options.size.compact))]
    return [RenderSegment(str(record.size))]


def render_date(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    """Date of the timestamp selected by ``options.dates.kind``."""
    dates = options.dates
    text = format_timestamp(record.timestamp(dates.kind), options.now, dates.date_recent, dates.date_distant)
    return [RenderSegment(text, alignment=Alignment.LEFT)]


def render_time(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    """Time of day of the timestamp selected by ``options.dates.kind``."""
    dates = options.dates
    text = format_timestamp(record.timestamp(dates.kind), options.now, dates.time_recent, dates.time_distant)
    return [RenderSegment(text, alignment=Alignment.LEFT)]


def render_vcs_status(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    """Bracketed status symbol, or blank padding of the same width."""
    status = record.vcs_status
    if status is VcsStatus.UNKNOWN:
        return [RenderSegment("", min_width=VCS_BADGE_WIDTH)]

    theme = options.theme
    return [
        _colored("[", theme.badge_bracket, theme.reset),
        _colored(_STATUS_SYMBOLS[status], theme.status_color(status), theme.reset),
        _colored("]", theme.badge_bracket, theme.reset),
    ]


def render_name(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
    theme = options.theme
    segments = [_colored(sanitize_terminal_text(record.base_name), theme.name_color(record), theme.reset)]
    if options.name.show_link_target and record.kind is FileKind.SYMLINK and record.link_target is not None:
        segments.append(RenderSegment(" -> "))
        segments.append(RenderSegment(sanitize_terminal_text(record.link_target)))
    return segments


def margin(width: int = 1) -> Renderer:
    """Return a component emitting ``width`` spaces that replace the column separator."""
    text = " " * max(1, width)

    def render_margin(record: FileRecord, options: RenderOptions) -> list[RenderSegment]:
        return [RenderSegment(text, is_margin=True)]

    return render_margin


def column_renderers(options: ListingOptions, include_vcs: bool) -> list[Renderer]:
    """Return the active components, left to right, for a listing."""
    renderers: list[Renderer] = []
    long_format = options.long_format
    if options.show_inode:
        renderers.append(render_inode)
    if options.show_blocks:
        renderers.append(render_blocks)
    if long_format:
        renderers.append(render_permissions)
        renderers.append(margin(1))
        renderers.append(render_link_count)
    if options.show_owner:
        renderers.append(render_owner)
        if options.show_group:
            renderers.append(margin(1))
    if options.show_group:
        renderers.append(render_group)
    if long_format:
        renderers.append(margin(2))
        renderers.append(render_size)
        renderers.append(render_date)
        renderers.append(render_time)
    if include_vcs:
        renderers.append(render_vcs_status)
    renderers.append(render_name)
    return renderers


def render_entry(record: FileRecord, renderers: Sequence[Renderer], options: RenderOptions) -> RenderedEntry:
    return RenderedEntry(
        record=record,
        components=tuple(tuple(renderer(record, options)) for renderer in renderers),
    )


def render_entries(
    records: Sequence[FileRecord],
    options: ListingOptions,
) -> list[RenderedEntry]:
    """Render a batch, adding the status column only when some record has one."""
    include_vcs = any(record.vcs_status is not VcsStatus.UNKNOWN for record in records)
    renderers = column_renderers(options, include_vcs)
    return [render_entry(record, renderers, options.render) for record in records]


__all__ = [
    "Alignment",
    "VCS_BADGE_WIDTH",
    "RenderSegment",
    "Renderer",
    "Component",
    "RenderedEntry",
    "render_inode",
    "render_blocks",
    "render_permissions",
    "render_link_count",
    "render_owner",
    "render_group",
    "render_size",
    "render_date",
    "render_time",
    "render_vcs_status",
    "render_name",
    "margin",
    "column_renderers",
    "render_entry",
    "render_entries",
]
