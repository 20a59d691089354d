"""Column layout for rendered listing batches.

Widths are shared across one batch only. Single-column mode pads every column
but the last to its batch width; grid mode packs equally padded entries
left-to-right into the terminal width.
"""

from __future__ import annotations

from collections.abc import Sequence

from .ansi import display_width
from .components import Alignment, Component, RenderedEntry

COLUMN_SEPARATOR = " "
GRID_GAP = 2


def component_width(component: Component) -> int:
    """Sum of ``max(text width, min_width)`` over the component's segments."""
    return sum(segment.width for segment in component)


def _text_width(component: Component) -> int:
    return sum(display_width(segment.text) for segment in component)


def column_widths(entries: Sequence[RenderedEntry]) -> list[int]:
    """Return the widest component per column across ``entries``."""
    widths: list[int] = []
    for entry in entries:
        for index, component in enumerate(entry.components):
            width = component_width(component)
            if index >= len(widths):
                widths.append(width)
            elif width > widths[index]:
                widths[index] = width
    return widths


def component_string(component: Component, width: int, default_align: Alignment | None) -> str:
    """Join a component's styled segments, padding visible text out to ``width``.

    ``default_align`` of ``None`` disables padding. A component's first
    segment may override the alignment.
    """
    text = "".join(segment.styled() for segment in component)
    if default_align is None:
        return text
    padding = width - _text_width(component)
    if padding <= 0:
        return text
    align = (component[0].alignment if component else None) or default_align
    if align is Alignment.RIGHT:
        return " " * padding + text
    return text + " " * padding


def _needs_separator(index: int, component: Component) -> bool:
    if index == 0:
        return False
    return not (component and component[0].is_margin)


def _join_entry(entry: RenderedEntry, widths: Sequence[int]) -> tuple[str, int]:
    """Render one entry's components; returns ``(text, visible width)``."""
    parts: list[str] = []
    visible = 0
    last = len(entry.components) - 1
    for index, component in enumerate(entry.components):
        if _needs_separator(index, component):
            parts.append(COLUMN_SEPARATOR)
            visible += len(COLUMN_SEPARATOR)
        if index == last:
            parts.append(component_string(component, widths[index], None))
            visible += _text_width(component)
        else:
            parts.append(component_string(component, widths[index], Alignment.RIGHT))
            visible += max(widths[index], _text_width(component))
    return "".join(parts), visible


def format_single_column(entries: Sequence[RenderedEntry]) -> list[str]:
    """One line per entry with per-column aligned components."""
    widths = column_widths(entries)
    return [_join_entry(entry, widths)[0] for entry in entries]


def format_grid(entries: Sequence[RenderedEntry], total_width: int) -> list[str]:
    """Pack entries into rows no wider than ``total_width`` where possible.

    Every entry is padded to the widest entry in the batch so cells line up
    across rows. An entry wider than ``total_width`` gets a row of its own.
    """
    if not entries:
        return []
    widths = column_widths(entries)
    cells = [_join_entry(entry, widths) for entry in entries]
    entry_width = max(width for _text, width in cells)

    lines: list[str] = []
    row: list[tuple[str, int]] = []
    used = 0

    def flush() -> None:
        padded = [text + " " * (entry_width - width) for text, width in row[:-1]]
        padded.append(row[-1][0])
        lines.append((" " * GRID_GAP).join(padded))

    for text, width in cells:
        needed = entry_width if not row else GRID_GAP + entry_width
        if row and used + needed > total_width:
            flush()
            row = []
            used = 0
            needed = entry_width
        row.append((text, width))
        used += needed
    if row:
        flush()
    return lines


def format_entries(entries: Sequence[RenderedEntry], single_column: bool, total_width: int) -> list[str]:
    if single_column:
        return format_single_column(entries)
    return format_grid(entries, total_width)


__all__ = [
    "COLUMN_SEPARATOR",
    "GRID_GAP",
    "component_width",
    "column_widths",
    "component_string",
    "format_single_column",
    "format_grid",
    "format_entries",
]
