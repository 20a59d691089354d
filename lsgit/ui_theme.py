"""Color palettes for listing output.

A theme maps entry kinds and git statuses to ANSI SGR prefixes. The plain
theme carries empty strings and is what renderers see when color is off.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import FileKind, FileRecord, VcsStatus


@dataclass(frozen=True)
class ListingTheme:
    """Semantic ANSI palette used by the render components."""

    name: str
    reset: str
    name_directory: str
    name_symlink: str
    name_pipe: str
    name_executable: str
    badge_bracket: str
    status_up_to_date: str
    status_modified: str
    status_untracked: str
    status_added: str
    status_removed: str
    status_renamed: str
    status_ignored: str

    def name_color(self, record: FileRecord) -> str:
        """Return the color for an entry name, chosen by kind then exec bits."""
        kind = record.kind
        if kind is FileKind.DIRECTORY:
            return self.name_directory
        if kind is FileKind.SYMLINK:
            return self.name_symlink
        if kind is FileKind.PIPE:
            return self.name_pipe
        if record.executable and kind is FileKind.REGULAR:
            return self.name_executable
        return ""

    def status_color(self, status: VcsStatus) -> str:
        colors = {
            VcsStatus.UP_TO_DATE: self.status_up_to_date,
            VcsStatus.MODIFIED: self.status_modified,
            VcsStatus.UNTRACKED: self.status_untracked,
            VcsStatus.ADDED: self.status_added,
            VcsStatus.REMOVED: self.status_removed,
            VcsStatus.RENAMED: self.status_renamed,
            VcsStatus.IGNORED: self.status_ignored,
            VcsStatus.UNKNOWN: "",
        }
        return colors[status]


DEFAULT_THEME = ListingTheme(
    name="default",
    reset="\033[0m",
    name_directory="\033[34m",
    name_symlink="\033[35m",
    name_pipe="\033[33m",
    name_executable="\033[31m",
    badge_bracket="\033[2m",
    status_up_to_date="",
    status_modified="\033[34m",
    status_untracked="\033[33m",
    status_added="\033[32m",
    status_removed="\033[31m",
    status_renamed="\033[34m",
    status_ignored="\033[2;39m",
)

OCEAN_THEME = ListingTheme(
    name="ocean",
    reset="\033[0m",
    name_directory="\033[1;38;5;45m",
    name_symlink="\033[38;5;117m",
    name_pipe="\033[38;5;180m",
    name_executable="\033[38;5;84m",
    badge_bracket="\033[2;38;5;110m",
    status_up_to_date="",
    status_modified="\033[38;5;215m",
    status_untracked="\033[38;5;84m",
    status_added="\033[38;5;42m",
    status_removed="\033[38;5;203m",
    status_renamed="\033[38;5;215m",
    status_ignored="\033[2;38;5;245m",
)

PLAIN_THEME = ListingTheme(
    name="plain",
    reset="",
    name_directory="",
    name_symlink="",
    name_pipe="",
    name_executable="",
    badge_bracket="",
    status_up_to_date="",
    status_modified="",
    status_untracked="",
    status_added="",
    status_removed="",
    status_renamed="",
    status_ignored="",
)

_THEMES: dict[str, ListingTheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, color: bool) -> ListingTheme:
    """Return concrete theme for requested name and color mode."""
    if not color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "ListingTheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "normalize_theme_name",
    "resolve_theme",
]
