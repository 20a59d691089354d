"""ANSI-aware text measurement helpers.

Listing output carries SGR color codes around names and status badges.
Width math must count only visible terminal cells, never escape sequences.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def char_display_width(ch: str) -> int:
    """Return terminal column width for one printable character.

    Combining marks consume no columns, East Asian wide/fullwidth characters
    consume two, everything else one.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    """Remove escape sequences from ``text``."""
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return how many terminal cells ``text`` occupies once printed.

    Escape sequences are skipped so pre-styled text measures the same as its
    plain form.
    """
    if not text:
        return 0
    width = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                i = match.end()
                continue
        width += char_display_width(text[i])
        i += 1
    return width


def sanitize_terminal_text(text: str) -> str:
    """Replace control characters in file names with ``?``.

    File names may legally contain newlines or raw escape bytes; printing them
    verbatim would corrupt the column layout.
    """
    if _CONTROL_RE.search(text) is None:
        return text

    out: list[str] = []
    for ch in text:
        code = ord(ch)
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append("?")
            continue
        out.append(ch)
    return "".join(out)
