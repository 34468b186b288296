"""Header block parsing: `#+NAME: VALUE` lines at the top of a document."""

import re

HEADER_RE = re.compile(r"^#\+([^:]+):[ \t]*(.*)$")

_PROPERTIES_START = ":PROPERTIES:"
_PROPERTIES_END = ":END:"


def _property_block_end(lines: list[str]) -> int:
    """Return the index just past a leading property block, or 0 if there is none.

    An unterminated block is not treated as a block at all.
    """
    if not lines or lines[0].strip() != _PROPERTIES_START:
        return 0
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == _PROPERTIES_END:
            return i + 1
    return 0


def _scan(lines: list[str], keep_blank: bool) -> tuple[dict[str, str], int]:
    headers: dict[str, str] = {}
    idx = _property_block_end(lines)
    while idx < len(lines):
        m = HEADER_RE.match(lines[idx])
        if not m:
            break
        name = m.group(1).strip().lower()
        value = m.group(2).rstrip()
        idx += 1
        if not name or (not value and not keep_blank):
            continue
        # First occurrence wins
        headers.setdefault(name, value)
    return headers, idx


def parse_headers(text: str | None, keep_blank: bool = False) -> dict[str, str]:
    """Extract {lower-cased name: raw value} from the header prefix of *text*.

    Scanning stops at the first line that is not a header line. With
    keep_blank=False, headers with an empty value are skipped (but do not end
    the scan); with keep_blank=True they are recorded as "".
    """
    if not text:
        return {}
    headers, _ = _scan(text.splitlines(), keep_blank)
    return headers


def split_document(text: str) -> tuple[list[str], str]:
    """Split *text* into (header prefix lines, body).

    The prefix covers a leading property block and every header line, blank
    or not. Leading blank lines of the body are dropped.
    """
    lines = text.splitlines()
    _, end = _scan(lines, keep_blank=True)
    body = "\n".join(lines[end:]).lstrip("\n")
    if body and text.endswith("\n"):
        body += "\n"
    return lines[:end], body


def read_headers(path: str, keep_blank: bool = False) -> dict[str, str]:
    """Parse the headers of the file at *path*. A missing file has no headers."""
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        return {}
    return parse_headers(text, keep_blank=keep_blank)
