"""Field transcoding: defaults, renames, list encodings, timestamps, slugs.

Source headers use space-separated lists and org-style timestamps such as
`<2020-05-01 Fri 10:30>`; the front matter wants `[a,b]` lists and
`2020-05-01 10:30` dates.
"""

import os
import re
from datetime import datetime
from enum import Enum

from services.schema import Field, RequiredFieldSchema

FIELD_RENAMES = {Field.DESCRIPTION.value: Field.EXCERPT.value}

EMPTY_LIST = "[]"
LIST_STYLES = ("inline", "block")

_TIMESTAMP_RE = re.compile(
    r"^\s*[<\[]?"
    r"(?P<date>\d{4}-\d{2}-\d{2})"
    r"(?:\s+(?P<weekday>[^\W\d_]+\.?))?"
    r"(?:\s+(?P<hour>\d{1,2}):(?P<minute>\d{2}))?"
    r"\s*[>\]]?\s*$"
)

_SLUG_STRIP_RE = re.compile(r"[\W_]+")


class TimestampMode(Enum):
    DATE_ONLY = "%Y-%m-%d"
    DATE_TIME = "%Y-%m-%d %H:%M"


class TimestampError(ValueError):
    """A timestamp does not match the expected grammar."""


def now_timestamp(now: datetime = None) -> str:
    """Current time in the source timestamp grammar, e.g. `<2020-05-01 Fri 10:30>`."""
    now = now or datetime.now()
    return now.strftime("<%Y-%m-%d %a %H:%M>")


def apply_defaults(headers: dict[str, str], defaults: dict[str, str]) -> dict[str, str]:
    """Fill keys from *defaults* that are absent in *headers*. Never overrides."""
    result = dict(headers)
    for key, value in defaults.items():
        if key not in result:
            result[key] = value
    return result


def rename_fields(headers: dict[str, str], mapping: dict[str, str] = None) -> dict[str, str]:
    """Rename source keys to target keys; a renamed key keeps its position."""
    mapping = FIELD_RENAMES if mapping is None else mapping
    return {mapping.get(k, k): v for k, v in headers.items()}


def encode_list(value: str | None, style: str = "inline") -> str:
    """Encode a space-separated token string as a front-matter list.

    inline: `[a,b,c]`; block: a leading newline then one `- item` line per token.
    Empty tokens (from repeated spaces) are dropped, duplicates are kept.
    """
    tokens = [t for t in (value or "").split(" ") if t]
    if not tokens:
        return EMPTY_LIST
    if style == "block":
        return "\n" + "\n".join(f"- {t}" for t in tokens)
    return "[" + ",".join(tokens) + "]"


def convert_timestamp(raw: str, mode: TimestampMode = TimestampMode.DATE_TIME) -> str:
    """Reformat an org-style timestamp. Raises TimestampError on bad input.

    A timestamp without a time of day converts to 00:00 in DATE_TIME mode.
    """
    m = _TIMESTAMP_RE.match(raw or "")
    if not m:
        raise TimestampError(f"Unrecognized timestamp: {raw!r}")
    try:
        parsed = datetime.strptime(m.group("date"), "%Y-%m-%d")
        if m.group("hour") is not None:
            parsed = parsed.replace(hour=int(m.group("hour")), minute=int(m.group("minute")))
    except ValueError as e:
        raise TimestampError(f"Invalid timestamp {raw!r}: {e}") from e
    return parsed.strftime(mode.value)


def strip_non_target_fields(
    headers: dict[str, str],
    schema: RequiredFieldSchema,
    vocabulary=frozenset(),
) -> dict[str, str]:
    """Drop keys that are neither schema fields nor in *vocabulary*."""
    keep = set(schema.fields) | set(vocabulary)
    return {k: v for k, v in headers.items() if k in keep}


def tags_enabled(headers: dict[str, str]) -> bool:
    """False when the options header carries a `tags:nil` token."""
    options = headers.get(Field.OPTIONS.value) or ""
    return "tags:nil" not in options.split()


def slugify(name: str) -> str:
    """Lowercase, collapse runs of non-word characters and underscores to single hyphens.

    Letters and digits of any script are kept. The result is empty when *name*
    has none.
    """
    return _SLUG_STRIP_RE.sub("-", name.lower()).strip("-")


def post_filename(date: str, source_path: str, ext: str = None) -> str:
    """Dated site filename for a post: `YYYY-MM-DD-<slug><ext>`.

    *date* may be a raw timestamp or an already converted date/date-time.
    """
    stem, source_ext = os.path.splitext(os.path.basename(source_path))
    day = convert_timestamp(date, TimestampMode.DATE_ONLY)
    return f"{day}-{slugify(stem)}{source_ext if ext is None else ext}"


def page_filename(source_path: str, ext: str = None) -> str:
    stem, source_ext = os.path.splitext(os.path.basename(source_path))
    return f"{slugify(stem)}{source_ext if ext is None else ext}"
