"""Metadata reader: header parsing -> validation -> transcoding for one document.

Returns (metadata, None) on success and (None, message) on failure, the
message being the user-facing status text.
"""

import logging
import os
from collections.abc import Callable
from datetime import datetime

from services.headers import read_headers
from services.schema import TARGET_VOCABULARY, Field, validate
from services.settings import PublishConfig
from services.transcode import (
    TimestampError,
    TimestampMode,
    apply_defaults,
    convert_timestamp,
    encode_list,
    now_timestamp,
    rename_fields,
    strip_non_target_fields,
    tags_enabled,
)

log = logging.getLogger(__name__)

MISSING_BANNER = "This document is missing required header(s):"
SKIPPED = "Publication skipped"


class MetadataReader:
    def __init__(self, config: PublishConfig, now: Callable[[], datetime] = None):
        self._config = config
        self._now = now or datetime.now

    @property
    def config(self) -> PublishConfig:
        return self._config

    def read(self, path: str) -> tuple[dict[str, str] | None, str | None]:
        """Read *path* and return its front-matter metadata, or an error message."""
        cfg = self._config
        headers = read_headers(path, keep_blank=cfg.keep_blank)
        result = validate(headers, cfg.schema, empty_is_present=cfg.empty_is_present)
        if not result.valid:
            log.debug("Validation failed for %s: %s", path, result.errors)
            return None, f"{MISSING_BANNER}\n{result.message}\n{SKIPPED}"

        meta = apply_defaults(
            result.headers,
            {
                Field.DATE.value: now_timestamp(self._now()),
                Field.AUTHOR.value: cfg.default_author,
            },
        )

        categories = meta.get(Field.CATEGORIES.value)
        tags = meta.get(Field.TAGS.value) if tags_enabled(meta) else None
        meta[Field.CATEGORIES.value] = encode_list(categories, cfg.list_style)
        meta[Field.TAGS.value] = encode_list(tags, cfg.list_style)

        raw_date = meta[Field.DATE.value]
        try:
            meta[Field.DATE.value] = convert_timestamp(raw_date, TimestampMode.DATE_TIME)
        except TimestampError as e:
            name = os.path.basename(path)
            return None, f"Invalid date {raw_date!r} in '{name}': {e}\n{SKIPPED}"

        # An empty author carries nothing for the site; leave it out.
        if not meta.get(Field.AUTHOR.value, "").strip():
            meta.pop(Field.AUTHOR.value, None)

        meta = rename_fields(meta)
        vocabulary = TARGET_VOCABULARY | cfg.extra_fields
        return strip_non_target_fields(meta, cfg.schema, vocabulary), None
