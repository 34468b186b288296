"""Site writer: the default publish collaborator.

Writes the rendered front matter followed by the document body (header block
removed) into the site tree. Posts land in posts_dir under a dated name,
pages in pages_dir. Turning the body into HTML is left to the site generator.
"""

import logging
import os

import yaml

from services.frontmatter import parse_front_matter, render
from services.headers import read_headers, split_document
from services.schema import Field
from services.settings import PublishConfig
from services.transcode import (
    TimestampError,
    encode_list,
    page_filename,
    post_filename,
    slugify,
)

log = logging.getLogger(__name__)

_LIST_FIELDS = (Field.CATEGORIES.value, Field.TAGS.value)


class PublishError(Exception):
    """A document could not be written to the site tree."""


def safe_path(rel_path: str, base_dir: str) -> tuple[str, str | None]:
    """Resolve and validate that path stays within base_dir. Returns (abs_path, error)."""
    abs_path = os.path.realpath(os.path.join(base_dir, rel_path))
    base_real = os.path.realpath(base_dir)
    if abs_path != base_real and not abs_path.startswith(base_real + os.sep):
        return abs_path, "Path traversal detected"
    return abs_path, None


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def lossy_field(metadata: dict[str, str], loaded: dict, list_style: str) -> str | None:
    """Describe the first field whose YAML reading differs from *metadata*, or None."""
    for key, value in metadata.items():
        if key not in loaded:
            return f"{key} {value!r} is missing"
        got = loaded[key]
        if key in _LIST_FIELDS:
            if isinstance(got, list) and encode_list(
                " ".join(_as_text(v) for v in got), list_style
            ) == value:
                continue
        elif _as_text(got) == value.strip():
            continue
        return f"{key} {value!r} loads as {got!r}"
    return None


class SiteWriter:
    def __init__(self, config: PublishConfig):
        self._config = config

    def list_base_files(self, layout: str) -> list[str]:
        """Return source files whose raw layout header equals *layout*, sorted."""
        source_dir = self._config.source_dir
        found = []
        for root, dirs, files in os.walk(source_dir):
            dirs[:] = sorted(d for d in dirs if not d.startswith("."))
            for fname in sorted(files):
                if not fname.endswith(tuple(self._config.extensions)):
                    continue
                path = os.path.join(root, fname)
                try:
                    headers = read_headers(path, keep_blank=self._config.keep_blank)
                except (OSError, UnicodeDecodeError) as e:
                    log.warning("Skipping unreadable %s: %s", path, e)
                    continue
                if headers.get(Field.LAYOUT.value) == layout:
                    found.append(path)
        return found

    def destination(self, metadata: dict[str, str], path: str, post: bool) -> str:
        """Site path the document at *path* is written to.

        Posts: `<posts_dir>/YYYY-MM-DD-<slug><ext>`. Pages: `<pages_dir>/<slug><ext>`.
        """
        name = os.path.basename(path)
        if not slugify(os.path.splitext(name)[0]):
            raise PublishError(f"Cannot derive a file name from '{name}'")
        if not post:
            return os.path.join(self._config.pages_dir, page_filename(path))
        try:
            fname = post_filename(metadata[Field.DATE.value], path)
        except (KeyError, TimestampError) as e:
            raise PublishError(f"Cannot date post '{name}': {e}") from e
        return os.path.join(self._config.posts_dir, fname)

    def publish_post(self, metadata: dict[str, str], path: str) -> str:
        """Write a post. Returns the destination."""
        return self._write(metadata, path, self.destination(metadata, path, post=True))

    def publish_page(self, metadata: dict[str, str], path: str) -> str:
        """Write a page. Returns the destination."""
        return self._write(metadata, path, self.destination(metadata, path, post=False))

    def _write(self, metadata: dict[str, str], path: str, dest: str) -> str:
        name = os.path.basename(path)
        block = render(metadata)
        try:
            loaded, _ = parse_front_matter(block)
        except yaml.YAMLError as e:
            raise PublishError(f"Front matter for '{name}' is not valid YAML: {e}") from e
        lossy = lossy_field(metadata, loaded, self._config.list_style)
        if lossy:
            raise PublishError(f"Front matter for '{name}' does not survive YAML: {lossy}")

        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
            _, body = split_document(text)
            os.makedirs(os.path.dirname(dest), exist_ok=True)
            with open(dest, "w", encoding="utf-8") as f:
                f.write(block + body)
        except (OSError, UnicodeDecodeError) as e:
            raise PublishError(f"Cannot publish '{name}': {e}") from e

        log.info("Wrote %s -> %s", path, dest)
        return dest
