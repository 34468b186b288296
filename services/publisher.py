"""Publish dispatcher: route a document to the post or page publisher.

dispatch() always returns a single status string for the caller to show.
publish_all() publishes every post (or page) in the source tree on a bounded
thread pool; one failing file never stops the others.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from services.headers import read_headers
from services.reader import MetadataReader
from services.schema import Field
from services.settings import PublishConfig
from services.site import PublishError, SiteWriter

log = logging.getLogger(__name__)


class Kind(Enum):
    POST = "Post"
    PAGE = "Page"
    NEITHER = "Neither"


class SitePublisher(Protocol):
    def publish_post(self, metadata: dict[str, str], path: str) -> str: ...

    def publish_page(self, metadata: dict[str, str], path: str) -> str: ...

    def list_base_files(self, layout: str) -> list[str]: ...

    def destination(self, metadata: dict[str, str], path: str, post: bool) -> str: ...


@dataclass
class PublishOutcome:
    path: str
    message: str
    ok: bool


def not_an_article(name: str) -> str:
    return f"'{name}' is not an article, publication skipped!"


class Dispatcher:
    def __init__(
        self,
        config: PublishConfig,
        site: SitePublisher = None,
        reader: MetadataReader = None,
    ):
        self._config = config
        self._site = site or SiteWriter(config)
        self._reader = reader or MetadataReader(config)

    def classify(self, layout: str | None) -> Kind:
        if layout == self._config.post_layout:
            return Kind.POST
        if layout == self._config.page_layout:
            return Kind.PAGE
        return Kind.NEITHER

    def dispatch(self, path: str) -> str:
        """Publish the document at *path*. Returns the status message."""
        message, _ = self._dispatch(path)
        return message

    def _dispatch(self, path: str) -> tuple[str, bool]:
        kind, metadata, err = self._prepare(path)
        if err:
            return err, False
        return self._publish(kind, metadata, path)

    def _prepare(self, path: str) -> tuple[Kind, dict[str, str] | None, str | None]:
        """Read and classify *path*. Returns (kind, metadata, None) or (kind, None, message)."""
        name = os.path.basename(path)
        try:
            raw = read_headers(path, keep_blank=self._config.keep_blank)
            if Field.LAYOUT.value not in raw:
                return Kind.NEITHER, None, not_an_article(name)
            metadata, err = self._reader.read(path)
        except (OSError, UnicodeDecodeError) as e:
            return Kind.NEITHER, None, f"Cannot read '{name}': {e}"
        if err:
            return Kind.NEITHER, None, err

        # Route on the validated layout, not the raw lookup above.
        kind = self.classify(metadata.get(Field.LAYOUT.value))
        if kind is Kind.NEITHER:
            return kind, None, not_an_article(name)
        return kind, metadata, None

    def _publish(self, kind: Kind, metadata: dict[str, str], path: str) -> tuple[str, bool]:
        try:
            if kind is Kind.POST:
                self._site.publish_post(metadata, path)
            else:
                self._site.publish_page(metadata, path)
        except PublishError as e:
            return str(e), False
        return f"{kind.value} '{os.path.basename(path)}' published!", True

    def publish_all(self, kind: Kind) -> list[PublishOutcome]:
        """Publish every source file of *kind*. Results follow the listing order.

        Files are read in parallel, then each is given its destination in
        listing order. A file whose destination an earlier file already holds
        is reported as failed and not written, so no two writes share a path.
        """
        if kind is Kind.POST:
            layout = self._config.post_layout
        elif kind is Kind.PAGE:
            layout = self._config.page_layout
        else:
            raise ValueError("publish_all needs Kind.POST or Kind.PAGE")

        paths = self._site.list_base_files(layout)
        if not paths:
            return []

        outcomes: dict[str, PublishOutcome] = {}
        with ThreadPoolExecutor(max_workers=self._config.max_workers) as pool:
            prepared = [(path, pool.submit(self._prepare, path)) for path in paths]
            claimed: dict[str, str] = {}
            writes = []
            for path, future in prepared:
                try:
                    doc_kind, metadata, err = future.result()
                    if err:
                        outcomes[path] = _report(PublishOutcome(path, err, False))
                        continue
                    dest = self._site.destination(metadata, path, doc_kind is Kind.POST)
                except PublishError as e:
                    outcomes[path] = _report(PublishOutcome(path, str(e), False))
                    continue
                except Exception as e:
                    outcomes[path] = _failed(path, e)
                    continue

                first = claimed.setdefault(os.path.normcase(os.path.abspath(dest)), path)
                if first != path:
                    other = os.path.relpath(first, self._config.source_dir)
                    message = (
                        f"'{os.path.basename(path)}' skipped: {dest} is already "
                        f"published from '{other}'"
                    )
                    outcomes[path] = _report(PublishOutcome(path, message, False))
                    continue
                writes.append((path, pool.submit(self._publish, doc_kind, metadata, path)))

            for path, future in writes:
                try:
                    message, ok = future.result()
                except Exception as e:
                    outcomes[path] = _failed(path, e)
                else:
                    outcomes[path] = _report(PublishOutcome(path, message, ok))

        results = [outcomes[path] for path in paths]
        failed = sum(1 for o in results if not o.ok)
        log.info("Published %d/%d %s file(s)", len(results) - failed, len(results), layout)
        return results


def _report(outcome: PublishOutcome) -> PublishOutcome:
    if outcome.ok:
        log.info("%s", outcome.message)
    else:
        log.warning("%s", outcome.message)
    return outcome


def _failed(path: str, e: Exception) -> PublishOutcome:
    log.exception("Publishing %s failed", path)
    return PublishOutcome(path, f"'{os.path.basename(path)}' failed: {e}", False)
