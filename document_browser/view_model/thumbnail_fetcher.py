"""Per-slot asynchronous thumbnail retrieval.

Every bind tags the destination slot with a ``SlotTag`` (compared by value).
A fetch result is delivered to the slot only if the slot still carries the
tag the fetch was issued with; otherwise the result is cached and dropped.

Threading:
- ``bind``/``release``/``cancel_all`` run on the UI thread and own the tag map.
- Fetches run on a thread pool; the cache write happens there, the completion
  is marshalled back through a queued Qt signal.
"""

from __future__ import annotations

import itertools
from collections.abc import Hashable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtGui import QImage

from document_browser.errors import InternalConsistencyError
from document_browser.logger import get_logger
from document_browser.metrics import metrics
from document_browser.model import Document, DocumentId, ViewMode, mime_matches_any
from document_browser.sources.base import ThumbnailSource

from .thumbnail_cache import ThumbnailCache

_logger = get_logger("thumbnails")


@dataclass(frozen=True)
class SlotTag:
    doc_id: DocumentId
    size: int
    request_id: int


def thumbnail_allowed(doc: Document, mode: ViewMode, list_mimes: Iterable[str]) -> bool:
    """Grid shows thumbnails for everything; list only for allow-listed mime types."""
    if mode == ViewMode.GRID:
        return True
    if mode == ViewMode.LIST:
        return mime_matches_any(tuple(list_mimes), doc.mime_type)
    raise InternalConsistencyError(f"unknown mode {mode!r}")


class ThumbnailFetcher(QObject):
    """Issues at most one outstanding fetch per view slot."""

    # slot, DocumentId, QImage. Only emitted for slots whose tag still matches.
    thumbnail_ready = Signal(object, object, QImage)

    _fetch_finished = Signal(object, object, QImage)  # slot, SlotTag, image

    def __init__(
        self,
        source: ThumbnailSource,
        cache: ThumbnailCache,
        pool=None,
        workers: int = 4,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._source = source
        self._cache = cache
        self._owns_pool = pool is None
        self._pool = pool if pool is not None else ThreadPoolExecutor(max_workers=workers, thread_name_prefix="thumbs")
        self._request_ids = itertools.count(1)
        self._slot_tags: dict[Hashable, SlotTag] = {}
        self._futures: dict[Hashable, Future] = {}
        self._fetch_finished.connect(self._on_fetch_finished)

    @property
    def cache(self) -> ThumbnailCache:
        return self._cache

    def bind(self, slot: Hashable, doc_id: DocumentId, size: int) -> QImage | None:
        """Bind ``doc_id`` to ``slot``: cached image now, or ``None`` and a fetch."""
        self._cancel_slot(slot)

        cached = self._cache.get(doc_id, size)
        if cached is not None:
            metrics.inc("thumbnails.cache_hit")
            return cached

        tag = SlotTag(doc_id, int(size), next(self._request_ids))
        self._slot_tags[slot] = tag
        metrics.inc("thumbnails.fetch_started")
        _logger.debug("fetch queued: slot=%s doc=%s size=%s id=%s", slot, doc_id, size, tag.request_id)
        self._futures[slot] = self._pool.submit(self._run_fetch, slot, tag)
        return None

    def release(self, slot: Hashable) -> None:
        """Forget ``slot`` (e.g. it now shows a static icon)."""
        self._cancel_slot(slot)

    def pending_tag(self, slot: Hashable) -> SlotTag | None:
        return self._slot_tags.get(slot)

    def cancel_all(self) -> None:
        for slot in list(self._slot_tags):
            self._cancel_slot(slot)

    def shutdown(self) -> None:
        self.cancel_all()
        if self._owns_pool:
            self._pool.shutdown(wait=False, cancel_futures=True)

    def _cancel_slot(self, slot: Hashable) -> None:
        self._slot_tags.pop(slot, None)
        future = self._futures.pop(slot, None)
        if future is not None:
            future.cancel()

    # ---- worker thread ---------------------------------------------
    def _run_fetch(self, slot: Hashable, tag: SlotTag) -> None:
        try:
            image = self._source.load_thumbnail(tag.doc_id, tag.size)
        except Exception as exc:
            metrics.inc("thumbnails.fetch_failed")
            _logger.debug("thumbnail fetch failed: doc=%s err=%s", tag.doc_id, exc)
            return
        if image is None or image.isNull():
            metrics.inc("thumbnails.fetch_failed")
            _logger.debug("thumbnail fetch returned no image: doc=%s", tag.doc_id)
            return
        self._cache.put(tag.doc_id, tag.size, image)
        self._fetch_finished.emit(slot, tag, image)

    # ---- UI thread -------------------------------------------------
    @Slot(object, object, QImage)
    def _on_fetch_finished(self, slot: Hashable, tag: SlotTag, image: QImage) -> None:
        if self._slot_tags.get(slot) != tag:
            metrics.inc("thumbnails.stale_discarded")
            _logger.debug("fetch result stale: slot=%s doc=%s id=%s", slot, tag.doc_id, tag.request_id)
            return
        self._slot_tags.pop(slot, None)
        self._futures.pop(slot, None)
        self.thumbnail_ready.emit(slot, tag.doc_id, image)
