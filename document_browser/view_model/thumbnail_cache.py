"""ThumbnailCache: bounded, thread-safe in-memory thumbnail store.

Keys are ``(DocumentId, size)``; values are ``QImage`` (safe to create and hand
across threads, unlike ``QPixmap``). Entries outlive any single load and are
shared by every view-model that asks for the process-wide instance.
"""

from __future__ import annotations

import threading
from collections import OrderedDict

from PySide6.QtGui import QImage

from document_browser.logger import get_logger
from document_browser.model import DocumentId

_logger = get_logger("thumbnail_cache")

DEFAULT_MAX_BYTES = 16 * 1024 * 1024


def _image_bytes(image: QImage) -> int:
    return max(int(image.sizeInBytes()), 1)


class ThumbnailCache:
    """LRU cache bounded by the total byte size of the stored images."""

    def __init__(self, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.max_bytes = int(max_bytes)
        self._entries: OrderedDict[tuple[DocumentId, int], QImage] = OrderedDict()
        self._bytes = 0
        self._lock = threading.Lock()

    def get(self, doc_id: DocumentId, size: int) -> QImage | None:
        key = (doc_id, int(size))
        with self._lock:
            image = self._entries.get(key)
            if image is not None:
                self._entries.move_to_end(key)
            return image

    def put(self, doc_id: DocumentId, size: int, image: QImage) -> None:
        if image is None or image.isNull():
            _logger.debug("put ignored null image: %s size=%s", doc_id, size)
            return
        key = (doc_id, int(size))
        with self._lock:
            old = self._entries.pop(key, None)
            if old is not None:
                self._bytes -= _image_bytes(old)
            self._entries[key] = image
            self._bytes += _image_bytes(image)
            self._trim_locked()

    def remove(self, doc_id: DocumentId) -> None:
        with self._lock:
            for key in [k for k in self._entries if k[0] == doc_id]:
                self._bytes -= _image_bytes(self._entries.pop(key))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._bytes = 0

    @property
    def total_bytes(self) -> int:
        with self._lock:
            return self._bytes

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: tuple[DocumentId, int]) -> bool:
        with self._lock:
            return key in self._entries

    def _trim_locked(self) -> None:
        # Always keep the most recent entry even if it alone exceeds the budget.
        while self._bytes > self.max_bytes and len(self._entries) > 1:
            key, image = self._entries.popitem(last=False)
            self._bytes -= _image_bytes(image)
            _logger.debug("evicted thumbnail: %s size=%s", key[0], key[1])


_shared: ThumbnailCache | None = None
_shared_lock = threading.Lock()


def shared_thumbnail_cache(max_bytes: int | None = None) -> ThumbnailCache:
    """Process-wide cache; ``max_bytes`` only applies when it is first created."""
    global _shared
    with _shared_lock:
        if _shared is None:
            _shared = ThumbnailCache(DEFAULT_MAX_BYTES if max_bytes is None else max_bytes)
        return _shared
