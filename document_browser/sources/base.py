"""Collaborator protocols consumed by the view-model.

Implementations may block; the core always calls them from background pools
except where noted.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from PySide6.QtGui import QImage

from document_browser.model import DirectoryRequest, Document, DocumentId, LoadResult, ViewMode


class DirectoryQuerySource(Protocol):
    def query(self, request: DirectoryRequest) -> Iterable[LoadResult]:
        """Yield complete snapshots; the last one should have ``is_loading=False``."""
        ...


class ThumbnailSource(Protocol):
    def load_thumbnail(self, doc_id: DocumentId, size: int) -> QImage:
        """Return a thumbnail no larger than ``size`` on either edge; raise on failure."""
        ...


class ModePreferenceStore(Protocol):
    def get_mode(self, root_id: str, doc_id: DocumentId) -> ViewMode: ...

    def set_mode(self, root_id: str, doc_id: DocumentId, mode: ViewMode) -> None: ...


class DocumentDeleter(Protocol):
    def delete_document(self, doc: Document) -> bool: ...
