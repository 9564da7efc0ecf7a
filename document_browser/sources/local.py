"""Local-filesystem implementation of the query, thumbnail and delete collaborators.

Document ids are absolute POSIX-style paths under the ``local`` authority.
"""

from __future__ import annotations

import mimetypes
import os
from collections.abc import Iterator
from pathlib import Path

from PySide6.QtGui import QImage
from send2trash import send2trash

from document_browser.errors import QueryError
from document_browser.logger import get_logger
from document_browser.model import (
    DIRECTORY_MIME_TYPE,
    DirectoryRequest,
    DirectoryType,
    Document,
    DocumentFlags,
    DocumentId,
    LoadResult,
    SortOrder,
    ViewMode,
    mime_matches,
)

from .thumbnails import decode_thumbnail

_logger = get_logger("local_source")

LOCAL_AUTHORITY = "local"
FALLBACK_MIME_TYPE = "application/octet-stream"
# Share of thumbnail-capable files at which a folder opens in grid mode.
GRID_IMAGE_RATIO = 0.5


def path_to_id(path: str | os.PathLike) -> DocumentId:
    return DocumentId(LOCAL_AUTHORITY, Path(path).expanduser().absolute().as_posix())


def _guess_mime(name: str) -> str:
    mime, _ = mimetypes.guess_type(name)
    return mime or FALLBACK_MIME_TYPE


def _sort_key(order: SortOrder):
    if order == SortOrder.LAST_MODIFIED:
        return lambda d: (-d.last_modified, d.display_name.lower())
    if order == SortOrder.SIZE:
        return lambda d: (-d.size, d.display_name.lower())
    # Name sort lists directories first.
    return lambda d: (not d.is_container, d.display_name.lower())


class LocalDocumentSource:
    def __init__(self, max_results: int = 5000, search_batch_size: int = 200, show_hidden: bool = False) -> None:
        self.max_results = int(max_results)
        self.search_batch_size = max(1, int(search_batch_size))
        self.show_hidden = show_hidden

    # ---- documents -------------------------------------------------
    def document_for_entry(self, entry: os.DirEntry, parent_writable: bool) -> Document:
        st = entry.stat()
        is_dir = entry.is_dir()
        mime = DIRECTORY_MIME_TYPE if is_dir else _guess_mime(entry.name)

        flags = DocumentFlags.NONE
        if mime_matches("image/*", mime):
            flags |= DocumentFlags.SUPPORTS_THUMBNAIL
        if parent_writable:
            flags |= DocumentFlags.SUPPORTS_DELETE

        return Document(
            id=path_to_id(entry.path),
            display_name=entry.name,
            mime_type=mime,
            flags=flags,
            size=-1 if is_dir else int(st.st_size),
            last_modified=int(st.st_mtime_ns) // 1_000_000,
        )

    def container_document(self, folder: Path, children: list[Document]) -> Document:
        """Document for ``folder`` itself; picture folders prefer the grid."""
        files = [d for d in children if not d.is_container]
        flags = DocumentFlags.NONE
        if files and sum(d.supports_thumbnail for d in files) >= GRID_IMAGE_RATIO * len(files):
            flags |= DocumentFlags.DIR_PREFERS_GRID
        return Document(
            id=path_to_id(folder),
            display_name=folder.name or folder.as_posix(),
            mime_type=DIRECTORY_MIME_TYPE,
            flags=flags,
        )

    def _list_dir(self, folder: Path) -> list[Document]:
        writable = os.access(folder, os.W_OK)
        docs: list[Document] = []
        with os.scandir(folder) as it:
            for entry in it:
                if not self.show_hidden and entry.name.startswith("."):
                    continue
                try:
                    docs.append(self.document_for_entry(entry, writable))
                except OSError as exc:
                    # Entry vanished or is unreadable; skip it.
                    _logger.debug("skip entry %s: %s", entry.path, exc)
        return docs

    # ---- DirectoryQuerySource --------------------------------------
    def query(self, request: DirectoryRequest) -> Iterator[LoadResult]:
        folder = Path(request.container.document_id)
        if request.container.authority != LOCAL_AUTHORITY:
            raise QueryError(f"unsupported authority: {request.container.authority}")
        if not folder.is_dir():
            raise QueryError(f"not a directory: {folder}")

        if request.type is DirectoryType.SEARCH:
            yield from self._search(folder, request)
            return

        try:
            docs = self._list_dir(folder)
        except OSError as exc:
            raise QueryError(f"cannot list {folder}: {exc.strerror or exc}") from exc
        mode = ViewMode.GRID if self.container_document(folder, docs).prefers_grid else ViewMode.UNKNOWN
        yield self._finish(docs, request, is_loading=False, mode=mode)

    def _search(self, folder: Path, request: DirectoryRequest) -> Iterator[LoadResult]:
        needle = (request.query or "").lower()
        hits: list[Document] = []
        next_batch = self.search_batch_size
        scanned_all = True

        for dirpath, dirnames, _filenames in os.walk(folder):
            if not self.show_hidden:
                dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            try:
                docs = self._list_dir(Path(dirpath))
            except OSError as exc:
                _logger.debug("search skip %s: %s", dirpath, exc)
                continue
            hits.extend(d for d in docs if needle in d.display_name.lower())
            if len(hits) > self.max_results:
                scanned_all = False
                break
            if len(hits) >= next_batch:
                next_batch = len(hits) + self.search_batch_size
                yield self._finish(hits, request, is_loading=True)

        yield self._finish(hits, request, is_loading=False, total_known=scanned_all)

    def _finish(
        self,
        docs: list[Document],
        request: DirectoryRequest,
        is_loading: bool,
        mode: ViewMode = ViewMode.UNKNOWN,
        total_known: bool = True,
    ) -> LoadResult:
        ordered = sorted(docs, key=_sort_key(request.sort_order))
        info = None
        if len(ordered) > self.max_results:
            total = len(ordered) if total_known else f"more than {self.max_results}"
            info = f"Showing the first {self.max_results} of {total} items"
            ordered = ordered[: self.max_results]
        return LoadResult(
            documents=tuple(ordered),
            mode=mode,
            sort_order=request.sort_order,
            is_loading=is_loading,
            info_message=info,
        )

    # ---- ThumbnailSource -------------------------------------------
    def load_thumbnail(self, doc_id: DocumentId, size: int) -> QImage:
        if doc_id.authority != LOCAL_AUTHORITY:
            raise ValueError(f"unsupported authority: {doc_id.authority}")
        return decode_thumbnail(doc_id.document_id, size)

    # ---- DocumentDeleter -------------------------------------------
    def delete_document(self, doc: Document) -> bool:
        if doc.id.authority != LOCAL_AUTHORITY:
            return False
        send2trash(doc.id.document_id)
        _logger.debug("moved to trash: %s", doc.id.document_id)
        return True
