"""DirectoryViewModel: orchestrates rows, display state, selection and thumbnails.

All methods run on the UI thread. Background work (thumbnail fetches, mode
persistence) reports back through Qt signals.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QImage

from document_browser.actions import DeleteOutcome, ShareRequest, build_share_request, delete_documents, visible_actions
from document_browser.logger import get_logger
from document_browser.model import (
    Document,
    LoadResult,
    MimePredicate,
    SortOrder,
    ViewMode,
    format_size,
    format_time,
    mime_icon_name,
)

from .display_state import DisplayState, DisplayStateController, require_known_mode
from .footers import DataRow, FooterKind, FooterRow
from .row_model import RowModel
from .selection import SelectionController
from .thumbnail_fetcher import ThumbnailFetcher, thumbnail_allowed

_logger = get_logger("view_model")

DEFAULT_LIST_THUMBNAIL_MIMES = ("image/*", "video/*")

ROW_KIND_DOCUMENT = "document"


@dataclass(frozen=True)
class DocumentRowFields:
    title: str
    summary: str | None
    date_text: str | None
    size_text: str | None
    line2_visible: bool
    enabled: bool
    icon_alpha: float
    icon: str
    thumbnail: QImage | None
    layout: str


@dataclass(frozen=True)
class FooterRowFields:
    kind: FooterKind
    message: str | None
    icon: str | None
    layout: str
    enabled: bool = False


class DirectoryViewModel(QObject):
    rowsChanged = Signal()
    rerenderRequested = Signal()
    scrollToTopRequested = Signal()
    layoutChanged = Signal()
    stateChanged = Signal()
    thumbnailBound = Signal(object, QImage)  # slot, image
    selectionChanged = Signal(int)
    selectionEmptyChanged = Signal(bool)
    documentPicked = Signal(object)
    documentsPicked = Signal(list)

    def __init__(  # noqa: PLR0913
        self,
        request_reload: Callable[[SortOrder], None],
        thumbnails: ThumbnailFetcher,
        state: DisplayState | None = None,
        persist_mode: Callable[[ViewMode], None] | None = None,
        list_thumbnail_mimes: Iterable[str] = DEFAULT_LIST_THUMBNAIL_MIMES,
        grid_thumbnail_size: int = 180,
        list_icon_size: int = 48,
        pool=None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._request_reload = request_reload
        self._thumbnails = thumbnails
        self._list_mimes = tuple(list_thumbnail_mimes)
        self._grid_size = int(grid_thumbnail_size)
        self._list_size = int(list_icon_size)
        self._rows = RowModel.empty()

        self._display = DisplayStateController(
            state or DisplayState(),
            reload=self._on_reload_requested,
            persist_mode=persist_mode,
            pool=pool,
            parent=self,
        )
        self._last_mode = require_known_mode(self._display.state.derived_mode)

        self._selection = SelectionController(lambda: self._rows, lambda: self._display.state, parent=self)

        self._display.rowsRebuildRequested.connect(self._install_rows)
        self._display.stateChanged.connect(self._on_state_changed)
        self._display.rerenderRequested.connect(self.rerenderRequested)
        self._display.scrollToTopRequested.connect(self.scrollToTopRequested)
        self._selection.selectionChanged.connect(self.selectionChanged)
        self._selection.selectionEmptyChanged.connect(self.selectionEmptyChanged)
        self._thumbnails.thumbnail_ready.connect(self._on_thumbnail_ready)

    # ---- inputs ----------------------------------------------------
    def on_result(self, result: LoadResult) -> None:
        _logger.debug(
            "on_result: docs=%d mode=%s sort=%s loading=%s info=%s error=%s",
            len(result.documents),
            result.mode.name,
            result.sort_order.name,
            result.is_loading,
            result.info_message is not None,
            result.error_message is not None,
        )
        self._display.on_load_result(result)

    def on_user_sort_order_changed(self, order: SortOrder) -> None:
        self._display.on_sort_order_changed(order)

    def on_user_mode_changed(self, mode: ViewMode) -> None:
        self._display.on_mode_changed(mode)

    # ---- read side -------------------------------------------------
    @property
    def display(self) -> DisplayStateController:
        return self._display

    @property
    def state(self) -> DisplayState:
        return self._display.state

    @property
    def rows(self) -> RowModel:
        return self._rows

    @property
    def selection(self) -> SelectionController:
        return self._selection

    @property
    def row_count(self) -> int:
        return self._rows.row_count

    @property
    def is_empty(self) -> bool:
        return self._rows.is_empty

    @property
    def derived_mode(self) -> ViewMode:
        return self._display.state.derived_mode

    @property
    def derived_sort_order(self) -> SortOrder:
        return self._display.state.derived_sort_order

    @property
    def thumbnail_size(self) -> int:
        mode = require_known_mode(self.derived_mode)
        return self._grid_size if mode == ViewMode.GRID else self._list_size

    def row_kind(self, position: int) -> str:
        row = self._rows.get(position)
        if isinstance(row, FooterRow):
            return row.kind.value
        return ROW_KIND_DOCUMENT

    def bind_row(self, position: int, slot: Hashable) -> DocumentRowFields | FooterRowFields:
        """Resolve display fields for ``position`` rendered into ``slot``.

        Binding always supersedes whatever thumbnail request ``slot`` had.
        """
        mode = require_known_mode(self.derived_mode)
        row = self._rows.get(position)
        if isinstance(row, FooterRow):
            self._thumbnails.release(slot)
            return self._footer_fields(row, mode)
        return self._document_fields(row, slot, mode)

    def _document_fields(self, row: DataRow, slot: Hashable, mode: ViewMode) -> DocumentRowFields:
        state = self._display.state
        doc = row.document

        thumbnail: QImage | None = None
        if doc.supports_thumbnail and thumbnail_allowed(doc, mode, self._list_mimes):
            thumbnail = self._thumbnails.bind(slot, doc.id, self.thumbnail_size)
        else:
            self._thumbnails.release(slot)

        date_text = format_time(doc.last_modified) if doc.last_modified != -1 else None
        size_text = None
        if state.show_size and not doc.is_container and doc.size != -1:
            size_text = format_size(doc.size)

        enabled = MimePredicate(state.accept_mimes)(doc)
        return DocumentRowFields(
            title=doc.display_name,
            summary=doc.summary,
            date_text=date_text,
            size_text=size_text,
            line2_visible=any(v is not None for v in (doc.summary, date_text, size_text)),
            enabled=enabled,
            icon_alpha=1.0 if enabled else 0.5,
            icon=doc.icon or mime_icon_name(doc.mime_type),
            thumbnail=thumbnail,
            layout="doc_grid" if mode == ViewMode.GRID else "doc_list",
        )

    @staticmethod
    def _footer_fields(row: FooterRow, mode: ViewMode) -> FooterRowFields:
        if row.kind is FooterKind.LOADING:
            return FooterRowFields(kind=row.kind, message=None, icon=None, layout="loading")
        return FooterRowFields(
            kind=row.kind,
            message=row.message,
            icon="alert",
            layout="message_grid" if mode == ViewMode.GRID else "message_list",
        )

    # ---- selection and actions ------------------------------------
    def set_checked(self, position: int, checked: bool) -> bool:
        return self._selection.set_checked(position, checked)

    def get_checked_documents(self) -> list[Document]:
        return self._selection.get_checked_documents()

    def visible_actions(self) -> frozenset[str]:
        return visible_actions(self._display.state.action)

    def activate(self, position: int) -> None:
        row = self._rows.get(position)
        if not isinstance(row, DataRow):
            return
        if MimePredicate(self._display.state.accept_mimes)(row.document):
            self.documentPicked.emit(row.document)

    def open_checked(self) -> None:
        docs = self.get_checked_documents()
        if docs:
            self.documentsPicked.emit(docs)

    def share_checked(self) -> ShareRequest | None:
        return build_share_request(self.get_checked_documents())

    def delete_checked(
        self,
        deleter: Callable[[Document], bool],
        notify_failure: Callable[[list[Document]], None] | None = None,
    ) -> DeleteOutcome:
        outcome = delete_documents(self.get_checked_documents(), deleter, notify_failure)
        for doc in outcome.deleted:
            self._thumbnails.cache.remove(doc.id)
        self._selection.clear()
        if outcome.deleted:
            self._request_reload(self._display.state.user_sort_order)
        return outcome

    # ---- internal --------------------------------------------------
    def _on_reload_requested(self, order: SortOrder) -> None:
        _logger.debug("reload requested: sort=%s", order.name)
        self._request_reload(order)

    def _install_rows(self, result: LoadResult) -> None:
        # Slots may be keyed by position; pending fetches belong to the old rows.
        self._thumbnails.cancel_all()
        self._rows = RowModel.rebuild(result)
        self._selection.clear()
        self.rowsChanged.emit()

    def _on_state_changed(self) -> None:
        mode = require_known_mode(self.derived_mode)
        if mode != self._last_mode:
            self._last_mode = mode
            self._thumbnails.cancel_all()
            self.layoutChanged.emit()
        self.stateChanged.emit()

    def _on_thumbnail_ready(self, slot: Hashable, _doc_id, image: QImage) -> None:
        self.thumbnailBound.emit(slot, image)

    def shutdown(self) -> None:
        self._thumbnails.cancel_all()
        self._display.shutdown()
