"""DirectoryBrowser: wires a query source, loader, thumbnails and view-model.

One browser shows one container (optionally filtered by a search query) under
one load id. It is the shell-facing entry point; the view-model stays free of
any knowledge about where results come from.
"""

from __future__ import annotations

from PySide6.QtCore import QObject

from .actions import BrowserAction, DeleteOutcome
from .logger import get_logger
from .model import DirectoryRequest, Document, DocumentId, LoadResult, SortOrder, ViewMode, parse_mode, parse_sort_order
from .settings_manager import SettingsManager
from .sources import DirectoryLoader, LocalDocumentSource, SettingsModePreferences, next_load_id
from .view_model import DirectoryViewModel, DisplayState, ThumbnailFetcher, shared_thumbnail_cache

_logger = get_logger("browser")


class DirectoryBrowser(QObject):
    def __init__(  # noqa: PLR0913
        self,
        root_id: str,
        container: DocumentId,
        settings: SettingsManager,
        query: str | None = None,
        source=None,
        preferences=None,
        accept_mimes: tuple[str, ...] = ("*/*",),
        allow_multiple: bool = True,
        action: BrowserAction = BrowserAction.OPEN,
        loader: DirectoryLoader | None = None,
        fetcher: ThumbnailFetcher | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.root_id = root_id
        self.container = container
        self.query = query
        self.load_id = next_load_id()

        self._source = source or LocalDocumentSource(
            max_results=settings.max_results,
            search_batch_size=settings.search_batch_size,
        )
        self._preferences = preferences if preferences is not None else SettingsModePreferences(settings)
        self._loader = loader or DirectoryLoader(self._source, self._preferences, parent=self)
        self._fetcher = fetcher or ThumbnailFetcher(
            self._source,
            shared_thumbnail_cache(settings.thumbnail_cache_bytes),
            workers=settings.thumbnail_workers,
            parent=self,
        )

        user_mode = self._stored_mode()
        if user_mode == ViewMode.UNKNOWN:
            user_mode = parse_mode(settings.default_mode)
        if user_mode == ViewMode.UNKNOWN:
            user_mode = ViewMode.LIST
        user_sort = parse_sort_order(settings.default_sort_order)
        if user_sort == SortOrder.UNKNOWN:
            user_sort = SortOrder.DISPLAY_NAME

        state = DisplayState(
            derived_mode=user_mode,
            user_mode=user_mode,
            user_sort_order=user_sort,
            accept_mimes=tuple(accept_mimes),
            allow_multiple=allow_multiple,
            show_size=settings.show_size,
            action=action,
        )
        self.view_model = DirectoryViewModel(
            request_reload=self._restart,
            thumbnails=self._fetcher,
            state=state,
            persist_mode=self._persist_mode,
            list_thumbnail_mimes=settings.list_thumbnail_mimes,
            grid_thumbnail_size=settings.grid_thumbnail_size,
            list_icon_size=settings.list_icon_size,
            parent=self,
        )
        self._loader.resultReady.connect(self._on_result_ready)

    def start(self) -> None:
        """Kick off the first load."""
        self._restart(self.view_model.state.user_sort_order)

    def _request(self, sort_order: SortOrder) -> DirectoryRequest:
        return DirectoryRequest(
            root_id=self.root_id,
            container=self.container,
            sort_order=sort_order,
            query=self.query,
            user_mode=self.view_model.state.user_mode,
            explicit_mode=self.view_model.state.explicit_mode,
        )

    def _restart(self, sort_order: SortOrder) -> None:
        self._loader.restart(self.load_id, self._request(sort_order))

    def _stored_mode(self) -> ViewMode:
        try:
            return self._preferences.get_mode(self.root_id, self.container)
        except Exception as exc:
            _logger.warning("reading stored mode failed: %s", exc)
            return ViewMode.UNKNOWN

    def _persist_mode(self, mode: ViewMode) -> None:
        self._preferences.set_mode(self.root_id, self.container, mode)

    def _on_result_ready(self, load_id: int, result: LoadResult) -> None:
        if load_id != self.load_id:
            return
        self.view_model.on_result(result)

    def delete_checked(self, notify_failure=None) -> DeleteOutcome:
        return self.view_model.delete_checked(self._source.delete_document, notify_failure)

    def checked_documents(self) -> list[Document]:
        return self.view_model.get_checked_documents()

    def shutdown(self) -> None:
        self._loader.cancel(self.load_id)
        self.view_model.shutdown()
