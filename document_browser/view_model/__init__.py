"""List view-model for a directory of documents.

Usage:
    from document_browser.view_model import DirectoryViewModel, ThumbnailFetcher

    fetcher = ThumbnailFetcher(source, shared_thumbnail_cache())
    vm = DirectoryViewModel(request_reload=reload, thumbnails=fetcher)
    loader.resultReady.connect(lambda _id, result: vm.on_result(result))
"""

from .directory_view_model import DirectoryViewModel, DocumentRowFields, FooterRowFields
from .display_state import DisplayState, DisplayStateController, Effect, LoadCompleted, ModeChanged, SortChanged, reduce
from .footers import DataRow, FooterKind, FooterRow, synthesize_footers
from .list_model import DirectoryListModel
from .row_model import RowModel
from .selection import SelectionController
from .thumbnail_cache import ThumbnailCache, shared_thumbnail_cache
from .thumbnail_fetcher import SlotTag, ThumbnailFetcher, thumbnail_allowed

__all__ = [
    "DataRow",
    "DirectoryListModel",
    "DirectoryViewModel",
    "DisplayState",
    "DisplayStateController",
    "DocumentRowFields",
    "Effect",
    "FooterKind",
    "FooterRow",
    "FooterRowFields",
    "LoadCompleted",
    "ModeChanged",
    "RowModel",
    "SelectionController",
    "SlotTag",
    "SortChanged",
    "ThumbnailCache",
    "ThumbnailFetcher",
    "reduce",
    "shared_thumbnail_cache",
    "synthesize_footers",
    "thumbnail_allowed",
]
