from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

from .document import Document, DocumentId


class ViewMode(IntEnum):
    UNKNOWN = 0
    LIST = 1
    GRID = 2


class SortOrder(IntEnum):
    UNKNOWN = 0
    DISPLAY_NAME = 1
    LAST_MODIFIED = 2
    SIZE = 3


class DirectoryType(Enum):
    NORMAL = "normal"
    SEARCH = "search"


def parse_mode(value: str | int | None) -> ViewMode:
    if isinstance(value, int):
        try:
            return ViewMode(value)
        except ValueError:
            return ViewMode.UNKNOWN
    try:
        return ViewMode[str(value or "").strip().upper()]
    except KeyError:
        return ViewMode.UNKNOWN


def parse_sort_order(value: str | int | None) -> SortOrder:
    if isinstance(value, int):
        try:
            return SortOrder(value)
        except ValueError:
            return SortOrder.UNKNOWN
    try:
        return SortOrder[str(value or "").strip().upper()]
    except KeyError:
        return SortOrder.UNKNOWN


@dataclass(frozen=True)
class LoadResult:
    """One complete snapshot of a directory query.

    A new LoadResult fully replaces the previous one; there is no merging.
    """

    documents: tuple[Document, ...] = ()
    mode: ViewMode = ViewMode.UNKNOWN
    sort_order: SortOrder = SortOrder.UNKNOWN
    is_loading: bool = False
    info_message: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class DirectoryRequest:
    root_id: str
    container: DocumentId
    sort_order: SortOrder = SortOrder.DISPLAY_NAME
    query: str | None = None
    user_mode: ViewMode = ViewMode.LIST
    explicit_mode: ViewMode = ViewMode.UNKNOWN

    @property
    def type(self) -> DirectoryType:
        return DirectoryType.SEARCH if self.query else DirectoryType.NORMAL
