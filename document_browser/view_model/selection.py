from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, Signal

from document_browser.logger import get_logger
from document_browser.model import Document, mime_matches_any

from .display_state import DisplayState
from .footers import DataRow
from .row_model import RowModel

_logger = get_logger("selection")


class SelectionController(QObject):
    """Checked row positions for the current RowModel.

    Only non-container documents matching the active mime filter can be
    checked; everything else is forced back to unchecked immediately.
    Positions are meaningless across rebuilds, so the owner calls ``clear``
    whenever the RowModel is replaced.
    """

    selectionChanged = Signal(int)  # checked count
    selectionEmptyChanged = Signal(bool)  # True when nothing is checked

    def __init__(
        self,
        rows: Callable[[], RowModel],
        state: Callable[[], DisplayState],
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._rows = rows
        self._state = state
        self._checked: set[int] = set()

    def is_checkable(self, position: int) -> bool:
        state = self._state()
        if not state.allow_multiple:
            return False
        row = self._rows().get(position)
        if not isinstance(row, DataRow):
            return False
        doc = row.document
        return not doc.is_container and mime_matches_any(state.accept_mimes, doc.mime_type)

    def set_checked(self, position: int, checked: bool) -> bool:
        """Apply a check change; returns the resulting checked state of ``position``."""
        was_empty = not self._checked
        if checked and not self.is_checkable(position):
            _logger.debug("check rejected: position=%s", position)
            checked = False

        if checked:
            if position in self._checked:
                return True
            self._checked.add(position)
        else:
            if position not in self._checked:
                return False
            self._checked.discard(position)

        self._emit_changed(was_empty)
        return checked

    def is_checked(self, position: int) -> bool:
        return position in self._checked

    @property
    def checked_positions(self) -> list[int]:
        return sorted(self._checked)

    @property
    def checked_count(self) -> int:
        return len(self._checked)

    @property
    def is_empty(self) -> bool:
        return not self._checked

    def get_checked_documents(self) -> list[Document]:
        rows = self._rows()
        docs: list[Document] = []
        for position in sorted(self._checked):
            row = rows.get(position)
            if isinstance(row, DataRow):
                docs.append(row.document)
        return docs

    def clear(self) -> None:
        if not self._checked:
            return
        self._checked.clear()
        self._emit_changed(was_empty=False)

    def _emit_changed(self, was_empty: bool) -> None:
        self.selectionChanged.emit(len(self._checked))
        if was_empty != (not self._checked):
            self.selectionEmptyChanged.emit(not self._checked)
