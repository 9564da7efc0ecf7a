from __future__ import annotations

from PySide6.QtCore import QAbstractListModel, QModelIndex, Qt
from PySide6.QtGui import QImage

from .directory_view_model import ROW_KIND_DOCUMENT, DirectoryViewModel, DocumentRowFields, FooterRowFields


class DirectoryListModel(QAbstractListModel):
    """Qt list model over a DirectoryViewModel (works for list and grid views).

    The view slot of a row is its row index. Bound fields are cached per row
    until the rows or the layout change; thumbnails arriving later are stored
    and announced with ``dataChanged`` on the Thumbnail role.
    """

    class Roles:
        RowKind = Qt.ItemDataRole.UserRole + 1
        Title = Qt.ItemDataRole.UserRole + 2
        Summary = Qt.ItemDataRole.UserRole + 3
        DateText = Qt.ItemDataRole.UserRole + 4
        SizeText = Qt.ItemDataRole.UserRole + 5
        Enabled = Qt.ItemDataRole.UserRole + 6
        IconName = Qt.ItemDataRole.UserRole + 7
        Thumbnail = Qt.ItemDataRole.UserRole + 8
        FooterMessage = Qt.ItemDataRole.UserRole + 9
        Line2Visible = Qt.ItemDataRole.UserRole + 10
        Layout = Qt.ItemDataRole.UserRole + 11

    def __init__(self, view_model: DirectoryViewModel, parent=None) -> None:
        super().__init__(parent)
        self._vm = view_model
        self._fields: dict[int, DocumentRowFields | FooterRowFields] = {}
        self._thumbs: dict[int, QImage] = {}
        self._shown_rows = view_model.row_count

        view_model.rowsChanged.connect(self._reset)
        view_model.layoutChanged.connect(self._reset)
        view_model.thumbnailBound.connect(self._on_thumbnail_bound)
        view_model.selectionChanged.connect(self._on_selection_changed)

    # ---- Qt model basics -----------------------------------------
    def rowCount(self, parent: QModelIndex | None = None) -> int:  # type: ignore[override]
        if parent is not None and parent.isValid():
            return 0
        return self._vm.row_count

    def roleNames(self) -> dict[int, bytes]:  # type: ignore[override]
        return {
            int(self.Roles.RowKind): b"rowKind",
            int(self.Roles.Title): b"title",
            int(self.Roles.Summary): b"summary",
            int(self.Roles.DateText): b"dateText",
            int(self.Roles.SizeText): b"sizeText",
            int(self.Roles.Enabled): b"enabled",
            int(self.Roles.IconName): b"iconName",
            int(self.Roles.Thumbnail): b"thumbnail",
            int(self.Roles.FooterMessage): b"footerMessage",
            int(self.Roles.Line2Visible): b"line2Visible",
            int(self.Roles.Layout): b"layout",
            int(Qt.ItemDataRole.CheckStateRole): b"checkState",
        }

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:  # type: ignore[override]
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        fields = self._bound(int(index.row()))
        if fields is None or not fields.enabled:
            return Qt.ItemFlag.NoItemFlags
        flags = Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
        if self._vm.selection.is_checkable(int(index.row())):
            flags |= Qt.ItemFlag.ItemIsUserCheckable
        return flags

    def setData(self, index: QModelIndex, value, role: int = Qt.ItemDataRole.EditRole) -> bool:  # type: ignore
        if not index.isValid() or int(role) != int(Qt.ItemDataRole.CheckStateRole):
            return False
        checked = value in (Qt.CheckState.Checked, Qt.CheckState.Checked.value)
        row = int(index.row())
        return self._vm.set_checked(row, checked) == checked

    def data(self, index: QModelIndex, role: int):  # type: ignore[override]  # noqa: PLR0911
        if not index.isValid():
            return None
        row = int(index.row())
        fields = self._bound(row)
        if fields is None:
            return None

        role = int(role)
        if role == int(self.Roles.RowKind):
            return ROW_KIND_DOCUMENT if isinstance(fields, DocumentRowFields) else fields.kind.value
        if role == int(self.Roles.Layout):
            return fields.layout
        if role == int(self.Roles.Enabled):
            return bool(fields.enabled)

        if isinstance(fields, FooterRowFields):
            if role in (int(self.Roles.FooterMessage), int(Qt.ItemDataRole.DisplayRole)):
                return fields.message
            if role == int(self.Roles.IconName):
                return fields.icon
            return None

        if role in (int(self.Roles.Title), int(Qt.ItemDataRole.DisplayRole)):
            return fields.title
        if role == int(self.Roles.Summary):
            return fields.summary
        if role == int(self.Roles.DateText):
            return fields.date_text
        if role == int(self.Roles.SizeText):
            return fields.size_text
        if role == int(self.Roles.Line2Visible):
            return fields.line2_visible
        if role == int(self.Roles.IconName):
            return fields.icon
        if role == int(Qt.ItemDataRole.CheckStateRole):
            return Qt.CheckState.Checked if self._vm.selection.is_checked(row) else Qt.CheckState.Unchecked
        if role in (int(self.Roles.Thumbnail), int(Qt.ItemDataRole.DecorationRole)):
            return self._thumbs.get(row, fields.thumbnail)
        if role == int(Qt.ItemDataRole.ToolTipRole):
            parts = [fields.title]
            parts.extend(t for t in (fields.summary, fields.date_text, fields.size_text) if t)
            return "\n".join(parts)
        return None

    # ---- binding -------------------------------------------------
    def _bound(self, row: int) -> DocumentRowFields | FooterRowFields | None:
        if not (0 <= row < self._vm.row_count):
            return None
        fields = self._fields.get(row)
        if fields is None:
            fields = self._vm.bind_row(row, row)
            self._fields[row] = fields
        return fields

    def _reset(self) -> None:
        self.beginResetModel()
        try:
            self._fields.clear()
            self._thumbs.clear()
            self._shown_rows = self._vm.row_count
        finally:
            self.endResetModel()

    def _on_thumbnail_bound(self, slot, image: QImage) -> None:
        if not isinstance(slot, int) or not (0 <= slot < self._vm.row_count):
            return
        self._thumbs[slot] = image
        idx = self.index(slot, 0)
        self.dataChanged.emit(idx, idx, [int(self.Roles.Thumbnail)])

    def _on_selection_changed(self, _count: int) -> None:
        # Checks are not tracked per row here, so refresh the whole range.
        last = min(self._shown_rows, self._vm.row_count) - 1
        if last < 0:
            return
        self.dataChanged.emit(self.index(0, 0), self.index(last, 0), [int(Qt.ItemDataRole.CheckStateRole)])
