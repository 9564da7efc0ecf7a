"""Minimal Qt shell around DirectoryBrowser for a local folder.

    python -m document_browser.main [folder] [--search TEXT] [--grid]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from PySide6.QtCore import QSize
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QLabel,
    QListView,
    QMainWindow,
    QMessageBox,
    QStackedWidget,
    QToolBar,
)

from .actions import BrowserAction
from .browser import DirectoryBrowser
from .logger import get_logger
from .model import SortOrder, ViewMode
from .settings_manager import SettingsManager
from .sources.local import path_to_id
from .view_model import DirectoryListModel

_logger = get_logger("main")

_SORT_CHOICES = (
    ("Name", SortOrder.DISPLAY_NAME),
    ("Modified", SortOrder.LAST_MODIFIED),
    ("Size", SortOrder.SIZE),
)


class BrowserWindow(QMainWindow):
    def __init__(self, browser: DirectoryBrowser, title: str) -> None:
        super().__init__()
        self.setWindowTitle(title)
        self._browser = browser
        vm = browser.view_model

        self._model = DirectoryListModel(vm, self)
        self._view = QListView(self)
        self._view.setModel(self._model)
        self._view.setUniformItemSizes(True)
        self._view.setSelectionMode(QListView.SelectionMode.NoSelection)
        self._view.doubleClicked.connect(lambda idx: vm.activate(idx.row()))

        self._empty = QLabel("No items", self)
        self._stack = QStackedWidget(self)
        self._stack.addWidget(self._view)
        self._stack.addWidget(self._empty)
        self.setCentralWidget(self._stack)

        toolbar = QToolBar(self)
        self.addToolBar(toolbar)
        self._mode_action = toolbar.addAction("Grid")
        self._mode_action.setCheckable(True)
        self._mode_action.toggled.connect(
            lambda on: vm.on_user_mode_changed(ViewMode.GRID if on else ViewMode.LIST)
        )
        sort_box = QComboBox(self)
        for label, _order in _SORT_CHOICES:
            sort_box.addItem(label)
        sort_box.currentIndexChanged.connect(lambda i: vm.on_user_sort_order_changed(_SORT_CHOICES[i][1]))
        toolbar.addWidget(sort_box)
        actions = vm.visible_actions()
        self._open_action = toolbar.addAction("Open")
        self._open_action.triggered.connect(vm.open_checked)
        self._open_action.setVisible("open" in actions)
        self._delete_action = toolbar.addAction("Delete")
        self._delete_action.triggered.connect(self._delete_checked)
        self._delete_action.setVisible("delete" in actions)
        self._apply_selection_empty(vm.selection.is_empty)
        vm.selectionEmptyChanged.connect(self._apply_selection_empty)

        vm.rowsChanged.connect(self._apply_layout)
        vm.layoutChanged.connect(self._apply_layout)
        vm.scrollToTopRequested.connect(self._view.scrollToTop)
        vm.documentPicked.connect(lambda doc: _logger.info("picked: %s", doc.id))
        vm.documentsPicked.connect(lambda docs: _logger.info("picked %d documents", len(docs)))
        self._apply_layout()

    def _apply_layout(self) -> None:
        vm = self._browser.view_model
        self._stack.setCurrentWidget(self._empty if vm.is_empty else self._view)
        grid = vm.derived_mode == ViewMode.GRID
        self._mode_action.blockSignals(True)
        self._mode_action.setChecked(grid)
        self._mode_action.blockSignals(False)
        size = vm.thumbnail_size
        self._view.setViewMode(QListView.ViewMode.IconMode if grid else QListView.ViewMode.ListMode)
        self._view.setIconSize(QSize(size, size))

    def _apply_selection_empty(self, empty: bool) -> None:
        self._open_action.setEnabled(not empty)
        self._delete_action.setEnabled(not empty)

    def _delete_checked(self) -> None:
        def _notify(failed) -> None:
            QMessageBox.warning(self, "Delete", f"Failed to delete {len(failed)} item(s).")

        self._browser.delete_checked(_notify)

    def closeEvent(self, event) -> None:  # noqa: N802
        self._browser.shutdown()
        super().closeEvent(event)


def run(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv

    parser = argparse.ArgumentParser(description="Document browser")
    parser.add_argument("folder", nargs="?", default=".", help="Folder to list")
    parser.add_argument("--search", default=None, help="Recursive name search")
    parser.add_argument("--grid", action="store_true", help="Start in grid mode")
    parser.add_argument("--settings", default=str(Path.home() / ".document_browser" / "settings.json"))
    args, qt_args = parser.parse_known_args(argv[1:])

    settings = SettingsManager(args.settings)
    if args.grid:
        settings.data["default_mode"] = "grid"

    app = QApplication([argv[0], *qt_args])
    folder = Path(args.folder).expanduser().absolute()
    browser = DirectoryBrowser(
        root_id="local",
        container=path_to_id(folder),
        settings=settings,
        query=args.search,
        action=BrowserAction.MANAGE,
    )
    window = BrowserWindow(browser, str(folder))
    window.resize(900, 600)
    window.show()
    browser.start()
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
