from __future__ import annotations

import threading

from document_browser.logger import get_logger
from document_browser.model import DocumentId, ViewMode, parse_mode
from document_browser.settings_manager import SettingsManager

_logger = get_logger("preferences")

_KEY = "view_modes"


class SettingsModePreferences:
    """Per-directory view mode stored in the settings file under ``view_modes``."""

    def __init__(self, settings: SettingsManager) -> None:
        self._settings = settings
        self._lock = threading.Lock()

    @staticmethod
    def key(root_id: str, doc_id: DocumentId) -> str:
        return f"{root_id}|{doc_id.authority}|{doc_id.document_id}"

    def get_mode(self, root_id: str, doc_id: DocumentId) -> ViewMode:
        with self._lock:
            modes = self._settings.get(_KEY)
            if not isinstance(modes, dict):
                return ViewMode.UNKNOWN
            return parse_mode(modes.get(self.key(root_id, doc_id)))

    def set_mode(self, root_id: str, doc_id: DocumentId, mode: ViewMode) -> None:
        with self._lock:
            modes = self._settings.get(_KEY)
            modes = dict(modes) if isinstance(modes, dict) else {}
            modes[self.key(root_id, doc_id)] = mode.name.lower()
            self._settings.set(_KEY, modes)
        _logger.debug("mode saved: %s -> %s", self.key(root_id, doc_id), mode.name)
