from __future__ import annotations

import json
import os
from typing import Any

from .logger import get_logger

_logger = get_logger("settings")

_MIN_THUMB = 16
_MAX_THUMB = 1024


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "default_mode": "list",
        "default_sort_order": "display_name",
        "grid_thumbnail_size": 180,
        "list_icon_size": 48,
        "list_thumbnail_mimes": ["image/*", "video/*"],
        "thumbnail_cache_bytes": 16 * 1024 * 1024,
        "thumbnail_workers": 4,
        "show_size": False,
        "search_batch_size": 200,
        "max_results": 5000,
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except Exception as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except Exception as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    def _get_int(self, key: str, lo: int, hi: int) -> int:
        try:
            value = int(self.get(key))
        except (TypeError, ValueError):
            _logger.warning("invalid %s, using default", key)
            value = int(self.DEFAULTS[key])
        return max(lo, min(hi, value))

    @property
    def grid_thumbnail_size(self) -> int:
        return self._get_int("grid_thumbnail_size", _MIN_THUMB, _MAX_THUMB)

    @property
    def list_icon_size(self) -> int:
        return self._get_int("list_icon_size", _MIN_THUMB, _MAX_THUMB)

    @property
    def thumbnail_cache_bytes(self) -> int:
        return self._get_int("thumbnail_cache_bytes", 0, 1 << 40)

    @property
    def thumbnail_workers(self) -> int:
        return self._get_int("thumbnail_workers", 1, 32)

    @property
    def search_batch_size(self) -> int:
        return self._get_int("search_batch_size", 1, 100_000)

    @property
    def max_results(self) -> int:
        return self._get_int("max_results", 1, 10_000_000)

    @property
    def show_size(self) -> bool:
        return bool(self.get("show_size", False))

    @property
    def list_thumbnail_mimes(self) -> tuple[str, ...]:
        val = self.get("list_thumbnail_mimes")
        if isinstance(val, list) and all(isinstance(v, str) for v in val):
            return tuple(val)
        return tuple(self.DEFAULTS["list_thumbnail_mimes"])

    @property
    def default_mode(self) -> str:
        return str(self.get("default_mode"))

    @property
    def default_sort_order(self) -> str:
        return str(self.get("default_sort_order"))
