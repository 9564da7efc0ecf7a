from .base import DirectoryQuerySource, DocumentDeleter, ModePreferenceStore, ThumbnailSource
from .directory_loader import DirectoryLoader, next_load_id
from .local import LOCAL_AUTHORITY, LocalDocumentSource
from .preferences import SettingsModePreferences

__all__ = [
    "LOCAL_AUTHORITY",
    "DirectoryLoader",
    "DirectoryQuerySource",
    "DocumentDeleter",
    "LocalDocumentSource",
    "ModePreferenceStore",
    "SettingsModePreferences",
    "ThumbnailSource",
    "next_load_id",
]
