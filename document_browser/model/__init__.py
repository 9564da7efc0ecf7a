from .document import DIRECTORY_MIME_TYPE, Document, DocumentFlags, DocumentId, format_size, format_time
from .load_result import DirectoryRequest, DirectoryType, LoadResult, SortOrder, ViewMode, parse_mode, parse_sort_order
from .mime import MimePredicate, find_common_mime_type, mime_icon_name, mime_matches, mime_matches_any

__all__ = [
    "DIRECTORY_MIME_TYPE",
    "DirectoryRequest",
    "DirectoryType",
    "Document",
    "DocumentFlags",
    "DocumentId",
    "LoadResult",
    "MimePredicate",
    "SortOrder",
    "ViewMode",
    "find_common_mime_type",
    "format_size",
    "format_time",
    "mime_icon_name",
    "mime_matches",
    "mime_matches_any",
    "parse_mode",
    "parse_sort_order",
]
