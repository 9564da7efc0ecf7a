"""Immutable document snapshots as delivered by a query source."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntFlag

DIRECTORY_MIME_TYPE = "inode/directory"

_KB = 1000
_MB = 1000**2
_GB = 1000**3


class DocumentFlags(IntFlag):
    NONE = 0
    SUPPORTS_THUMBNAIL = 1
    SUPPORTS_DELETE = 2
    DIR_PREFERS_GRID = 4


@dataclass(frozen=True)
class DocumentId:
    authority: str
    document_id: str

    @property
    def uri(self) -> str:
        return f"content://{self.authority}/document/{self.document_id}"

    def __str__(self) -> str:
        return f"{self.authority}:{self.document_id}"


@dataclass(frozen=True)
class Document:
    id: DocumentId
    display_name: str
    mime_type: str
    flags: DocumentFlags = DocumentFlags.NONE
    size: int = -1
    last_modified: int = -1
    summary: str | None = None
    icon: str | None = None

    @property
    def is_container(self) -> bool:
        return self.mime_type == DIRECTORY_MIME_TYPE

    @property
    def supports_thumbnail(self) -> bool:
        return bool(self.flags & DocumentFlags.SUPPORTS_THUMBNAIL)

    @property
    def is_delete_supported(self) -> bool:
        return bool(self.flags & DocumentFlags.SUPPORTS_DELETE)

    @property
    def prefers_grid(self) -> bool:
        return self.is_container and bool(self.flags & DocumentFlags.DIR_PREFERS_GRID)


def format_size(size_bytes: int) -> str:
    size_bytes = max(int(size_bytes), 0)
    if size_bytes < _KB:
        return f"{size_bytes} B"
    if size_bytes < _MB:
        return f"{size_bytes / _KB:.1f} KB"
    if size_bytes < _GB:
        return f"{size_bytes / _MB:.1f} MB"
    return f"{size_bytes / _GB:.1f} GB"


def format_time(when_ms: int, now: datetime | None = None) -> str:
    """Time of day for today, month/day for this year, full date otherwise."""
    then = datetime.fromtimestamp(when_ms / 1000)
    now = now or datetime.now()
    if then.year != now.year:
        return then.strftime("%b %d, %Y")
    if then.timetuple().tm_yday != now.timetuple().tm_yday:
        return then.strftime("%b %d")
    return then.strftime("%H:%M")
