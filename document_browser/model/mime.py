"""Mime type matching with wildcard support (``image/*``, ``*/*``)."""

from __future__ import annotations

from collections.abc import Iterable

from .document import DIRECTORY_MIME_TYPE, Document


def mime_matches(filter_mime: str | None, mime: str | None) -> bool:
    if mime is None or filter_mime is None:
        return False
    if filter_mime == "*/*" or filter_mime == mime:
        return True
    if filter_mime.endswith("/*"):
        return mime.split("/", 1)[0] == filter_mime[:-2]
    return False


def mime_matches_any(filters: Iterable[str] | None, mime: str | None) -> bool:
    if filters is None:
        return True
    return any(mime_matches(f, mime) for f in filters)


class MimePredicate:
    """Accepts containers (so they can be navigated) and matching documents."""

    def __init__(self, accept_mimes: Iterable[str]) -> None:
        self.accept_mimes = tuple(accept_mimes)

    def __call__(self, doc: Document) -> bool:
        if doc.is_container:
            return True
        return mime_matches_any(self.accept_mimes, doc.mime_type)


def find_common_mime_type(mime_types: list[str]) -> str:
    common = mime_types[0].split("/")
    if len(common) != 2:
        return "*/*"

    for mime in mime_types[1:]:
        parts = mime.split("/")
        if len(parts) != 2:
            continue
        if common[1] != parts[1]:
            common[1] = "*"
        if common[0] != parts[0]:
            common = ["*", "*"]
            break

    return f"{common[0]}/{common[1]}"


_ICON_BY_MIME = {
    "application/pdf": "pdf",
    "application/zip": "archive",
    "application/x-tar": "archive",
    "application/gzip": "archive",
    "application/x-7z-compressed": "archive",
    "application/json": "text",
    "application/xml": "text",
    "application/vnd.android.package-archive": "apk",
}

_ICON_BY_MAJOR = {
    "audio": "audio",
    "image": "image",
    "text": "text",
    "video": "video",
}


def mime_icon_name(mime: str | None) -> str:
    """Static icon name used when no thumbnail is shown."""
    if mime == DIRECTORY_MIME_TYPE:
        return "folder"
    if not mime:
        return "generic"
    icon = _ICON_BY_MIME.get(mime)
    if icon is not None:
        return icon
    return _ICON_BY_MAJOR.get(mime.split("/", 1)[0], "generic")
