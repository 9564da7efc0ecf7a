from datetime import datetime

from document_browser.model import (
    DirectoryRequest,
    DirectoryType,
    Document,
    DocumentFlags,
    DocumentId,
    SortOrder,
    ViewMode,
    format_size,
    format_time,
    parse_mode,
    parse_sort_order,
)
from tests.helpers.fakes import doc, folder


def _ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def test_document_flags():
    d = doc("a.png")
    assert d.supports_thumbnail and d.is_delete_supported and not d.is_container
    f = folder("dir")
    assert f.is_container and not f.supports_thumbnail


def test_document_id_uri():
    doc_id = DocumentId("local", "/tmp/a.png")
    assert doc_id.uri == "content://local/document//tmp/a.png"
    assert str(doc_id) == "local:/tmp/a.png"


def test_format_size():
    assert format_size(999) == "999 B"
    assert format_size(1500) == "1.5 KB"
    assert format_size(3_200_000) == "3.2 MB"
    assert format_size(5_000_000_000) == "5.0 GB"


def test_format_time_buckets():
    now = datetime(2024, 6, 15, 18, 0)
    assert format_time(_ms(datetime(2024, 6, 15, 9, 5)), now) == "09:05"
    assert format_time(_ms(datetime(2024, 2, 3, 9, 5)), now) == "Feb 03"
    assert format_time(_ms(datetime(2021, 2, 3, 9, 5)), now) == "Feb 03, 2021"


def test_parse_mode_and_sort():
    assert parse_mode("grid") == ViewMode.GRID
    assert parse_mode(" LIST ") == ViewMode.LIST
    assert parse_mode(None) == ViewMode.UNKNOWN
    assert parse_mode(99) == ViewMode.UNKNOWN
    assert parse_sort_order("size") == SortOrder.SIZE
    assert parse_sort_order("bogus") == SortOrder.UNKNOWN


def test_request_type_follows_query():
    container = DocumentId("local", "/x")
    assert DirectoryRequest("local", container).type is DirectoryType.NORMAL
    assert DirectoryRequest("local", container, query="cat").type is DirectoryType.SEARCH


def test_prefers_grid_only_for_flagged_containers():
    grid_dir = Document(DocumentId("t", "/p"), "p", "inode/directory", flags=DocumentFlags.DIR_PREFERS_GRID)
    flagged_file = Document(DocumentId("t", "/f"), "f", "image/png", flags=DocumentFlags.DIR_PREFERS_GRID)

    assert grid_dir.prefers_grid
    assert not folder("plain").prefers_grid
    assert not flagged_file.prefers_grid
