import pytest

from document_browser.errors import InternalConsistencyError, RowIndexError
from document_browser.model import LoadResult, SortOrder, ViewMode
from document_browser.view_model import DataRow, FooterKind, FooterRow, RowModel, synthesize_footers
from tests.helpers.fakes import doc, result


def test_two_documents_no_footers():
    a, b = doc("a.png"), doc("b.png")
    rows = RowModel.rebuild(result(a, b, mode=ViewMode.GRID, sort_order=SortOrder.DISPLAY_NAME))

    assert rows.row_count == 2
    assert rows.footer_count == 0
    assert rows.get(0) == DataRow(0, a)
    assert rows.get(1) == DataRow(1, b)
    assert not rows.is_empty


def test_loading_only_is_not_empty():
    rows = RowModel.rebuild(LoadResult(is_loading=True))

    assert rows.document_count == 0
    assert rows.row_count == 1
    assert rows.get(0) == FooterRow(FooterKind.LOADING)
    assert rows.is_empty is False


def test_error_footer_follows_documents():
    rows = RowModel.rebuild(result(doc("a.png"), error="network error"))

    assert rows.row_count == 2
    assert isinstance(rows.get(0), DataRow)
    assert rows.get(1) == FooterRow(FooterKind.ERROR, "network error")


def test_footer_order_is_info_error_loading():
    r = result(doc("a"), doc("b"), doc("c"), is_loading=True, info="partial", error="boom")
    rows = RowModel.rebuild(r)

    assert rows.row_count == 3 + 3
    kinds = [rows.get(i).kind for i in range(3, 6)]
    assert kinds == [FooterKind.INFO, FooterKind.ERROR, FooterKind.LOADING]
    assert [f.message for f in synthesize_footers(r)] == ["partial", "boom", None]


def test_empty_result_shows_placeholder():
    rows = RowModel.rebuild(LoadResult())
    assert rows.row_count == 0
    assert rows.is_empty
    assert RowModel.empty().is_empty


@pytest.mark.parametrize("position", [-1, 2, 10])
def test_get_out_of_range_is_fatal(position):
    rows = RowModel.rebuild(result(doc("a"), is_loading=True))

    with pytest.raises(RowIndexError):
        rows.get(position)
    # Also an internal-consistency fault and an IndexError.
    with pytest.raises(InternalConsistencyError):
        rows.get(position)
    with pytest.raises(IndexError):
        rows.get(position)


def test_rebuild_does_not_reuse_previous_rows():
    first = RowModel.rebuild(result(doc("a"), doc("b")))
    second = RowModel.rebuild(result(doc("c")))

    assert first.row_count == 2
    assert second.row_count == 1
    assert second.documents == (doc("c"),)
