from document_browser.actions import BrowserAction
from document_browser.view_model import DisplayState, RowModel, SelectionController
from tests.helpers.fakes import doc, folder, result


def _selection(rows: RowModel, state: DisplayState | None = None):
    holder = {"rows": rows, "state": state or DisplayState()}
    sel = SelectionController(lambda: holder["rows"], lambda: holder["state"])
    return sel, holder


def test_check_document():
    a = doc("a.png")
    sel, _ = _selection(RowModel.rebuild(result(a)))

    assert sel.set_checked(0, True) is True
    assert sel.is_checked(0)
    assert sel.get_checked_documents() == [a]


def test_container_cannot_be_checked():
    sel, _ = _selection(RowModel.rebuild(result(folder("dir"), doc("a.png"))))

    assert sel.set_checked(0, True) is False
    assert not sel.is_checked(0)
    assert sel.is_empty


def test_footer_cannot_be_checked():
    sel, _ = _selection(RowModel.rebuild(result(doc("a.png"), is_loading=True)))

    assert sel.set_checked(1, True) is False
    assert sel.checked_positions == []


def test_filtered_mime_cannot_be_checked():
    state = DisplayState(accept_mimes=("image/*",))
    sel, _ = _selection(RowModel.rebuild(result(doc("a.txt", mime="text/plain"), doc("b.png"))), state)

    assert sel.set_checked(0, True) is False
    assert sel.set_checked(1, True) is True
    assert sel.checked_positions == [1]


def test_single_selection_mode_rejects_checks():
    state = DisplayState(allow_multiple=False, action=BrowserAction.GET_CONTENT)
    sel, _ = _selection(RowModel.rebuild(result(doc("a.png"))), state)

    assert sel.set_checked(0, True) is False


def test_rejected_check_never_emits():
    sel, _ = _selection(RowModel.rebuild(result(folder("dir"))))
    changes: list[int] = []
    sel.selectionChanged.connect(changes.append)

    sel.set_checked(0, True)

    assert changes == []


def test_checked_documents_are_in_position_order():
    docs = [doc(f"{n}.png") for n in "abc"]
    sel, _ = _selection(RowModel.rebuild(result(*docs)))
    sel.set_checked(2, True)
    sel.set_checked(0, True)

    assert sel.get_checked_documents() == [docs[0], docs[2]]
    assert sel.checked_count == 2


def test_empty_signal_only_on_transitions():
    sel, _ = _selection(RowModel.rebuild(result(doc("a"), doc("b"))))
    empties: list[bool] = []
    sel.selectionEmptyChanged.connect(empties.append)

    sel.set_checked(0, True)
    sel.set_checked(1, True)
    sel.set_checked(0, False)
    sel.set_checked(1, False)

    assert empties == [False, True]


def test_clear():
    sel, _ = _selection(RowModel.rebuild(result(doc("a"))))
    sel.set_checked(0, True)
    empties: list[bool] = []
    sel.selectionEmptyChanged.connect(empties.append)

    sel.clear()

    assert sel.get_checked_documents() == []
    assert empties == [True]
