import pytest

from document_browser.errors import InternalConsistencyError
from document_browser.model import LoadResult, SortOrder, ViewMode
from document_browser.view_model import (
    DisplayState,
    DisplayStateController,
    Effect,
    LoadCompleted,
    ModeChanged,
    SortChanged,
    reduce,
)
from tests.helpers.fakes import ImmediatePool, doc, result


def test_sort_change_only_requests_reload():
    state = DisplayState(derived_mode=ViewMode.LIST, derived_sort_order=SortOrder.DISPLAY_NAME)
    new, effects = reduce(state, SortChanged(SortOrder.SIZE))

    assert effects == (Effect.RELOAD,)
    assert new.user_sort_order == SortOrder.SIZE
    assert new.derived_sort_order == SortOrder.DISPLAY_NAME
    assert new.derived_mode == ViewMode.LIST


def test_mode_change_is_synchronous_and_never_reloads():
    state = DisplayState(derived_mode=ViewMode.LIST, user_mode=ViewMode.LIST)
    new, effects = reduce(state, ModeChanged(ViewMode.GRID))

    assert Effect.RELOAD not in effects
    assert Effect.PERSIST_MODE in effects
    assert Effect.RERENDER in effects
    assert new.user_mode == ViewMode.GRID
    assert new.derived_mode == ViewMode.GRID


def test_load_completed_updates_derived_and_scrolls_on_sort_change():
    state = DisplayState()
    new, effects = reduce(state, LoadCompleted(result(mode=ViewMode.GRID, sort_order=SortOrder.SIZE)))

    assert new.derived_mode == ViewMode.GRID
    assert new.derived_sort_order == SortOrder.SIZE
    assert effects[0] == Effect.REBUILD_ROWS
    assert Effect.SCROLL_TO_TOP in effects

    again, effects = reduce(new, LoadCompleted(result(mode=ViewMode.GRID, sort_order=SortOrder.SIZE)))
    assert Effect.SCROLL_TO_TOP not in effects
    assert again.derived_sort_order == SortOrder.SIZE


def test_load_without_mode_keeps_user_mode():
    state = DisplayState(derived_mode=ViewMode.GRID, user_mode=ViewMode.GRID)
    new, _ = reduce(state, LoadCompleted(LoadResult(sort_order=SortOrder.DISPLAY_NAME)))
    assert new.derived_mode == ViewMode.GRID


def test_unknown_mode_is_fatal():
    with pytest.raises(InternalConsistencyError):
        reduce(DisplayState(), ModeChanged(ViewMode.UNKNOWN))


def test_last_write_wins_between_mode_change_and_load():
    state = DisplayState(derived_mode=ViewMode.LIST, user_mode=ViewMode.LIST)
    state, _ = reduce(state, SortChanged(SortOrder.SIZE))
    state, _ = reduce(state, ModeChanged(ViewMode.GRID))
    # The reload was issued before the toggle and reports the old mode.
    state, _ = reduce(state, LoadCompleted(result(mode=ViewMode.LIST, sort_order=SortOrder.SIZE)))

    assert state.derived_mode == ViewMode.LIST
    assert state.user_mode == ViewMode.GRID


def _controller(persist=None):
    reloads: list[SortOrder] = []
    persisted: list[ViewMode] = []

    def _persist(mode):
        persisted.append(mode)
        if persist is not None:
            persist(mode)

    ctl = DisplayStateController(DisplayState(), reload=reloads.append, persist_mode=_persist, pool=ImmediatePool())
    return ctl, reloads, persisted


def test_controller_sort_change_issues_exactly_one_reload():
    ctl, reloads, persisted = _controller()
    changed: list[int] = []
    ctl.stateChanged.connect(lambda: changed.append(1))

    ctl.on_sort_order_changed(SortOrder.LAST_MODIFIED)

    assert reloads == [SortOrder.LAST_MODIFIED]
    assert persisted == []
    assert changed == []
    assert ctl.derivedSortOrder == int(SortOrder.UNKNOWN)
    assert ctl.userSortOrder == int(SortOrder.LAST_MODIFIED)


def test_controller_mode_change_persists_and_rerenders_without_reload():
    ctl, reloads, persisted = _controller()
    rerenders: list[int] = []
    ctl.rerenderRequested.connect(lambda: rerenders.append(1))

    ctl.on_mode_changed(ViewMode.GRID)

    assert reloads == []
    assert persisted == [ViewMode.GRID]
    assert rerenders == [1]
    assert ctl.derivedMode == int(ViewMode.GRID)


def test_controller_persistence_failure_is_not_raised():
    def _boom(mode):
        raise OSError("disk full")

    ctl, reloads, persisted = _controller(persist=_boom)
    ctl.on_mode_changed(ViewMode.GRID)

    assert persisted == [ViewMode.GRID]
    assert ctl.state.derived_mode == ViewMode.GRID


def test_controller_load_result_emits_rebuild_and_scroll():
    ctl, _reloads, _persisted = _controller()
    rebuilds: list[LoadResult] = []
    scrolls: list[int] = []
    ctl.rowsRebuildRequested.connect(rebuilds.append)
    ctl.scrollToTopRequested.connect(lambda: scrolls.append(1))

    r = result(doc("a"), sort_order=SortOrder.DISPLAY_NAME)
    ctl.on_load_result(r)
    ctl.on_load_result(r)

    assert rebuilds == [r, r]
    assert scrolls == [1]


def test_mode_toggle_becomes_explicit_mode():
    state = DisplayState()
    assert state.explicit_mode == ViewMode.UNKNOWN

    state, _ = reduce(state, ModeChanged(ViewMode.GRID))
    assert state.explicit_mode == ViewMode.GRID

    # Loads never touch the explicit choice.
    state, _ = reduce(state, LoadCompleted(result(mode=ViewMode.LIST)))
    assert state.explicit_mode == ViewMode.GRID
