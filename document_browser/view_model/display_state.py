"""Display state and the reducer that reconciles mode/sort/load events.

Sort changes always reload; mode changes never do. Both write ``derived_mode``
(a mode change directly, a load completion through the result) and the later
write wins: there is no queue.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum

from PySide6.QtCore import Property, QObject, Signal

from document_browser.actions import BrowserAction
from document_browser.errors import InternalConsistencyError
from document_browser.logger import get_logger
from document_browser.model import LoadResult, SortOrder, ViewMode

_logger = get_logger("display_state")

_KNOWN_MODES = (ViewMode.LIST, ViewMode.GRID)


@dataclass(frozen=True)
class DisplayState:
    derived_mode: ViewMode = ViewMode.LIST
    derived_sort_order: SortOrder = SortOrder.UNKNOWN
    user_mode: ViewMode = ViewMode.LIST
    user_sort_order: SortOrder = SortOrder.DISPLAY_NAME
    accept_mimes: tuple[str, ...] = ("*/*",)
    allow_multiple: bool = True
    show_size: bool = False
    action: BrowserAction = BrowserAction.OPEN
    # Set once the user toggles the mode; reloads carry it ahead of any stored preference.
    explicit_mode: ViewMode = ViewMode.UNKNOWN


@dataclass(frozen=True)
class ModeChanged:
    mode: ViewMode


@dataclass(frozen=True)
class SortChanged:
    order: SortOrder


@dataclass(frozen=True)
class LoadCompleted:
    result: LoadResult


Event = ModeChanged | SortChanged | LoadCompleted


class Effect(Enum):
    RELOAD = "reload"
    PERSIST_MODE = "persist_mode"
    REBUILD_ROWS = "rebuild_rows"
    STATE_CHANGED = "state_changed"
    RERENDER = "rerender"
    SCROLL_TO_TOP = "scroll_to_top"


def require_known_mode(mode: ViewMode) -> ViewMode:
    if mode not in _KNOWN_MODES:
        raise InternalConsistencyError(f"unknown mode {mode!r}")
    return mode


def reduce(state: DisplayState, event: Event) -> tuple[DisplayState, tuple[Effect, ...]]:
    if isinstance(event, SortChanged):
        # Derived values only move when the reloaded result arrives.
        return replace(state, user_sort_order=event.order), (Effect.RELOAD,)

    if isinstance(event, ModeChanged):
        mode = require_known_mode(event.mode)
        new_state = replace(state, user_mode=mode, derived_mode=mode, explicit_mode=mode)
        return new_state, (Effect.PERSIST_MODE, Effect.STATE_CHANGED, Effect.RERENDER)

    if isinstance(event, LoadCompleted):
        result = event.result
        # A source that did not decide a mode defers to the user's choice.
        mode = result.mode if result.mode != ViewMode.UNKNOWN else state.user_mode
        require_known_mode(mode)
        new_state = replace(state, derived_mode=mode, derived_sort_order=result.sort_order)
        effects = [Effect.REBUILD_ROWS, Effect.STATE_CHANGED, Effect.RERENDER]
        if result.sort_order != state.derived_sort_order:
            effects.append(Effect.SCROLL_TO_TOP)
        return new_state, tuple(effects)

    raise InternalConsistencyError(f"unknown event {event!r}")


class DisplayStateController(QObject):
    """Applies ``reduce`` and executes the resulting effects.

    ``reload(sort_order)`` is invoked synchronously; ``persist_mode(mode)`` runs
    on a background pool and its failures are only logged.
    """

    stateChanged = Signal()
    rerenderRequested = Signal()
    scrollToTopRequested = Signal()
    rowsRebuildRequested = Signal(object)  # LoadResult

    def __init__(
        self,
        state: DisplayState,
        reload: Callable[[SortOrder], None],
        persist_mode: Callable[[ViewMode], None] | None = None,
        pool=None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._state = state
        self._reload = reload
        self._persist_mode = persist_mode
        self._owns_pool = pool is None
        self._pool = pool if pool is not None else ThreadPoolExecutor(max_workers=1, thread_name_prefix="prefs")

    @property
    def state(self) -> DisplayState:
        return self._state

    def _get_derived_mode(self) -> int:
        return int(self._state.derived_mode)

    derivedMode = Property(int, _get_derived_mode, notify=stateChanged)  # type: ignore[arg-type]

    def _get_derived_sort_order(self) -> int:
        return int(self._state.derived_sort_order)

    derivedSortOrder = Property(int, _get_derived_sort_order, notify=stateChanged)  # type: ignore[arg-type]

    def _get_user_mode(self) -> int:
        return int(self._state.user_mode)

    userMode = Property(int, _get_user_mode, notify=stateChanged)  # type: ignore[arg-type]

    def _get_user_sort_order(self) -> int:
        return int(self._state.user_sort_order)

    userSortOrder = Property(int, _get_user_sort_order, notify=stateChanged)  # type: ignore[arg-type]

    # ---- triggers --------------------------------------------------
    def on_sort_order_changed(self, order: SortOrder) -> None:
        self.dispatch(SortChanged(order))

    def on_mode_changed(self, mode: ViewMode) -> None:
        self.dispatch(ModeChanged(mode))

    def on_load_result(self, result: LoadResult) -> None:
        self.dispatch(LoadCompleted(result))

    def dispatch(self, event: Event) -> None:
        self._state, effects = reduce(self._state, event)
        _logger.debug("dispatch %s -> %s", type(event).__name__, [e.value for e in effects])
        for effect in effects:
            self._run_effect(effect, event)

    def _run_effect(self, effect: Effect, event: Event) -> None:
        if effect is Effect.RELOAD:
            self._reload(self._state.user_sort_order)
        elif effect is Effect.PERSIST_MODE:
            self._schedule_persist(self._state.user_mode)
        elif effect is Effect.REBUILD_ROWS:
            self.rowsRebuildRequested.emit(event.result)  # type: ignore[union-attr]
        elif effect is Effect.STATE_CHANGED:
            self.stateChanged.emit()
        elif effect is Effect.RERENDER:
            self.rerenderRequested.emit()
        elif effect is Effect.SCROLL_TO_TOP:
            self.scrollToTopRequested.emit()

    def _schedule_persist(self, mode: ViewMode) -> None:
        if self._persist_mode is None:
            return
        self._pool.submit(self._persist, mode)

    def _persist(self, mode: ViewMode) -> None:
        try:
            self._persist_mode(mode)  # type: ignore[misc]
        except Exception as exc:
            _logger.warning("persisting mode %s failed: %s", mode.name, exc)

    def shutdown(self) -> None:
        if self._owns_pool:
            self._pool.shutdown(wait=False)
