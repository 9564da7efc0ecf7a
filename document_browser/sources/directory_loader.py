"""DirectoryLoader: runs directory queries off the UI thread.

Each ``restart`` gives the load id a new generation and cancels the previous
request. Snapshots are tagged with their generation and dropped on arrival if
a newer request has been issued since, so only the most recent request for a
load id is ever applied.
"""

from __future__ import annotations

import itertools
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace

from PySide6.QtCore import QObject, Signal, Slot

from document_browser.logger import get_logger
from document_browser.metrics import metrics
from document_browser.model import DirectoryRequest, LoadResult, SortOrder, ViewMode

from .base import DirectoryQuerySource, ModePreferenceStore

_logger = get_logger("loader")

_load_ids = itertools.count(4001)


def next_load_id() -> int:
    return next(_load_ids)


class DirectoryLoader(QObject):
    resultReady = Signal(int, object)  # load_id, LoadResult

    _snapshot = Signal(int, int, object)  # load_id, generation, LoadResult

    def __init__(
        self,
        source: DirectoryQuerySource,
        preferences: ModePreferenceStore | None = None,
        pool=None,
        workers: int = 2,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._source = source
        self._preferences = preferences
        self._owns_pool = pool is None
        self._pool = pool if pool is not None else ThreadPoolExecutor(max_workers=workers, thread_name_prefix="loader")
        self._generations: dict[int, int] = {}
        self._futures: dict[int, Future] = {}
        self._lock = threading.Lock()
        self._snapshot.connect(self._on_snapshot)

    def restart(self, load_id: int, request: DirectoryRequest) -> int:
        """Supersede any in-flight load for ``load_id`` and start a new one."""
        with self._lock:
            generation = self._generations.get(load_id, 0) + 1
            self._generations[load_id] = generation
            prior = self._futures.pop(load_id, None)
        if prior is not None:
            prior.cancel()
        metrics.inc("loader.requests")
        _logger.debug(
            "restart: id=%s gen=%s container=%s sort=%s query=%r",
            load_id,
            generation,
            request.container,
            request.sort_order.name,
            request.query,
        )
        future = self._pool.submit(self._run, load_id, generation, request)
        with self._lock:
            self._futures[load_id] = future
        return generation

    def cancel(self, load_id: int) -> None:
        with self._lock:
            self._generations[load_id] = self._generations.get(load_id, 0) + 1
            future = self._futures.pop(load_id, None)
        if future is not None:
            future.cancel()

    def shutdown(self) -> None:
        with self._lock:
            futures = list(self._futures.values())
            self._futures.clear()
            for load_id in self._generations:
                self._generations[load_id] += 1
        for f in futures:
            f.cancel()
        if self._owns_pool:
            self._pool.shutdown(wait=False, cancel_futures=True)

    def _is_current(self, load_id: int, generation: int) -> bool:
        with self._lock:
            return self._generations.get(load_id) == generation

    # ---- worker thread ---------------------------------------------
    def _run(self, load_id: int, generation: int, request: DirectoryRequest) -> None:
        try:
            with metrics.timed("loader.query_duration"):
                for snapshot in self._source.query(request):
                    if not self._is_current(load_id, generation):
                        _logger.debug("query abandoned: id=%s gen=%s", load_id, generation)
                        return
                    self._snapshot.emit(load_id, generation, self._resolve(request, snapshot))
        except Exception as exc:
            _logger.warning("query failed: container=%s err=%s", request.container, exc)
            failed = LoadResult(
                mode=self._resolve_mode(request, ViewMode.UNKNOWN),
                sort_order=request.sort_order,
                error_message=str(exc) or type(exc).__name__,
            )
            self._snapshot.emit(load_id, generation, failed)

    def _resolve(self, request: DirectoryRequest, snapshot: LoadResult) -> LoadResult:
        sort_order = snapshot.sort_order if snapshot.sort_order != SortOrder.UNKNOWN else request.sort_order
        return replace(snapshot, mode=self._resolve_mode(request, snapshot.mode), sort_order=sort_order)

    def _resolve_mode(self, request: DirectoryRequest, source_mode: ViewMode) -> ViewMode:
        if request.explicit_mode != ViewMode.UNKNOWN:
            return request.explicit_mode
        if self._preferences is not None:
            try:
                stored = self._preferences.get_mode(request.root_id, request.container)
            except Exception as exc:
                _logger.debug("reading stored mode failed: %s", exc)
                stored = ViewMode.UNKNOWN
            if stored != ViewMode.UNKNOWN:
                return stored
        if source_mode != ViewMode.UNKNOWN:
            return source_mode
        return request.user_mode

    # ---- UI thread -------------------------------------------------
    @Slot(int, int, object)
    def _on_snapshot(self, load_id: int, generation: int, result: LoadResult) -> None:
        if not self._is_current(load_id, generation):
            metrics.inc("loader.stale_discarded")
            _logger.debug("stale result dropped: id=%s gen=%s", load_id, generation)
            return
        if not result.is_loading:
            with self._lock:
                self._futures.pop(load_id, None)
        self.resultReady.emit(load_id, result)
