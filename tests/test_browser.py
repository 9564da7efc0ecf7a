from document_browser.actions import BrowserAction
from document_browser.model import DocumentId, LoadResult, SortOrder, ViewMode
from document_browser.settings_manager import SettingsManager
from document_browser.sources import DirectoryLoader, SettingsModePreferences
from document_browser.view_model import ThumbnailCache, ThumbnailFetcher
from document_browser.browser import DirectoryBrowser
from tests.helpers.fakes import FakePool, FakeThumbnailSource, doc


class FakeSource(FakeThumbnailSource):
    def __init__(self) -> None:
        super().__init__()
        self.requests = []
        self.deleted = []

    def query(self, request):
        self.requests.append(request)
        yield LoadResult(documents=(doc("a.png"), doc("b.png")), sort_order=request.sort_order)

    def delete_document(self, d):
        self.deleted.append(d)
        return True


def _browser(tmp_path, **kwargs):
    settings = SettingsManager(str(tmp_path / "settings.json"))
    source = FakeSource()
    load_pool = FakePool()
    prefs = SettingsModePreferences(settings)
    browser = DirectoryBrowser(
        root_id="test",
        container=DocumentId("test", "/docs"),
        settings=settings,
        source=source,
        preferences=prefs,
        loader=DirectoryLoader(source, prefs, pool=load_pool),
        fetcher=ThumbnailFetcher(source, ThumbnailCache(), pool=FakePool()),
        **kwargs,
    )
    return browser, source, load_pool, prefs


def test_start_loads_and_populates_rows(tmp_path):
    browser, source, pool, _prefs = _browser(tmp_path)

    browser.start()
    pool.run_all()

    assert source.requests[0].sort_order == SortOrder.DISPLAY_NAME
    assert browser.view_model.row_count == 2
    assert browser.view_model.derived_mode == ViewMode.LIST


def test_sort_change_reloads_with_new_order(tmp_path):
    browser, source, pool, _prefs = _browser(tmp_path)
    browser.start()
    pool.run_all()

    browser.view_model.on_user_sort_order_changed(SortOrder.SIZE)
    pool.run_all()

    assert [r.sort_order for r in source.requests] == [SortOrder.DISPLAY_NAME, SortOrder.SIZE]
    assert browser.view_model.derived_sort_order == SortOrder.SIZE


def test_mode_toggle_is_remembered_for_the_directory(tmp_path):
    browser, source, pool, prefs = _browser(tmp_path)
    browser.start()
    pool.run_all()

    browser.view_model.on_user_mode_changed(ViewMode.GRID)
    # Persistence runs on the display-state pool.
    browser.view_model.display._pool.shutdown(wait=True)

    assert prefs.get_mode("test", DocumentId("test", "/docs")) == ViewMode.GRID
    assert len(source.requests) == 1


def test_delete_checked_uses_source_and_reloads(tmp_path):
    browser, source, pool, _prefs = _browser(tmp_path, action=BrowserAction.MANAGE)
    browser.start()
    pool.run_all()
    browser.view_model.set_checked(0, True)

    outcome = browser.delete_checked()
    pool.run_all()

    assert [d.display_name for d in outcome.deleted] == ["a.png"]
    assert source.deleted == outcome.deleted
    assert len(source.requests) == 2


class BrokenWritePreferences:
    """Reads a stored LIST mode; every write fails."""

    def __init__(self) -> None:
        self.writes = 0

    def get_mode(self, root_id, doc_id):
        return ViewMode.LIST

    def set_mode(self, root_id, doc_id, mode):
        self.writes += 1
        raise OSError("settings file is read-only")


def test_sort_change_keeps_toggled_mode_when_persisting_failed(tmp_path):
    settings = SettingsManager(str(tmp_path / "settings.json"))
    source = FakeSource()
    prefs = BrokenWritePreferences()
    pool = FakePool()
    browser = DirectoryBrowser(
        root_id="test",
        container=DocumentId("test", "/docs"),
        settings=settings,
        source=source,
        preferences=prefs,
        loader=DirectoryLoader(source, prefs, pool=pool),
        fetcher=ThumbnailFetcher(source, ThumbnailCache(), pool=FakePool()),
    )
    browser.start()
    pool.run_all()

    browser.view_model.on_user_mode_changed(ViewMode.GRID)
    browser.view_model.display._pool.shutdown(wait=True)
    assert prefs.writes == 1

    browser.view_model.on_user_sort_order_changed(SortOrder.SIZE)
    pool.run_all()

    assert source.requests[-1].explicit_mode == ViewMode.GRID
    assert browser.view_model.derived_sort_order == SortOrder.SIZE
    assert browser.view_model.derived_mode == ViewMode.GRID


def test_stored_mode_seeds_user_mode(tmp_path):
    settings = SettingsManager(str(tmp_path / "settings.json"))
    SettingsModePreferences(settings).set_mode("test", DocumentId("test", "/docs"), ViewMode.GRID)

    browser, source, pool, _prefs = _browser(tmp_path)

    assert browser.view_model.state.user_mode == ViewMode.GRID
    browser.start()
    pool.run_all()
    assert source.requests[0].user_mode == ViewMode.GRID
    assert source.requests[0].explicit_mode == ViewMode.UNKNOWN
    assert browser.view_model.derived_mode == ViewMode.GRID
