import os

import mock
import pytest

from watchrun.watcher.shared import Notifier
from tests.conftest import watchdog_only


ROOT = os.path.abspath(os.sep + 'project')


# NOTE: Fixtures are used here to hide the imports so these tests will not
# cause issues if watchdog is not installed.
@pytest.fixture
def watchdog_event_adapter():
    from watchrun.watcher.eventbased import WatchDogEventAdapter

    def factory(handler):
        return WatchDogEventAdapter(handler, ROOT)
    return factory


@pytest.fixture
def dir_mod_event():
    from watchdog.events import DirModifiedEvent

    def factory(src_path):
        return DirModifiedEvent(src_path=src_path)
    return factory


@pytest.fixture
def file_mod_event():
    from watchdog.events import FileModifiedEvent

    def factory(src_path):
        return FileModifiedEvent(src_path=src_path)
    return factory


@pytest.fixture
def file_moved_event():
    from watchdog.events import FileMovedEvent

    def factory(src_path, dest_path):
        return FileMovedEvent(src_path=src_path, dest_path=dest_path)
    return factory


@watchdog_only
def test_directory_events_ignored(watchdog_event_adapter, dir_mod_event):
    notifier = Notifier()
    adapter = watchdog_event_adapter(notifier)
    app_modified = dir_mod_event(src_path=ROOT)
    adapter.on_any_event(app_modified)
    assert not notifier.pending()


@watchdog_only
def test_file_events_respected(watchdog_event_adapter, file_mod_event):
    notifier = Notifier()
    adapter = watchdog_event_adapter(notifier)
    app_modified = file_mod_event(src_path=os.path.join(ROOT, 'main.go'))
    adapter.on_any_event(app_modified)
    assert notifier.pending()


@watchdog_only
def test_hidden_file_events_ignored(watchdog_event_adapter, file_mod_event):
    handler = mock.Mock()
    adapter = watchdog_event_adapter(handler)
    adapter.on_any_event(
        file_mod_event(src_path=os.path.join(ROOT, '.git', 'HEAD')))
    adapter.on_any_event(
        file_mod_event(src_path=os.path.join(ROOT, 'sub', '.swp')))
    assert not handler.called


@watchdog_only
def test_move_out_of_hidden_dir_respected(watchdog_event_adapter,
                                          file_moved_event):
    handler = mock.Mock()
    adapter = watchdog_event_adapter(handler)
    adapter.on_any_event(file_moved_event(
        src_path=os.path.join(ROOT, '.cache', 'main.go'),
        dest_path=os.path.join(ROOT, 'main.go')))
    handler.assert_called_once_with()
