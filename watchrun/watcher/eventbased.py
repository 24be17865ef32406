import logging
import os
import threading

from watchdog.observers.polling import PollingObserver
from watchdog.events import FileSystemEventHandler
from watchdog.events import FileSystemEvent  # noqa

from watchrun.watcher.shared import Watcher, WatchError
from watchrun.watcher.stat import is_hidden
from watchrun.utils import OSUtils

from typing import Callable, Optional  # noqa


LOGGER = logging.getLogger(__name__)


class WatchDogEventAdapter(FileSystemEventHandler):
    """Filters out watchdog directory events and hidden paths."""
    def __init__(self, handler, root):
        # type: (Callable, str) -> None
        self._handler = handler
        self._root = root

    def on_any_event(self, event):
        # type: (FileSystemEvent) -> None
        if event.is_directory:
            return
        paths = [event.src_path, getattr(event, 'dest_path', '')]
        if all(self._is_hidden(p) for p in paths if p):
            return
        self._handler()

    def _is_hidden(self, path):
        # type: (str) -> bool
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        relative = os.path.relpath(path, self._root)
        return any(is_hidden(part) for part in relative.split(os.sep)
                   if part not in ('', os.curdir))


class WatchdogFileWatcher(Watcher):
    """Uses watchdog's polling observer to watch files for changes."""
    def __init__(self, poll_interval=1.0, osutils=None):
        # type: (float, Optional[OSUtils]) -> None
        self._poll_interval = poll_interval
        if osutils is None:
            osutils = OSUtils()
        self._osutils = osutils

    def start_watching(self, handler, path, cancel):
        # type: (Callable, str, threading.Event) -> threading.Thread
        try:
            self._osutils.list_dir(path)
        except OSError as e:
            raise WatchError('could not read %s: %s' % (path, e.strerror or e))
        observer = PollingObserver(timeout=self._poll_interval)
        watchdog_adapter = WatchDogEventAdapter(handler, path)
        observer.schedule(watchdog_adapter, path, recursive=True)
        observer.start()
        t = threading.Thread(target=self._stop_on_cancel,
                             args=(observer, cancel),
                             name='watchrun-watchdog-watcher')
        t.daemon = True
        t.start()
        return t

    def _stop_on_cancel(self, observer, cancel):
        # type: (PollingObserver, threading.Event) -> None
        cancel.wait()
        observer.stop()
        observer.join()
        LOGGER.debug("Watchdog observer stopped")
