import queue
import threading

from typing import Callable  # noqa

from watchrun import WatchrunError


class WatchError(WatchrunError):
    pass


class Notifier(object):
    """Single slot, non-blocking signal between a watcher and a consumer.

    Posting while a signal is already pending is a no-op, so a burst of
    changes turns into at most one pending restart.
    """
    def __init__(self):
        # type: () -> None
        self._queue = queue.Queue(maxsize=1)  # type: queue.Queue

    def post(self):
        # type: () -> bool
        try:
            self._queue.put_nowait(None)
        except queue.Full:
            return False
        return True

    __call__ = post

    def wait(self, timeout=None):
        # type: (float) -> bool
        try:
            self._queue.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    def pending(self):
        # type: () -> bool
        return self._queue.full()


class Watcher(object):
    error = None  # type: BaseException

    def start_watching(self, handler, path, cancel):
        # type: (Callable, str, threading.Event) -> threading.Thread
        raise NotImplementedError('start_watching')
