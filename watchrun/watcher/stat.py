import logging
import os
import stat
import threading
from collections import namedtuple

from typing import Dict, List, Optional, Set, Tuple, Callable  # noqa

from watchrun.watcher.shared import Watcher, WatchError
from watchrun.utils import OSUtils


LOGGER = logging.getLogger(__name__)

FileStat = namedtuple('FileStat', ['size', 'mtime', 'is_dir'])
Snapshot = Dict[str, FileStat]


def is_hidden(name):
    # type: (str) -> bool
    return name.startswith('.')


def _to_file_stat(result):
    # type: (os.stat_result) -> FileStat
    return FileStat(size=result.st_size, mtime=result.st_mtime_ns,
                    is_dir=stat.S_ISDIR(result.st_mode))


def _has_changed(old, new):
    # type: (FileStat, FileStat) -> bool
    if old.is_dir != new.is_dir:
        return True
    if new.is_dir:
        # A directory's mtime moves whenever anything, hidden entries
        # included, is added to or removed from it.  Those additions and
        # removals already show up under their own paths.
        return False
    return old.size != new.size or old.mtime != new.mtime


def _is_under(path, directories):
    # type: (str, List[str]) -> bool
    for directory in directories:
        if path == directory or path.startswith(directory + os.sep):
            return True
    return False


class StatFileObserver(object):
    """Keeps a size/mtime snapshot of a tree and diffs it on demand.

    Entries whose name starts with ``.`` are never visited, so nothing
    under a hidden directory can ever be reported.
    """
    def __init__(self, path, osutils=None):
        # type: (str, Optional[OSUtils]) -> None
        self._path = path
        if osutils is None:
            osutils = OSUtils()
        self._osutils = osutils
        self._snapshot = {}  # type: Snapshot

    @property
    def snapshot(self):
        # type: () -> Snapshot
        return dict(self._snapshot)

    def prime(self):
        # type: () -> None
        """Take the initial snapshot.

        Unlike ``check`` this does not tolerate unreadable directories:
        without a complete first snapshot every later diff is wrong.
        """
        try:
            snapshot, _ = self._scan(strict=True)  # type: ignore
        except OSError as e:
            raise WatchError(
                'could not read %s: %s' % (e.filename or self._path,
                                           e.strerror or e))
        self._snapshot = snapshot

    def check(self, cancel=None):
        # type: (Optional[threading.Event]) -> Set[str]
        scanned = self._scan(strict=False, cancel=cancel)
        if scanned is None:
            return set()
        current, skipped = scanned
        updated = set([])
        for path, file_stat in current.items():
            previous = self._snapshot.get(path)
            if previous is None or _has_changed(previous, file_stat):
                updated.add(path)
        for path, file_stat in self._snapshot.items():
            if path in current:
                continue
            if _is_under(path, skipped):
                # Couldn't look this cycle, assume nothing moved.
                current[path] = file_stat
                continue
            updated.add(path)
        self._snapshot = current
        return updated

    def _scan(self, strict, cancel=None):
        # type: (bool, Optional[threading.Event]) -> Optional[Tuple[Snapshot, List[str]]]
        snapshot = {}  # type: Snapshot
        skipped = []  # type: List[str]
        try:
            snapshot[self._path] = _to_file_stat(
                self._osutils.stat(self._path))
        except OSError as e:
            if strict:
                raise
            LOGGER.warning("Cannot stat watched root %s: %s", self._path, e)
            return snapshot, [self._path]
        pending = [self._path]
        while pending:
            if cancel is not None and cancel.is_set():
                return None
            dirpath = pending.pop()
            try:
                entries = self._osutils.list_dir(dirpath)
            except OSError as e:
                if strict:
                    raise
                LOGGER.warning("Skipping unreadable directory %s: %s",
                               dirpath, e)
                skipped.append(dirpath)
                continue
            for entry in entries:
                if is_hidden(entry.name):
                    continue
                try:
                    file_stat = _to_file_stat(
                        entry.stat(follow_symlinks=False))
                except FileNotFoundError:
                    # Removed between listing and stat.
                    continue
                except OSError as e:
                    if strict:
                        raise
                    LOGGER.warning("Skipping %s: %s", entry.path, e)
                    skipped.append(entry.path)
                    continue
                snapshot[entry.path] = file_stat
                if file_stat.is_dir:
                    pending.append(entry.path)
        return snapshot, skipped


class StatFileWatcher(Watcher):
    def __init__(self, poll_interval=1.0, osutils=None):
        # type: (float, Optional[OSUtils]) -> None
        self._poll_interval = poll_interval
        self._osutils = osutils

    def start_watching(self, handler, path, cancel):
        # type: (Callable, str, threading.Event) -> threading.Thread
        observer = StatFileObserver(path, self._osutils)
        observer.prime()
        LOGGER.debug("Watching %s every %ss", path, self._poll_interval)
        t = threading.Thread(target=self._run,
                             args=(handler, observer, cancel),
                             name='watchrun-stat-watcher')
        t.daemon = True
        t.start()
        return t

    def _run(self, handler, observer, cancel):
        # type: (Callable, StatFileObserver, threading.Event) -> None
        try:
            while not cancel.wait(self._poll_interval):
                changes = observer.check(cancel)
                if changes:
                    LOGGER.debug("Detected %s change(s): %s", len(changes),
                                 ', '.join(sorted(changes)))
                    handler()
        except Exception as e:
            LOGGER.exception("Change detection failed, shutting down")
            self.error = e
            cancel.set()
