"""Wires a watcher and a supervisor together for one run.

The watcher polls in a background thread and posts to a single slot
``Notifier``; the supervisor runs in the calling thread and consumes
from it.  Both stop when ``cancel`` is set.
"""
import logging
import threading

from typing import Optional  # noqa

from watchrun.config import Config, ConfigError  # noqa
from watchrun.supervisor import ProcessSupervisor
from watchrun.watcher.shared import Notifier, Watcher  # noqa
from watchrun.watcher.stat import StatFileWatcher


LOGGER = logging.getLogger(__name__)


def create_watcher(config):
    # type: (Config) -> Watcher
    if config.backend == 'watchdog':
        try:
            from watchrun.watcher.eventbased import WatchdogFileWatcher
        except ImportError:
            raise ConfigError('the watchdog backend needs the watchdog '
                              'package: pip install watchrun[watchdog]')
        return WatchdogFileWatcher(poll_interval=config.poll_interval)
    return StatFileWatcher(poll_interval=config.poll_interval)


def create_supervisor(config):
    # type: (Config) -> ProcessSupervisor
    return ProcessSupervisor(config.command,
                             grace_period=config.grace_period)


def run_with_reloader(config, cancel, watcher=None, supervisor=None,
                      notifier=None):
    # type: (Config, threading.Event, Optional[Watcher], Optional[ProcessSupervisor], Optional[Notifier]) -> int
    if watcher is None:
        watcher = create_watcher(config)
    if supervisor is None:
        supervisor = create_supervisor(config)
    if notifier is None:
        notifier = Notifier()
    # Raises WatchError before anything is launched if the initial
    # snapshot can't be taken.
    thread = watcher.start_watching(notifier, config.root_path, cancel)
    LOGGER.info("Watching %s for changes", config.root_path)
    if config.run_on_start:
        notifier.post()
    try:
        supervisor.run(notifier, cancel)
    finally:
        cancel.set()
        # One poll interval is enough for the watcher to notice cancel;
        # the extra second covers a walk already in progress.
        thread.join(config.poll_interval + 1.0)
        if thread.is_alive():
            LOGGER.warning("Watcher thread did not stop in time")
    if watcher.error is not None:
        return 1
    return 0
