"""Runs the configured command and restarts it on every change signal.

The supervisor is a small state machine::

    IDLE --signal--> RUNNING --exit--> IDLE
                     RUNNING --signal--> (stop child) RUNNING
    any  --cancel--> (stop child) TERMINAL

Only one child ever exists at a time.  A new signal always stops the
current child before the next one is launched, even if the child was
about to finish on its own.
"""
import logging
import signal
import subprocess
import threading

from typing import Optional  # noqa

from watchrun.config import CommandSpec, DEFAULT_GRACE_PERIOD  # noqa
from watchrun.utils import OSUtils
from watchrun.watcher.shared import Notifier  # noqa


LOGGER = logging.getLogger(__name__)

IDLE = 'idle'
RUNNING = 'running'
TERMINAL = 'terminal'

# How often the supervisor looks at the cancel signal and the child's
# exit status while it waits for the next change.
DEFAULT_TICK = 0.1


class ChildProcess(object):
    """Handle for one launch of the command.

    ``stop`` is the launch's cancellation scope: it asks the child's
    process group to terminate, then kills it once the grace period
    runs out.
    """
    def __init__(self, process, osutils):
        # type: (subprocess.Popen, OSUtils) -> None
        self._process = process
        self._osutils = osutils

    @property
    def pid(self):
        # type: () -> int
        return self._process.pid

    def poll(self):
        # type: () -> Optional[int]
        return self._process.poll()

    def stop(self, grace_period):
        # type: (float) -> int
        if self._process.poll() is not None:
            return self._process.returncode
        self._osutils.send_signal(self._process, signal.SIGTERM)
        try:
            return self._process.wait(timeout=grace_period)
        except subprocess.TimeoutExpired:
            LOGGER.warning("Process %s did not exit within %ss, killing it",
                           self._process.pid, grace_period)
        self._osutils.send_signal(self._process, signal.SIGKILL)
        return self._process.wait()


class ProcessSupervisor(object):
    def __init__(self, command, osutils=None,
                 grace_period=DEFAULT_GRACE_PERIOD, tick=DEFAULT_TICK):
        # type: (CommandSpec, Optional[OSUtils], float, float) -> None
        self._command = command
        if osutils is None:
            osutils = OSUtils()
        self._osutils = osutils
        self._grace_period = grace_period
        self._tick = tick
        self._child = None  # type: Optional[ChildProcess]
        self.state = IDLE
        self.launches = 0

    @property
    def child(self):
        # type: () -> Optional[ChildProcess]
        return self._child

    def run(self, notifier, cancel):
        # type: (Notifier, threading.Event) -> None
        try:
            while not cancel.is_set():
                if notifier.wait(timeout=self._tick):
                    if cancel.is_set():
                        break
                    if self._child is not None:
                        LOGGER.info("Reloading...")
                        self._stop_child()
                    self._launch()
                elif self._child is not None:
                    self._reap_child()
        finally:
            self._stop_child()
            self.state = TERMINAL
            LOGGER.debug("Supervisor stopped after %s launch(es)",
                         self.launches)

    def _launch(self):
        # type: () -> None
        args = [self._command.program] + list(self._command.arguments)
        LOGGER.info("Running: %s", ' '.join(args))
        try:
            process = self._osutils.popen(args)
        except OSError as e:
            LOGGER.error("Could not start %s: %s", self._command.program, e)
            self.state = IDLE
            return
        self._child = ChildProcess(process, self._osutils)
        self.launches += 1
        self.state = RUNNING

    def _reap_child(self):
        # type: () -> None
        assert self._child is not None
        rc = self._child.poll()
        if rc is None:
            return
        if rc == 0:
            LOGGER.info("Command finished successfully")
        else:
            LOGGER.warning("Command exited with status %s", rc)
        self._child = None
        self.state = IDLE

    def _stop_child(self):
        # type: () -> None
        child = self._child
        if child is None:
            return
        self._child = None
        rc = child.stop(self._grace_period)
        LOGGER.debug("Process %s stopped with status %s", child.pid, rc)
        self.state = IDLE
