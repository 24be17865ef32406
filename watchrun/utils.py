import os
import signal
import subprocess

from typing import List, Sequence  # noqa


class OSUtils(object):
    """Thin wrapper over the filesystem and process calls we make.

    Everything that touches the OS goes through here so it can be
    swapped for a mock in tests.
    """

    def list_dir(self, path):
        # type: (str) -> List[os.DirEntry]
        with os.scandir(path) as it:
            return list(it)

    def stat(self, path):
        # type: (str) -> os.stat_result
        return os.stat(path)

    def file_exists(self, path):
        # type: (str) -> bool
        return os.path.isfile(path)

    def directory_exists(self, path):
        # type: (str) -> bool
        return os.path.isdir(path)

    def abspath(self, path):
        # type: (str) -> str
        return os.path.abspath(os.path.expanduser(path))

    def popen(self, args):
        # type: (Sequence[str]) -> subprocess.Popen
        # The child gets its own session so terminating it also takes
        # down anything it spawned.
        kwargs = {}
        if os.name == 'posix':
            kwargs['start_new_session'] = True
        return subprocess.Popen(list(args), **kwargs)

    def send_signal(self, process, sig):
        # type: (subprocess.Popen, int) -> None
        if os.name != 'posix':
            if sig == getattr(signal, 'SIGKILL', None):
                process.kill()
            else:
                process.terminate()
            return
        try:
            os.killpg(process.pid, sig)
        except ProcessLookupError:
            pass
        except PermissionError:
            # Group already reaped and the pgid recycled; fall back to
            # the child itself.
            process.send_signal(sig)
