from collections import namedtuple

from typing import Optional  # noqa

from watchrun import WatchrunError
from watchrun.utils import OSUtils


DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_GRACE_PERIOD = 5.0
BACKENDS = ('stat', 'watchdog')


class ConfigError(WatchrunError):
    pass


class EmptyCommandError(ConfigError):
    def __init__(self):
        # type: () -> None
        super(EmptyCommandError, self).__init__('command is empty')


CommandSpec = namedtuple('CommandSpec', ['program', 'arguments'])

Config = namedtuple('Config', [
    'root_path', 'command', 'poll_interval', 'grace_period', 'backend',
    'run_on_start',
])


def parse_command(raw):
    # type: (Optional[str]) -> CommandSpec
    """Split a raw command string into a program and its arguments.

    The first whitespace delimited token is the program, the rest are
    passed through as arguments.  No shell quoting is interpreted.
    """
    parts = (raw or '').split()
    if not parts:
        raise EmptyCommandError()
    return CommandSpec(program=parts[0], arguments=tuple(parts[1:]))


def resolve_root(path, osutils=None):
    # type: (Optional[str], Optional[OSUtils]) -> str
    if osutils is None:
        osutils = OSUtils()
    if not path:
        raise ConfigError('path to watch is empty')
    abspath = osutils.abspath(path)
    if not osutils.directory_exists(abspath):
        raise ConfigError('invalid path: %s is not a directory' % abspath)
    return abspath


def create_config(path, cmd, poll_interval=DEFAULT_POLL_INTERVAL,
                  grace_period=DEFAULT_GRACE_PERIOD, backend='stat',
                  run_on_start=False, osutils=None):
    # type: (str, str, float, float, str, bool, Optional[OSUtils]) -> Config
    if poll_interval <= 0:
        raise ConfigError('poll interval must be positive, got %s'
                          % poll_interval)
    if grace_period < 0:
        raise ConfigError('grace period must not be negative, got %s'
                          % grace_period)
    if backend not in BACKENDS:
        raise ConfigError('unknown backend %r, expected one of: %s'
                          % (backend, ', '.join(BACKENDS)))
    return Config(
        root_path=resolve_root(path, osutils),
        command=parse_command(cmd),
        poll_interval=float(poll_interval),
        grace_period=float(grace_period),
        backend=backend,
        run_on_start=run_on_start,
    )
