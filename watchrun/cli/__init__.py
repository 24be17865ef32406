"""Command line entry point.

Usage::

    watchrun --path ./src --cmd "go build ./..."
"""
import argparse
import logging
import signal
import sys
import threading

from typing import List, Optional  # noqa

from watchrun import __version__
from watchrun.config import (
    ConfigError, create_config, BACKENDS, DEFAULT_POLL_INTERVAL,
    DEFAULT_GRACE_PERIOD,
)
from watchrun.cli import reloader
from watchrun.watcher.shared import WatchError


LOGGER = logging.getLogger(__name__)


def create_parser():
    # type: () -> argparse.ArgumentParser
    parser = argparse.ArgumentParser(
        prog='watchrun',
        description='Restart a command whenever files under a '
                    'directory change.')
    parser.add_argument('--path', required=True,
                        help='Directory to watch.')
    parser.add_argument('--cmd', required=True,
                        help='Command to run, e.g. "go build ./...".')
    parser.add_argument('--interval', type=float,
                        default=DEFAULT_POLL_INTERVAL,
                        help='Seconds between polls (default: %(default)s).')
    parser.add_argument('--grace-period', type=float,
                        default=DEFAULT_GRACE_PERIOD,
                        help='Seconds a stopped command gets to exit '
                             'before it is killed (default: %(default)s).')
    parser.add_argument('--backend', choices=BACKENDS, default='stat',
                        help='Change detection backend '
                             '(default: %(default)s).')
    parser.add_argument('--run-on-start', action='store_true',
                        help='Run the command once before any change '
                             'is seen.')
    parser.add_argument('--debug', action='store_true',
                        help='Print debug logs.')
    parser.add_argument('--version', action='version',
                        version='%(prog)s ' + __version__)
    return parser


def setup_logging(debug=False):
    # type: (bool) -> None
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )


def install_signal_handlers(cancel):
    # type: (threading.Event) -> None
    def _handle(signum, frame):
        # type: (int, object) -> None
        LOGGER.info("Received signal %s, shutting down", signum)
        cancel.set()
    signal.signal(signal.SIGINT, _handle)
    if hasattr(signal, 'SIGTERM'):
        signal.signal(signal.SIGTERM, _handle)


def main(argv=None):
    # type: (Optional[List[str]]) -> int
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug)
    try:
        config = create_config(
            args.path, args.cmd, poll_interval=args.interval,
            grace_period=args.grace_period, backend=args.backend,
            run_on_start=args.run_on_start)
    except ConfigError as e:
        parser.exit(2, '%s: error: %s\n' % (parser.prog, e))
    cancel = threading.Event()
    install_signal_handlers(cancel)
    try:
        return reloader.run_with_reloader(config, cancel)
    except ConfigError as e:
        parser.exit(2, '%s: error: %s\n' % (parser.prog, e))
    except WatchError as e:
        LOGGER.error("could not start watching: %s", e)
        return 1
