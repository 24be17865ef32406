import pytest


def _has_watchdog():
    try:
        import watchdog  # noqa
    except ImportError:
        return False
    return True


watchdog_only = pytest.mark.skipif(not _has_watchdog(),
                                   reason='watchdog is not installed')
