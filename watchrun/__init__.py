__version__ = '0.3.0'


class WatchrunError(Exception):
    pass
