"""Change detection for the watched directory tree.

A ``Watcher`` walks a directory tree on a fixed interval and calls a
handler once for every poll cycle in which something was added, changed
or removed.  The handler is normally a ``Notifier``, a single slot hand
off to the process supervisor that drops redundant signals instead of
queueing them.

Two implementations are provided.  The default one stats every
non-hidden entry itself and keeps its own snapshot.  The other wraps
watchdog's polling observer and is only available when watchdog is
installed.  Both poll; nothing here subscribes to kernel events, but the
``Watcher`` interface leaves room for a backend that does.
"""
