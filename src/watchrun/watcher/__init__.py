"""
Watchrun File Watcher Package.

Filesystem modification subscription and event coalescing.
Requires Python 3.11+.
"""

from watchrun.watcher.subscription import ModifyEvent, ModifyEventHandler, WatchSubscription
from watchrun.watcher.coalescer import EventCoalescer

__all__ = ["ModifyEvent", "ModifyEventHandler", "WatchSubscription", "EventCoalescer"]
