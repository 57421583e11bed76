"""
Watchrun Event Coalescer.

Collapses a burst of modification events into a single run.
Requires Python 3.11+.
"""

from watchrun.utils.logger import LoggerMixin
from watchrun.watcher.subscription import ModifyEvent, WatchSubscription


class EventCoalescer(LoggerMixin):
    """
    Best-effort debounce over a watch subscription.

    One logical save usually produces several raw modify events
    (truncate, write, metadata update). ``wait()`` hands back the whole
    wake-up batch for one run; ``settle()`` then discards whatever queued
    up during or right after that run. There is no quiet-period timer:
    an event arriving after ``settle()`` returns starts a new run.
    """

    def __init__(self, subscription: WatchSubscription) -> None:
        """
        Initialize the coalescer.

        Args:
            subscription: Open subscription to read events from
        """
        self._subscription = subscription
        self._discarded = 0

    def wait(self) -> list[ModifyEvent]:
        """Block until the next batch of events; the batch earns one run."""
        batch = self._subscription.next_batch()
        self.log.debug(
            "batch_received",
            count=len(batch),
            paths=sorted({str(event.path) for event in batch}),
        )
        return batch

    def settle(self) -> int:
        """
        Discard events that queued up around the last run.

        Returns:
            Number of events discarded
        """
        try:
            extra = self._subscription.drain()
        except Exception:
            return 0

        if extra:
            self._discarded += len(extra)
            self.log.debug("events_coalesced", count=len(extra))
        return len(extra)

    @property
    def discarded_count(self) -> int:
        """Total events swallowed by post-run drains."""
        return self._discarded
