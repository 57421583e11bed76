"""
Watchrun Watch Subscription.

Binds one watchdog observer and funnels file modification events
from its threads into a queue read by the watch loop.
Requires Python 3.11+.
"""

import os
import queue
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from watchrun.exceptions import SubscriptionError, WatchRegistrationError
from watchrun.utils.logger import LoggerMixin


@dataclass(frozen=True)
class ModifyEvent:
    """A single raw modification notification."""

    path: Path
    watched: str  # the registered directory that produced it
    timestamp: float = field(default_factory=time.time)


class ModifyEventHandler(FileSystemEventHandler, LoggerMixin):
    """
    Forwards file modification events to the owning subscription.

    Creation, deletion, moves and directory events are ignored.
    """

    def __init__(self, callback: Callable[[ModifyEvent], None], watched: str) -> None:
        """
        Initialize the handler.

        Args:
            callback: Receives each modification event
            watched: The directory this handler was registered for
        """
        super().__init__()
        self._callback = callback
        self._watched = watched

    def on_modified(self, event: FileSystemEvent) -> None:
        """Queue file modifications."""
        if event.is_directory:
            return

        path = Path(os.fsdecode(event.src_path))
        self.log.debug("file_modified", path=str(path), watched=self._watched)
        self._callback(ModifyEvent(path=path, watched=self._watched))


class WatchSubscription(LoggerMixin):
    """
    The single point of contact with the filesystem notification facility.

    Each registered directory is watched non-recursively. Events are
    delivered exactly once through ``next_batch()`` or ``drain()``.
    """

    def __init__(self, observer_factory: Callable[[], BaseObserver] = Observer) -> None:
        """
        Initialize the subscription.

        Args:
            observer_factory: Creates the underlying watchdog observer
        """
        self._observer_factory = observer_factory
        self._observer: BaseObserver | None = None
        self._events: "queue.Queue[ModifyEvent]" = queue.Queue()
        self._watched: list[str] = []
        self._resolved: set[Path] = set()

    def open(self) -> None:
        """
        Acquire the notification channel.

        Raises:
            SubscriptionError: If already open or the observer cannot start
        """
        if self._observer is not None:
            raise SubscriptionError("subscription is already open")

        try:
            observer = self._observer_factory()
            observer.start()
        except (OSError, RuntimeError) as e:
            raise SubscriptionError(f"Error initializing file watching: {e}") from e

        self._observer = observer
        self.log.debug("subscription_opened", observer=type(observer).__name__)

    def watch(self, path: str) -> bool:
        """
        Register interest in modification events directly under a directory.

        Args:
            path: Directory to watch (subdirectories are not included)

        Returns:
            True if the directory was registered, False if already watched

        Raises:
            SubscriptionError: If the subscription is not open
            WatchRegistrationError: If the directory cannot be watched
        """
        if self._observer is None:
            raise SubscriptionError("subscription is not open")

        directory = Path(path)
        if not directory.exists():
            raise WatchRegistrationError(path, "no such directory")
        if not directory.is_dir():
            raise WatchRegistrationError(path, "not a directory")

        resolved = directory.resolve()
        if resolved in self._resolved:
            self.log.debug("directory_already_watched", path=path)
            return False

        handler = ModifyEventHandler(self.deliver, path)
        try:
            self._observer.schedule(handler, str(directory), recursive=False)
        except OSError as e:
            raise WatchRegistrationError(path, e.strerror or str(e)) from e

        self._resolved.add(resolved)
        self._watched.append(path)
        self.log.debug("directory_watched", path=path)
        return True

    def deliver(self, event: ModifyEvent) -> None:
        """Queue one event; safe to call from observer threads."""
        self._events.put(event)

    def next_batch(self, timeout: float | None = None) -> list[ModifyEvent]:
        """
        Block until at least one event is available.

        Args:
            timeout: Give up after this many seconds; None waits forever

        Returns:
            Every event queued at wake-up; empty only if the timeout expired
        """
        try:
            first = self._events.get(timeout=timeout)
        except queue.Empty:
            return []
        return [first, *self.drain()]

    def drain(self) -> list[ModifyEvent]:
        """Take every event currently queued without blocking."""
        events: list[ModifyEvent] = []
        while True:
            try:
                events.append(self._events.get_nowait())
            except queue.Empty:
                return events

    @property
    def watched(self) -> tuple[str, ...]:
        """Directories that were registered successfully."""
        return tuple(self._watched)

    @property
    def is_open(self) -> bool:
        """Check if the notification channel is held."""
        return self._observer is not None

    def close(self) -> None:
        """Release the notification channel."""
        if self._observer is None:
            return

        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None
        self.log.debug("subscription_closed")

    def __enter__(self) -> "WatchSubscription":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
