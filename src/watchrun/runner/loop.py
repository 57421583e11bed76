"""
Watchrun Watch Loop.

Ties the subscription, coalescer and supervisor into the
never-ending watch, debounce and execute cycle.
Requires Python 3.11+.
"""

from enum import Enum
from typing import NoReturn

from watchrun.exceptions import WatchRegistrationError
from watchrun.modes.resolver import WatchProfile
from watchrun.runner.supervisor import CommandSupervisor, RunResult
from watchrun.utils.config import Settings
from watchrun.utils.logger import LoggerMixin
from watchrun.watcher.coalescer import EventCoalescer
from watchrun.watcher.subscription import WatchSubscription


class LoopState(str, Enum):
    """Lifecycle of the watch loop. There is no terminal state."""

    STARTING = "starting"
    RUNNING = "running"


class WatchLoop(LoggerMixin):
    """
    Single-threaded orchestrator.

    Command execution and event waiting strictly alternate, so runs
    never overlap. Events arriving while a command runs stay queued
    and are swallowed by the post-run drain.
    """

    def __init__(
        self,
        profile: WatchProfile,
        settings: Settings | None = None,
        subscription: WatchSubscription | None = None,
        supervisor: CommandSupervisor | None = None,
    ) -> None:
        """
        Initialize the watch loop.

        Args:
            profile: Resolved command and directories
            settings: Merged settings (shell, clear_screen)
            subscription: Notification channel; a watchdog one by default
            supervisor: Command runner; built from profile and settings by default
        """
        settings = settings or Settings()

        self._profile = profile
        self._subscription = subscription or WatchSubscription()
        self._supervisor = supervisor or CommandSupervisor(
            profile.command,
            shell=settings.shell,
            clear_screen=settings.clear_screen,
        )
        self._coalescer = EventCoalescer(self._subscription)
        self._state = LoopState.STARTING
        self._run_count = 0

    def start(self) -> None:
        """
        Open the subscription and register every directory.

        Directories that cannot be watched are reported and skipped.

        Raises:
            SubscriptionError: If the notification channel cannot be acquired
        """
        if self._state is LoopState.RUNNING:
            return

        self._subscription.open()

        for directory in self._profile.directories:
            try:
                self._subscription.watch(directory)
            except WatchRegistrationError as e:
                self.log.warning("watch_registration_failed", path=e.path, reason=e.reason)

        self._state = LoopState.RUNNING
        self.log.info(
            "watching",
            mode=self._profile.mode.value,
            directories=list(self._subscription.watched),
        )

    def run_initial(self) -> RunResult:
        """Run the command once, before any event is processed."""
        return self._run(announce=True)

    def step(self) -> RunResult:
        """Wait for one batch of events, run once for it, then settle."""
        self._coalescer.wait()
        result = self._run()
        self._coalescer.settle()
        return result

    def run_forever(self) -> NoReturn:
        """Start if needed, run once, then react to changes forever."""
        self.start()
        self.run_initial()
        while True:
            self.step()

    def _run(self, announce: bool = False) -> RunResult:
        self._run_count += 1
        return self._supervisor.run(announce=announce)

    @property
    def state(self) -> LoopState:
        """Current lifecycle state."""
        return self._state

    @property
    def run_count(self) -> int:
        """Number of command executions so far."""
        return self._run_count

    @property
    def profile(self) -> WatchProfile:
        """The resolved profile this loop runs."""
        return self._profile

    @property
    def subscription(self) -> WatchSubscription:
        """The owned notification channel."""
        return self._subscription

    @property
    def supervisor(self) -> CommandSupervisor:
        """The command runner."""
        return self._supervisor
