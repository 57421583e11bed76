"""
Watchrun Test Configuration.

Pytest fixtures and test doubles.
Requires Python 3.11+.
"""

import io
import os
from pathlib import Path
from typing import Generator

import pytest

from watchrun.exceptions import WatchRegistrationError
from watchrun.modes.resolver import Mode, WatchProfile
from watchrun.runner.supervisor import RunResult
from watchrun.watcher.subscription import ModifyEvent


class StopLoop(Exception):
    """Raised by the fake subscription once its scripted batches run out."""


class FakeSubscription:
    """In-memory stand-in for WatchSubscription with scripted batches."""

    def __init__(self, batches: list[list[ModifyEvent]] | None = None, missing: set[str] | None = None):
        self.batches = list(batches or [])
        self.pending_after_run: list[list[ModifyEvent]] = []
        self.missing = missing or set()
        self.opened = 0
        self.registered: list[str] = []
        self.drains = 0
        self.log: list[str] = []

    def open(self) -> None:
        self.opened += 1
        self.log.append("open")

    def watch(self, path: str) -> bool:
        if path in self.missing:
            raise WatchRegistrationError(path, "no such directory")
        self.registered.append(path)
        self.log.append(f"watch:{path}")
        return True

    def next_batch(self, timeout: float | None = None) -> list[ModifyEvent]:
        if not self.batches:
            raise StopLoop()
        self.log.append("next_batch")
        return self.batches.pop(0)

    def drain(self) -> list[ModifyEvent]:
        self.drains += 1
        self.log.append("drain")
        if self.pending_after_run:
            return self.pending_after_run.pop(0)
        return []

    @property
    def watched(self) -> tuple[str, ...]:
        return tuple(self.registered)


class FakeSupervisor:
    """Records runs instead of spawning a subshell."""

    def __init__(self, log: list[str] | None = None):
        self.calls: list[bool] = []
        self.log = log if log is not None else []

    def run(self, announce: bool = False) -> RunResult:
        self.calls.append(announce)
        self.log.append("run")
        return RunResult(stdout=b"", stderr=b"", spawned=True, returncode=0, duration_ms=0.0)


def make_event(path: str = "/tmp/w/file.txt", watched: str = "/tmp/w") -> ModifyEvent:
    """Build a modification event."""
    return ModifyEvent(path=Path(path), watched=watched)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Run every test in an empty directory without WATCHRUN_* variables."""
    for name in [
        "WATCHRUN_COMMAND",
        "WATCHRUN_DIRECTORIES",
        "WATCHRUN_SHELL",
        "WATCHRUN_CLEAR_SCREEN",
        "WATCHRUN_LOG_LEVEL",
        "WATCHRUN_LOG_FORMAT",
    ]:
        monkeypatch.delenv(name, raising=False)
    saved = dict(os.environ)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # load_settings may load a test .env into os.environ
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture
def custom_profile(tmp_path: Path) -> WatchProfile:
    """A custom-mode profile watching the temp directory."""
    return WatchProfile(mode=Mode.CUSTOM, command="echo hi", directories=(str(tmp_path),))


@pytest.fixture
def out_stream() -> io.BytesIO:
    """Captured stdout for the supervisor."""
    return io.BytesIO()


@pytest.fixture
def err_stream() -> io.BytesIO:
    """Captured stderr for the supervisor."""
    return io.BytesIO()
