"""
Watchrun Mode Resolver.

Guesses the project type from the current directory and supplies
the default command and watch directories for it.
Requires Python 3.11+.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from watchrun.exceptions import ConfigurationError
from watchrun.utils.config import Settings
from watchrun.utils.logger import get_logger

logger = get_logger(__name__)


class Mode(str, Enum):
    """Project profiles selecting the default command and directories."""

    RUST = "rust"
    MAKE = "make"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ModeDefaults:
    """Default command and directories for a mode."""

    command: str | None
    directories: tuple[str, ...]


MODE_DEFAULTS: dict[Mode, ModeDefaults] = {
    Mode.RUST: ModeDefaults(
        command="cargo fmt; clear; cargo clippy --color always -q",
        directories=("src",),
    ),
    Mode.MAKE: ModeDefaults(command="make -s", directories=("src", ".")),
    Mode.CUSTOM: ModeDefaults(command=None, directories=(".",)),
}

# Checked in order; the first marker present decides the mode
MODE_MARKERS: tuple[tuple[str, Mode], ...] = (
    ("Cargo.toml", Mode.RUST),
    ("Makefile", Mode.MAKE),
)


@dataclass(frozen=True)
class WatchProfile:
    """
    Resolved startup configuration for the watch loop.

    Attributes:
        mode: The project profile in effect
        command: Non-empty shell command line
        directories: Non-empty tuple of directories to watch
    """

    mode: Mode
    command: str
    directories: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.command or not self.command.strip():
            raise ConfigurationError("command must not be empty")
        if not self.directories:
            raise ConfigurationError("at least one directory must be watched")


def guess_mode(directory: Path | str = ".") -> Mode:
    """
    Guess the project type from the files directly inside a directory.

    Args:
        directory: Directory to inspect (not recursed into)

    Returns:
        RUST if Cargo.toml is present, else MAKE if a Makefile is present,
        else CUSTOM
    """
    names: set[str] = set()
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                names.add(entry.name)
    except OSError as e:
        logger.warning("mode_detection_failed", directory=str(directory), error=str(e))
        return Mode.CUSTOM

    for marker, mode in MODE_MARKERS:
        if marker in names:
            return mode
    return Mode.CUSTOM


def resolve_profile(
    mode: Mode,
    command: str | None = None,
    directories: list[str] | tuple[str, ...] | None = None,
) -> WatchProfile:
    """
    Apply mode defaults to whatever was explicitly configured.

    Args:
        mode: Project profile
        command: Explicit command, overriding the mode default
        directories: Explicit directories, overriding the mode default

    Returns:
        The resolved WatchProfile

    Raises:
        ConfigurationError: If no command is available for the mode
    """
    defaults = MODE_DEFAULTS[mode]

    command = command if command and command.strip() else defaults.command
    if command is None:
        raise ConfigurationError(
            f"A command needs to be present for {mode.value} mode"
        )

    dirs = tuple(d for d in (directories or ()) if d)
    if not dirs:
        dirs = defaults.directories or (".",)

    return WatchProfile(mode=mode, command=command, directories=dirs)


def profile_from_settings(settings: Settings, directory: Path | str = ".") -> WatchProfile:
    """
    Resolve the profile for merged settings.

    An explicit command always means CUSTOM mode; otherwise the mode
    is guessed from the contents of ``directory``.
    """
    if settings.command:
        mode = Mode.CUSTOM
    else:
        mode = guess_mode(directory)
        logger.debug("mode_detected", mode=mode.value, directory=str(directory))

    return resolve_profile(mode, settings.command, settings.directories)
