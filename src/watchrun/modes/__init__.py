"""
Watchrun Modes Package.

Project type detection and default profiles.
Requires Python 3.11+.
"""

from watchrun.modes.resolver import (
    MODE_DEFAULTS,
    Mode,
    WatchProfile,
    guess_mode,
    profile_from_settings,
    resolve_profile,
)

__all__ = [
    "MODE_DEFAULTS",
    "Mode",
    "WatchProfile",
    "guess_mode",
    "profile_from_settings",
    "resolve_profile",
]
