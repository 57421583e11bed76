"""
Watchrun Utilities Package.

Configuration and logging shared across all modules.
Requires Python 3.11+.
"""

from watchrun.utils.config import LoggingSettings, Settings, load_settings
from watchrun.utils.logger import configure_logging, get_logger, logger, LoggerMixin

__all__ = [
    "LoggingSettings",
    "Settings",
    "load_settings",
    "configure_logging",
    "get_logger",
    "logger",
    "LoggerMixin",
]
