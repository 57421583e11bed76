"""Custom exceptions for watchrun."""


class WatchrunError(Exception):
    """Base exception for all watchrun errors."""
    pass


class ConfigurationError(WatchrunError):
    """The merged configuration cannot produce a runnable profile."""
    pass


class SubscriptionError(WatchrunError):
    """The filesystem notification channel could not be acquired."""
    pass


class WatchRegistrationError(WatchrunError):
    """A single directory could not be registered for watching."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to watch {path}: {reason}")
        self.path = path
        self.reason = reason
