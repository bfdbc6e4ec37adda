"""Exception hierarchy for hookbus."""

from __future__ import annotations


class HookBusError(Exception):
    """Base class for all hookbus errors."""


class InvalidKeyError(HookBusError, ValueError):
    """Raised when an event name or key segment cannot form a listener key."""

    def __init__(self, value: object, message: str | None = None):
        self.value = value
        self.message = message or f"Invalid listener key component: {value!r}"
        super().__init__(self.message)


class InvalidListenerError(HookBusError, TypeError):
    """Raised when a non-callable is registered as a listener."""

    def __init__(self, listener: object):
        self.listener = listener
        super().__init__(f"Listener must be callable, got {type(listener).__name__}")


class ConfigError(HookBusError, ValueError):
    """Raised for invalid settings values."""
