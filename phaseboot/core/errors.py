"""Exception types raised by the phaseboot runtime."""
from __future__ import annotations

from typing import Any


class BootError(Exception):
    """Base class for every error raised by phaseboot."""


class InvalidConfiguration(BootError, ValueError):
    """Raised when engine options are malformed."""


class PhaseOrderingError(InvalidConfiguration):
    """Raised when merged phase names contradict the existing order."""


class LoadFailure(BootError):
    """Raised when a plugin factory cannot be found or fails while loading."""

    def __init__(self, plugin: str, message: str) -> None:
        super().__init__(f"Failed to load plugin '{plugin}': {message}")
        self.plugin = plugin


class HandlerTimeout(BootError, TimeoutError):
    """Raised when a handler does not complete within the configured timeout."""


class HandlerError(BootError):
    """Wraps a non-exception error value reported through a completion callback."""

    def __init__(self, value: Any) -> None:
        super().__init__(str(value))
        self.value = value


class HandlerFailure(BootError):
    """The first failure of a run, with the handler and phase that produced it."""

    def __init__(self, error: Any, *, phase: str, path: str, handler: str) -> None:
        super().__init__(f"Handler '{handler}' ({path}) failed in phase '{phase}': {error}")
        self.error = error
        self.phase = phase
        self.path = path
        self.handler = handler


__all__ = [
    "BootError",
    "HandlerError",
    "HandlerFailure",
    "HandlerTimeout",
    "InvalidConfiguration",
    "LoadFailure",
    "PhaseOrderingError",
]
