"""Path-keyed plugin registry for the phaseboot runtime."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .errors import InvalidConfiguration

SEPARATOR = "/"


def _normalize(path: str) -> str:
    if not path.endswith(SEPARATOR):
        return path + SEPARATOR
    return path


@dataclass(slots=True, frozen=True)
class PluginRegistration:
    """A handler registered under a hierarchical path."""

    path: str
    handler: Any

    @property
    def name(self) -> str:
        """Return a display name for log messages."""

        if isinstance(self.handler, Mapping):
            name = self.handler.get("name")
        else:
            name = getattr(self.handler, "name", None)
        if isinstance(name, str) and name:
            return name
        if isinstance(self.handler, Mapping):
            return self.path
        return type(self.handler).__name__

    def phase_method(self, phase: str) -> Optional[Callable[..., Any]]:
        """Return the handler's callable for *phase*, or ``None`` when it has none."""

        if isinstance(self.handler, Mapping):
            member = self.handler.get(phase)
        else:
            member = getattr(self.handler, phase, None)
        return member if callable(member) else None

    def implements(self, phase: str) -> bool:
        return self.phase_method(phase) is not None


class PluginRegistry:
    """Keeps registrations in insertion order and answers path-scoped queries."""

    def __init__(self) -> None:
        self._plugins: List[PluginRegistration] = []

    def register(self, path: str, handler: Any) -> PluginRegistration:
        """Append a registration for *handler* at *path* and return it."""

        if not isinstance(path, str) or not path:
            raise InvalidConfiguration(f"Invalid plugin path: {path!r}")
        registration = PluginRegistration(path=path, handler=handler)
        self._plugins.append(registration)
        return registration

    def get_plugins(self, path: str) -> List[PluginRegistration]:
        """Return every registration below *path*, at any depth."""

        prefix = _normalize(path)
        return [plugin for plugin in self._plugins if plugin.path.startswith(prefix)]

    def get_extensions(self, path: str) -> List[PluginRegistration]:
        """Return the registrations that are direct children of *path*."""

        prefix = _normalize(path)
        extensions: List[PluginRegistration] = []
        for plugin in self._plugins:
            if not plugin.path.startswith(prefix):
                continue
            name = plugin.path[len(prefix):]
            if name and SEPARATOR not in name:
                extensions.append(plugin)
        return extensions


__all__ = ["PluginRegistration", "PluginRegistry", "SEPARATOR"]
