"""Plugin factory registry used when an engine is constructed."""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterator

from phaseboot.settings import BootOptions

PluginFactory = Callable[[BootOptions], Any]


class PluginFactoryRegistry:
    """Maps plugin names to factories that build phase handlers."""

    def __init__(self) -> None:
        self._factories: Dict[str, PluginFactory] = {}

    def register(self, name: str, factory: PluginFactory) -> PluginFactory:
        """Register *factory* under *name* and return it for decorator usage."""

        if name in self._factories:
            raise ValueError(f"Plugin '{name}' is already registered")
        self._factories[name] = factory
        return factory

    def get(self, name: str) -> PluginFactory:
        """Return the factory registered for *name*."""

        try:
            return self._factories[name]
        except KeyError as exc:
            raise KeyError(f"Plugin '{name}' is not registered") from exc

    def __getitem__(self, name: str) -> PluginFactory:
        return self.get(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)


factories = PluginFactoryRegistry()


def register_plugin(name: str) -> Callable[[PluginFactory], PluginFactory]:
    """Decorator to register a plugin factory when defining it."""

    def decorator(factory: PluginFactory) -> PluginFactory:
        return factories.register(name, factory)

    return decorator


__all__ = ["PluginFactory", "PluginFactoryRegistry", "factories", "register_plugin"]
