"""Plugin factories and the built-in plugin kinds."""
from __future__ import annotations

from .base import PluginBase
from .registry import PluginFactory, PluginFactoryRegistry, factories, register_plugin

__all__ = [
    "PluginBase",
    "PluginFactory",
    "PluginFactoryRegistry",
    "factories",
    "load_builtin_plugins",
    "register_plugin",
]


def load_builtin_plugins() -> PluginFactoryRegistry:
    """Import the built-in plugin modules so their factories are registered."""

    from phaseboot.plugins import (  # noqa: F401
        application,
        boot_script,
        component,
        datasource,
        middleware,
        mixin,
        model,
        swagger,
    )

    return factories
