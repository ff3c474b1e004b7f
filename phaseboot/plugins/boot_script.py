"""Boot script plugin."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, List

from phaseboot.core.invocation import invoke

from .base import Context, PluginBase
from .registry import register_plugin

logger = logging.getLogger(__name__)


@register_plugin("boot-script")
class BootScriptPlugin(PluginBase):
    """Runs configured boot scripts against the application, one at a time.

    Scripts follow the same completion rules as phase handlers: they may
    return a value or an awaitable, or accept a ``done`` callback as their
    second argument.
    """

    name = "boot-script"
    config_key = "bootScripts"

    def build_instructions(self, context: Context, config: Any) -> List[Callable[..., Any]]:
        scripts = list(config.values()) if isinstance(config, Mapping) else list(config or [])
        for script in scripts:
            if not callable(script):
                raise TypeError(f"Boot script {script!r} is not callable")
        return scripts

    async def start(self, context: Context) -> None:
        app = context.get("app")
        scripts = context.get("instructions", {}).get(self.name) or []
        for script in scripts:
            logger.debug("Running boot script %s", getattr(script, "__name__", script))
            await invoke(script, app, timeout=self.options.handler_timeout)
