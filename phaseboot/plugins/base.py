"""Shared behaviour of the built-in plugins."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, MutableMapping, Optional

from phaseboot.settings import BootOptions

logger = logging.getLogger(__name__)

Context = MutableMapping[str, Any]


class PluginBase:
    """Moves one kind of configuration from the options onto the application.

    ``load`` stores the plugin's section of the options under
    ``context["configurations"][name]``, ``compile`` turns it into
    ``context["instructions"][name]`` and ``start`` hands each instruction to
    the application hook named by :attr:`app_hook`, when the app has one.
    """

    name: str = ""
    config_key: str = ""
    app_hook: Optional[str] = None

    def __init__(self, options: BootOptions) -> None:
        self.options = options

    def load(self, context: Context) -> Any:
        logger.debug(
            "Root dir: %s, env: %s, plugin: %s",
            self.options.root_dir,
            self.options.env,
            self.name,
        )
        config = self.options.section(self.config_key)
        return self.configure(context, {} if config is None else config)

    def configure(self, context: Context, config: Any) -> Any:
        context.setdefault("configurations", {})[self.name] = config
        return config

    def compile(self, context: Context) -> Any:
        config = context.get("configurations", {}).get(self.name, {})
        instructions = self.build_instructions(context, config)
        context.setdefault("instructions", {})[self.name] = instructions
        return instructions

    def build_instructions(self, context: Context, config: Any) -> Any:
        return config

    def start(self, context: Context) -> None:
        app = context.get("app")
        instructions = context.get("instructions", {}).get(self.name)
        if app is None or not instructions or not self.app_hook:
            return None
        hook = getattr(app, self.app_hook, None)
        if not callable(hook):
            logger.debug("Application has no '%s' hook; skipping %s", self.app_hook, self.name)
            return None
        self.apply(hook, instructions)
        return None

    def apply(self, hook: Any, instructions: Any) -> None:
        if isinstance(instructions, Mapping):
            for key, spec in instructions.items():
                hook(key, spec)
        else:
            for spec in instructions:
                hook(spec)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def drop_disabled(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Return *config* without entries explicitly set to ``None`` or ``False``."""

    return {key: value for key, value in config.items() if value is not None and value is not False}


__all__ = ["Context", "PluginBase", "drop_disabled"]
