"""Application settings plugin."""
from __future__ import annotations

from typing import Any, Dict

from .base import Context, PluginBase
from .registry import register_plugin


@register_plugin("application")
class ApplicationPlugin(PluginBase):
    """Applies application-level settings through ``app.set(key, value)``."""

    name = "application"
    config_key = "application"
    app_hook = "set"

    def build_instructions(self, context: Context, config: Any) -> Dict[str, Any]:
        instructions = dict(config or {})
        instructions.setdefault("env", self.options.env)
        return instructions
