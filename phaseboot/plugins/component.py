"""Component plugin."""
from __future__ import annotations

from typing import Any, Dict

from .base import Context, PluginBase, drop_disabled
from .registry import register_plugin


@register_plugin("component")
class ComponentPlugin(PluginBase):
    name = "component"
    config_key = "components"
    app_hook = "component"

    def build_instructions(self, context: Context, config: Any) -> Dict[str, Any]:
        # Components configured as null/false are disabled
        return drop_disabled(config or {})
