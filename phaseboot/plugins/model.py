"""Model definition plugin."""
from __future__ import annotations

from typing import Any, Dict

from .base import Context, PluginBase, drop_disabled
from .registry import register_plugin


@register_plugin("model")
class ModelPlugin(PluginBase):
    """Registers models on the application, skipping disabled entries."""

    name = "model"
    config_key = "models"
    app_hook = "model"

    def build_instructions(self, context: Context, config: Any) -> Dict[str, Any]:
        return drop_disabled(config or {})
