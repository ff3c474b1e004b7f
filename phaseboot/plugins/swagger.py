"""API description plugin, applied once the application has started."""
from __future__ import annotations

import logging

from .base import Context, PluginBase
from .registry import register_plugin

logger = logging.getLogger(__name__)


@register_plugin("swagger")
class SwaggerPlugin(PluginBase):
    name = "swagger"
    config_key = "swagger"

    def started(self, context: Context) -> None:
        app = context.get("app")
        spec = context.get("instructions", {}).get(self.name)
        hook = getattr(app, "swagger", None) if app is not None else None
        if not spec or not callable(hook):
            logger.debug("No API description to publish")
            return None
        hook(spec)
        return None
