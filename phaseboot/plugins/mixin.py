"""Mixin plugin."""
from __future__ import annotations

from .base import PluginBase
from .registry import register_plugin


@register_plugin("mixin")
class MixinPlugin(PluginBase):
    name = "mixin"
    config_key = "mixins"
    app_hook = "mixin"
