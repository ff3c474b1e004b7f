"""Data source plugin."""
from __future__ import annotations

from .base import PluginBase
from .registry import register_plugin


@register_plugin("datasource")
class DataSourcePlugin(PluginBase):
    name = "datasource"
    config_key = "dataSources"
    app_hook = "data_source"
