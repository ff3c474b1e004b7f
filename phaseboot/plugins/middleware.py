"""Middleware plugin."""
from __future__ import annotations

from typing import Any, List, Tuple

from .base import Context, PluginBase
from .registry import register_plugin


@register_plugin("middleware")
class MiddlewarePlugin(PluginBase):
    """Flattens ``{phase: {name: spec}}`` into ordered ``(phase, name, spec)`` entries."""

    name = "middleware"
    config_key = "middleware"
    app_hook = "middleware"

    def build_instructions(self, context: Context, config: Any) -> List[Tuple[str, str, Any]]:
        entries: List[Tuple[str, str, Any]] = []
        for phase, members in (config or {}).items():
            for name, spec in (members or {}).items():
                if spec is False:
                    continue
                entries.append((phase, name, spec))
        return entries

    def apply(self, hook: Any, instructions: Any) -> None:
        for phase, name, spec in instructions:
            hook(phase, name, spec)
