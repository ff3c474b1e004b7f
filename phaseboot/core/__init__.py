"""Core orchestration utilities for the phaseboot runtime."""
from __future__ import annotations

from .bootstrapper import BOOT_PATH, Bootstrapper
from .errors import (
    BootError,
    HandlerFailure,
    HandlerTimeout,
    InvalidConfiguration,
    LoadFailure,
    PhaseOrderingError,
)
from .invocation import InvocationStyle, callback_style, invoke, return_style
from .phases import BUILTIN_PHASES, merge_phase_name_lists
from .registry import PluginRegistration, PluginRegistry

__all__ = [
    "BOOT_PATH",
    "BUILTIN_PHASES",
    "BootError",
    "Bootstrapper",
    "HandlerFailure",
    "HandlerTimeout",
    "InvalidConfiguration",
    "InvocationStyle",
    "LoadFailure",
    "PhaseOrderingError",
    "PluginRegistration",
    "PluginRegistry",
    "callback_style",
    "invoke",
    "merge_phase_name_lists",
    "return_style",
]
