"""phaseboot - ordered, phase-by-phase plugin execution for application bootstrapping."""
from __future__ import annotations

from typing import Any

from phaseboot.core import (
    BOOT_PATH,
    BUILTIN_PHASES,
    Bootstrapper,
    HandlerFailure,
    InvalidConfiguration,
    LoadFailure,
    callback_style,
    return_style,
)
from phaseboot.core.utils import package_version
from phaseboot.settings import BUILTIN_PLUGINS, BootOptions

__all__ = [
    "__version__",
    "BOOT_PATH",
    "BUILTIN_PHASES",
    "BUILTIN_PLUGINS",
    "BootOptions",
    "Bootstrapper",
    "HandlerFailure",
    "InvalidConfiguration",
    "LoadFailure",
    "boot",
    "callback_style",
    "create_bootstrapper",
    "return_style",
]


def __getattr__(name: str):  # pragma: no cover - passthrough to package metadata
    if name == "__version__":
        return package_version()
    raise AttributeError(name)


def create_bootstrapper(options: Any = None) -> Bootstrapper:
    """Construct a :class:`Bootstrapper` with the built-in plugins."""

    return Bootstrapper(options)


def boot(app: Any, options: Any = None, done: Any = None) -> Any:
    """Run a full bootstrap of *app* with a fresh context."""

    context = {"app": app}
    return create_bootstrapper(options).run(context, done)
