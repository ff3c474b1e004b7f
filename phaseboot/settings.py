"""Engine options, resolved once from caller input and the environment."""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from phaseboot.core.errors import InvalidConfiguration
from phaseboot.core.phases import BUILTIN_PHASES, ensure_phase_list

DEFAULT_ENV = "development"

BUILTIN_PLUGINS = (
    "application",
    "datasource",
    "model",
    "mixin",
    "middleware",
    "component",
    "boot-script",
    "swagger",
)

_ALIASES = {
    "appRootDir": "app_root_dir",
    "appConfigRootDir": "app_config_root_dir",
    "handlerTimeout": "handler_timeout",
}


def _ensure_plugin_list(plugins: object) -> List[str]:
    if not isinstance(plugins, (list, tuple)):
        raise InvalidConfiguration(f"Invalid plugins: {plugins!r}")
    for name in plugins:
        if not isinstance(name, str) or not name:
            raise InvalidConfiguration(f"Invalid plugin name: {name!r}")
    return list(plugins)


def _ensure_timeout(value: object) -> Optional[float]:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Invalid handler timeout: {value!r}") from exc
    if timeout <= 0:
        raise InvalidConfiguration(f"Handler timeout must be positive, got {value!r}")
    return timeout


@dataclass(slots=True)
class BootOptions:
    """Resolved options shared by the engine and every plugin factory."""

    app_root_dir: Path
    app_config_root_dir: Path
    env: str
    phases: List[str] = field(default_factory=lambda: list(BUILTIN_PHASES))
    plugins: List[str] = field(default_factory=lambda: list(BUILTIN_PLUGINS))
    handler_timeout: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    @property
    def root_dir(self) -> Path:
        return self.app_config_root_dir

    def validate(self) -> None:
        """Check phases, plugins and timeout, normalising them in place."""

        self.phases = ensure_phase_list(self.phases)
        self.plugins = _ensure_plugin_list(self.plugins)
        self.handler_timeout = _ensure_timeout(self.handler_timeout)

    def section(self, key: str, default: Any = None) -> Any:
        """Return a plugin-specific option such as ``models`` or ``dataSources``."""

        return self.extra.get(key, default)

    @classmethod
    def resolve(
        cls,
        options: Any = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> "BootOptions":
        """Build options from *options*, applying every default exactly once.

        *options* may be ``None``, an application root directory, a mapping
        with camelCase or snake_case keys, or an existing :class:`BootOptions`.
        """

        if isinstance(options, BootOptions):
            options.validate()
            return options
        if options is None:
            options = {}
        elif isinstance(options, (str, Path)):
            options = {"appRootDir": options}
        elif not isinstance(options, Mapping):
            raise InvalidConfiguration(f"Invalid options: {options!r}")

        environ = os.environ if environ is None else environ
        known = {item.name for item in fields(cls)} - {"extra"}
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in options.items():
            name = _ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                extra[key] = value

        app_root_dir = Path(values.get("app_root_dir") or cwd or Path.cwd())
        app_config_root_dir = Path(values.get("app_config_root_dir") or app_root_dir)
        env = (
            values.get("env")
            or environ.get("PHASEBOOT_ENV")
            or environ.get("APP_ENV")
            or DEFAULT_ENV
        )
        phases = values.get("phases")
        plugins = values.get("plugins")
        return cls(
            app_root_dir=app_root_dir,
            app_config_root_dir=app_config_root_dir,
            env=str(env),
            phases=list(BUILTIN_PHASES) if phases is None else phases,
            plugins=list(BUILTIN_PLUGINS) if plugins is None else plugins,
            handler_timeout=values.get("handler_timeout"),
            extra=extra,
        )


def load_options_file(path: Path) -> Dict[str, Any]:
    """Load engine options from the YAML document at *path*."""

    if not path.exists():
        raise FileNotFoundError(f"Options file not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"Could not parse options file {path}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise InvalidConfiguration(f"Options file {path} must contain a mapping")
    return dict(payload)


__all__ = ["BUILTIN_PLUGINS", "BootOptions", "DEFAULT_ENV", "load_options_file"]
