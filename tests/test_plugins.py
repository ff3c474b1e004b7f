from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, List, Tuple

import pytest

from phaseboot import boot
from phaseboot.core.bootstrapper import Bootstrapper
from phaseboot.core.errors import HandlerFailure
from phaseboot.plugins import PluginFactoryRegistry, factories, load_builtin_plugins
from phaseboot.settings import BUILTIN_PLUGINS


class FakeApp:
    def __init__(self) -> None:
        self.events: List[Tuple[Any, ...]] = []

    def set(self, key, value):
        self.events.append(("set", key, value))

    def data_source(self, name, spec):
        self.events.append(("data_source", name, spec))

    def model(self, name, spec):
        self.events.append(("model", name, spec))

    def mixin(self, name, spec):
        self.events.append(("mixin", name, spec))

    def middleware(self, phase, name, spec):
        self.events.append(("middleware", phase, name, spec))

    def component(self, name, spec):
        self.events.append(("component", name, spec))

    def swagger(self, spec):
        self.events.append(("swagger", spec))


def test_builtin_plugins_are_registered() -> None:
    registry = load_builtin_plugins()

    assert registry is factories
    for name in BUILTIN_PLUGINS:
        assert name in registry


def test_full_boot_applies_configuration_to_the_app(tmp_path: Path) -> None:
    def sync_script(app):
        app.events.append(("script", "sync"))

    def callback_script(app, done):
        app.events.append(("script", "callback"))
        asyncio.get_running_loop().call_soon(done)

    async def async_script(app):
        await asyncio.sleep(0)
        app.events.append(("script", "async"))

    options = {
        "appRootDir": str(tmp_path),
        "env": "test",
        "application": {"port": 3000},
        "dataSources": {"db": {"connector": "memory"}},
        "models": {"User": {"dataSource": "db"}, "Hidden": False},
        "mixins": {"Timestamps": {"createdAt": True}},
        "middleware": {"routes": {"api": {"path": "/api"}, "off": False}},
        "components": {"explorer": {"mountPath": "/explorer"}, "disabled": None},
        "bootScripts": [sync_script, callback_script, async_script],
        "swagger": {"title": "Demo"},
    }
    app = FakeApp()
    context = {"app": app}

    Bootstrapper(options).run(context).result()

    assert app.events == [
        ("set", "port", 3000),
        ("set", "env", "test"),
        ("data_source", "db", {"connector": "memory"}),
        ("model", "User", {"dataSource": "db"}),
        ("mixin", "Timestamps", {"createdAt": True}),
        ("middleware", "routes", "api", {"path": "/api"}),
        ("component", "explorer", {"mountPath": "/explorer"}),
        ("script", "sync"),
        ("script", "callback"),
        ("script", "async"),
        ("swagger", {"title": "Demo"}),
    ]
    assert context["configurations"]["model"] == {"User": {"dataSource": "db"}, "Hidden": False}
    assert context["instructions"]["model"] == {"User": {"dataSource": "db"}}
    assert set(context["instructions"]) == set(BUILTIN_PLUGINS)


def test_boot_without_an_app_only_builds_instructions(tmp_path: Path) -> None:
    context: dict = {}

    Bootstrapper({"appRootDir": str(tmp_path), "dataSources": {"db": {}}}).run(context).result()

    assert context["instructions"]["datasource"] == {"db": {}}
    assert context["instructions"]["boot-script"] == []


def test_boot_helper_runs_with_a_fresh_context(tmp_path: Path) -> None:
    app = FakeApp()

    boot(app, {"appRootDir": str(tmp_path), "env": "demo"}).result()

    assert ("set", "env", "demo") in app.events


def test_failing_boot_script_fails_the_start_phase(tmp_path: Path) -> None:
    def broken(app, done):
        done(RuntimeError("script failed"))

    with pytest.raises(HandlerFailure) as excinfo:
        Bootstrapper({"appRootDir": str(tmp_path), "bootScripts": [broken]}).run({}).result()

    assert excinfo.value.phase == "start"
    assert excinfo.value.path == "/boot/boot-script"
    assert str(excinfo.value.error) == "script failed"


def test_non_callable_boot_script_fails_compilation(tmp_path: Path) -> None:
    with pytest.raises(HandlerFailure) as excinfo:
        Bootstrapper({"appRootDir": str(tmp_path), "bootScripts": ["not-a-script"]}).run().result()

    assert excinfo.value.phase == "compile"
    assert isinstance(excinfo.value.error, TypeError)


def test_factory_registry_prevents_duplicate_registration() -> None:
    registry = PluginFactoryRegistry()
    registry.register("demo", dict)
    with pytest.raises(ValueError):
        registry.register("demo", dict)
    with pytest.raises(KeyError):
        registry.get("missing")

    assert list(registry) == ["demo"]
