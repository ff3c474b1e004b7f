from __future__ import annotations

from pathlib import Path
from typing import Any, List

import pytest

from phaseboot.core.bootstrapper import Bootstrapper


class Recorder:
    """Collects ``name.phase`` labels in the order handlers are invoked."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def handler(self, name: str, *phases: str, value: Any = None) -> Any:
        recorder = self

        class Handler:
            pass

        handler = Handler()
        handler.name = name
        for phase in phases:

            def method(context: Any, _phase: str = phase) -> Any:
                recorder.calls.append(f"{name}.{_phase}")
                return value

            setattr(handler, phase, method)
        return handler


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def bootstrapper(tmp_path: Path) -> Bootstrapper:
    """A bootstrapper without built-in plugins, rooted in a temporary directory."""

    return Bootstrapper({"appRootDir": str(tmp_path), "env": "test", "plugins": []})
