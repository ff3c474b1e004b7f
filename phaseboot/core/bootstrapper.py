"""Phase-by-phase execution of the plugins registered under ``/boot``."""
from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import time
from functools import partial
from typing import Any, Callable, List, Mapping, MutableMapping, Optional, Sequence, Set, Union

from phaseboot.plugins import PluginFactory, PluginFactoryRegistry, load_builtin_plugins
from phaseboot.settings import BootOptions

from .errors import HandlerError, HandlerFailure, LoadFailure
from .invocation import invoke
from .phases import ensure_phase_list, merge_phase_name_lists
from .registry import PluginRegistration, PluginRegistry

logger = logging.getLogger(__name__)

BOOT_PATH = "/boot"

Context = MutableMapping[str, Any]
Factories = Union[PluginFactoryRegistry, Mapping[str, PluginFactory]]
RunCallback = Callable[..., None]


def _deliver(done: RunCallback, future: Any) -> None:
    if future.cancelled():
        done(asyncio.CancelledError())
        return
    error = future.exception()
    if error is not None:
        done(error)
    else:
        done(None, future.result())


class Bootstrapper:
    """Invoke registered plugins phase by phase with a shared context.

    The plugins named in the options are built by their factories and
    registered at ``/boot/<name>`` during construction. Additional handlers
    can be registered with :meth:`use` before a run starts.
    """

    def __init__(self, options: Any = None, *, factories: Optional[Factories] = None) -> None:
        self.options = BootOptions.resolve(options)
        self.phases: List[str] = list(self.options.phases)
        self.builtin_plugins: List[str] = list(self.options.plugins)
        self._registry = PluginRegistry()
        self._tasks: Set[asyncio.Task] = set()

        if self.builtin_plugins and factories is None:
            factories = load_builtin_plugins()
        for name in self.builtin_plugins:
            self.use(f"{BOOT_PATH}/{name}", self._load_plugin(name, factories))

    def _load_plugin(self, name: str, factories: Factories) -> Any:
        try:
            factory = factories[name]
        except KeyError as exc:
            available = ", ".join(sorted(factories)) or "none"
            raise LoadFailure(name, f"no factory registered (available: {available})") from exc
        try:
            return factory(self.options)
        except Exception as exc:
            raise LoadFailure(name, str(exc)) from exc

    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    def use(self, path: str, handler: Any) -> None:
        """Register *handler* at *path*."""

        self._registry.register(path, handler)

    def get_plugins(self, path: str) -> List[PluginRegistration]:
        """Return the plugins registered anywhere below *path*."""

        return self._registry.get_plugins(path)

    def get_extensions(self, path: str) -> List[PluginRegistration]:
        """Return the plugins registered directly below *path*."""

        return self._registry.get_extensions(path)

    def add_phases(self, phases: Optional[Sequence[str]] = None) -> List[str]:
        """Merge *phases* into the phase list and return the new list.

        The order of phases is decided by the sequence of phase names; see
        :func:`~phaseboot.core.phases.merge_phase_name_lists`.
        """

        names = ensure_phase_list([] if phases is None else phases)
        self.phases = merge_phase_name_lists(self.phases, names)
        return self.phases

    async def execute(self, context: Optional[Context] = None) -> Any:
        """Run every phase and return the value of the last handler invoked.

        Raises :class:`HandlerFailure` for the first handler that fails; no
        further handlers or phases run after it.
        """

        context = {} if context is None else context
        override = context.get("phases")
        phases = list(self.phases) if override is None else ensure_phase_list(override)
        extensions = self.get_extensions(BOOT_PATH)
        timeout = self.options.handler_timeout

        result: Any = None
        for phase in phases:
            logger.info("Starting phase '%s' (%d extension(s))", phase, len(extensions))
            start_time = time.monotonic()
            for plugin in extensions:
                method = plugin.phase_method(phase)
                if method is None:
                    logger.debug("Skipping %s.%s", plugin.name, phase)
                    continue
                logger.debug("Invoking %s.%s", plugin.name, phase)
                try:
                    result = await invoke(method, context, timeout=timeout)
                except Exception as exc:
                    logger.exception("Handler %s failed in phase '%s'", plugin.name, phase)
                    error = exc.value if isinstance(exc, HandlerError) else exc
                    raise HandlerFailure(
                        error, phase=phase, path=plugin.path, handler=plugin.name
                    ) from exc
            logger.info(
                "Completed phase '%s' in %.2fs", phase, time.monotonic() - start_time
            )
        return result

    def run(self, context: Optional[Context] = None, done: Optional[RunCallback] = None) -> Any:
        """Invoke the plugins phase by phase with *context*.

        Inside a running event loop the run is scheduled as a task, which is
        returned unless *done* is given. Outside of one the run completes
        before this method returns, and the outcome is returned as a settled
        :class:`concurrent.futures.Future` unless *done* is given. *done* is
        called as ``done(error)`` or ``done(None, result)``.
        """

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self.execute(context))
            if done is None:
                return task
            # The event loop only keeps weak references to tasks
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            task.add_done_callback(partial(_deliver, done))
            return None

        future: concurrent.futures.Future = concurrent.futures.Future()
        try:
            future.set_result(asyncio.run(self.execute(context)))
        except Exception as exc:
            future.set_exception(exc)
        if done is None:
            return future
        _deliver(done, future)
        return None


__all__ = ["BOOT_PATH", "Bootstrapper"]
