"""Handler invocation supporting return-style and callback-style completion."""
from __future__ import annotations

import asyncio
import concurrent.futures
import enum
import inspect
import logging
import threading
from typing import Any, Callable, Optional, TypeVar

from .errors import HandlerError, HandlerTimeout

logger = logging.getLogger(__name__)

STYLE_ATTRIBUTE = "__phaseboot_style__"

F = TypeVar("F", bound=Callable[..., Any])


class InvocationStyle(enum.Enum):
    """How a handler reports completion."""

    RETURN = "return"
    CALLBACK = "callback"


def callback_style(func: F) -> F:
    """Mark *func* as completing through a ``done(error, value)`` callback."""

    setattr(func, STYLE_ATTRIBUTE, InvocationStyle.CALLBACK)
    return func


def return_style(func: F) -> F:
    """Mark *func* as completing through its return value (plain or awaitable)."""

    setattr(func, STYLE_ATTRIBUTE, InvocationStyle.RETURN)
    return func


def _required_positional(func: Callable[..., Any]) -> int:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 1
    return sum(
        1
        for parameter in signature.parameters.values()
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
        and parameter.default is parameter.empty
    )


def _accepts_subject(func: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return True
    return any(
        parameter.kind
        in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD, parameter.VAR_POSITIONAL)
        for parameter in signature.parameters.values()
    )


def resolve_style(func: Callable[..., Any]) -> InvocationStyle:
    """Return the explicit style of *func*, or infer it from its parameters.

    Unmarked callables taking exactly two required positional arguments are
    treated as callback-style; everything else is return-style.
    """

    style = getattr(func, STYLE_ATTRIBUTE, None)
    if isinstance(style, InvocationStyle):
        return style
    if _required_positional(func) == 2:
        return InvocationStyle.CALLBACK
    return InvocationStyle.RETURN


def _settle(future: asyncio.Future, error: Any, value: Any) -> None:
    if future.done():
        return
    if error:
        if not isinstance(error, BaseException):
            error = HandlerError(error)
        future.set_exception(error)
    else:
        future.set_result(value)


async def _invoke_with_callback(func: Callable[..., Any], subject: Any) -> Any:
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()
    lock = threading.Lock()
    state = {"settled": False, "finished": False}

    def done(error: Any = None, value: Any = None) -> None:
        with lock:
            if state["finished"]:
                logger.warning("Completion callback for %r called after its invocation ended", func)
                return
            if state["settled"]:
                logger.warning("Completion callback for %r called more than once", func)
                return
            state["settled"] = True
        try:
            loop.call_soon_threadsafe(_settle, future, error, value)
        except RuntimeError:
            # The loop that was waiting for this handler has already closed
            logger.warning("Completion callback for %r called after its run ended", func)

    try:
        func(subject, done)
        return await future
    finally:
        with lock:
            state["finished"] = True


async def _invoke(func: Callable[..., Any], subject: Any) -> Any:
    if resolve_style(func) is InvocationStyle.CALLBACK:
        return await _invoke_with_callback(func, subject)
    result = func(subject) if _accepts_subject(func) else func()
    if isinstance(result, concurrent.futures.Future):
        result = asyncio.wrap_future(result)
    if inspect.isawaitable(result):
        return await result
    return result


async def invoke(func: Callable[..., Any], subject: Any, *, timeout: Optional[float] = None) -> Any:
    """Call *func* with *subject* and wait for it to complete.

    Return-style callables are called as ``func(subject)``, or as ``func()``
    when they take no positional arguments; awaitable results are awaited.
    Callback-style callables are called as ``func(subject, done)`` and
    complete when ``done(error, value)`` is called, from any thread. A truthy
    error is raised, so ``done(None)``, ``done(False)`` and ``done(0)`` all
    succeed; non-exception error values are wrapped in :class:`HandlerError`.
    Calls to ``done`` after the invocation has finished, timed out or been
    cancelled only log a warning. Without a *timeout* a handler that never
    completes keeps the caller waiting.
    """

    if timeout is None:
        return await _invoke(func, subject)

    task = asyncio.ensure_future(_invoke(func, subject))
    try:
        finished, _ = await asyncio.wait({task}, timeout=timeout)
    except asyncio.CancelledError:
        task.cancel()
        raise
    if not finished:
        task.cancel()
        raise HandlerTimeout(f"{func!r} did not complete within {timeout:g}s")
    return task.result()


__all__ = [
    "InvocationStyle",
    "callback_style",
    "invoke",
    "resolve_style",
    "return_style",
]
