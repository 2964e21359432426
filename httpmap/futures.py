"""Continuation stages over ``concurrent.futures.Future``.

Each stage returns a new future that resolves once the previous one has
resolved. Registering a stage never blocks; the stage function runs in
the thread that completes the previous future, or immediately in the
registering thread when that future is already done.
"""

from __future__ import annotations

from concurrent.futures import CancelledError, Future
from typing import Any, Callable


def _outcome(future: Future) -> tuple[Any, BaseException | None]:
    if future.cancelled():
        return None, CancelledError()
    error = future.exception()
    if error is not None:
        return None, error
    return future.result(), None


def then_apply(future: Future, fn: Callable[[Any], Any]) -> Future:
    """Future of ``fn(value)``; failures pass through without calling ``fn``."""
    result: Future = Future()

    def _complete(done: Future) -> None:
        if not result.set_running_or_notify_cancel():
            return
        value, error = _outcome(done)
        if error is not None:
            result.set_exception(error)
            return
        try:
            value = fn(value)
        except BaseException as e:
            result.set_exception(e)
        else:
            result.set_result(value)

    future.add_done_callback(_complete)
    return result


def exceptionally(future: Future, fn: Callable[[BaseException], Any]) -> Future:
    """Future that recovers a failure with ``fn(error)``; values pass through."""
    result: Future = Future()

    def _complete(done: Future) -> None:
        if not result.set_running_or_notify_cancel():
            return
        value, error = _outcome(done)
        if error is None:
            result.set_result(value)
            return
        try:
            value = fn(error)
        except BaseException as e:
            result.set_exception(e)
        else:
            result.set_result(value)

    future.add_done_callback(_complete)
    return result
