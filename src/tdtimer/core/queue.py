"""Execution contexts that timer events are delivered on."""

from __future__ import annotations

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable

_MAIN_QUEUE_LABEL = "tdtimer.main"

_main_queue: ThreadPoolExecutor | None = None
_main_queue_lock = threading.Lock()


def serial_queue(label: str) -> ThreadPoolExecutor:
    """Return a private executor that runs submitted work one item at a time."""
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix=label)


def main_queue() -> ThreadPoolExecutor:
    """Return the shared process-wide serial queue, creating it on first use."""
    global _main_queue
    with _main_queue_lock:
        if _main_queue is None:
            _main_queue = serial_queue(_MAIN_QUEUE_LABEL)
        return _main_queue


class InlineExecutor(Executor):
    """Executor that runs work immediately on the submitting thread.

    A timer bound to this executor delivers its events on the timer
    source's own thread.
    """

    def __init__(self) -> None:
        self._shutdown = False

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        if self._shutdown:
            raise RuntimeError("cannot schedule new futures after shutdown")
        future: Future = Future()
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self._shutdown = True
