"""Timer source -- a schedulable, suspendable, cancellable event primitive.

A source starts suspended.  Once resumed it waits on a background thread
until its deadline, then submits its event handler to the executor it was
bound to.  Suspension is counted, and a source must not be cancelled
while it is suspended: every suspend needs a matching resume before the
source can be torn down.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from concurrent.futures import Executor
from typing import Callable

logger = logging.getLogger(__name__)

_source_ids = itertools.count(1)


class TimerSourceError(Exception):
    """Raised when a timer source is resumed or cancelled out of balance."""


def _noop() -> None:
    pass


class TimerSource:
    """Thread-backed timer primitive delivering events on an executor.

    At most one event is in flight at a time.  Deadlines that pass while
    the previous event is still running are coalesced into one late
    delivery, so the handler never runs concurrently with itself.
    """

    def __init__(self, queue: Executor) -> None:
        self._queue = queue
        self._cond = threading.Condition()
        self._handler: Callable[[], None] = _noop
        self._suspend_count = 1
        self._deadline: float | None = None
        self._period: float | None = None
        self._in_flight = False
        self._cancelled = False
        self._thread: threading.Thread | None = None
        self._name = f"tdtimer-source-{next(_source_ids)}"

    # -- public interface ----------------------------------------------------

    @property
    def is_suspended(self) -> bool:
        with self._cond:
            return self._suspend_count > 0

    @property
    def is_cancelled(self) -> bool:
        with self._cond:
            return self._cancelled

    def set_event_handler(self, handler: Callable[[], None]) -> None:
        """Replace the callback submitted on every fire."""
        with self._cond:
            self._handler = handler

    def schedule(self, deadline: float, repeating: float | None = None) -> None:
        """Arm the source for *deadline* (a ``time.monotonic()`` timestamp).

        With *repeating* set, the source fires again every *repeating*
        seconds after the first deadline; otherwise it fires once.
        """
        with self._cond:
            if self._cancelled:
                return
            self._deadline = deadline
            self._period = repeating
            self._wake()

    def disarm(self) -> None:
        """Drop any pending deadline; the source stays quiet until rescheduled."""
        with self._cond:
            self._deadline = None
            self._period = None
            self._cond.notify_all()

    def resume(self) -> None:
        """Balance one previous :meth:`suspend` (or the initial suspension).

        The worker thread is only started once the source is both resumed
        and holding a deadline.
        """
        with self._cond:
            if self._cancelled:
                return
            if self._suspend_count == 0:
                raise TimerSourceError(f"{self._name} resumed while not suspended")
            self._suspend_count -= 1
            self._wake()

    def suspend(self) -> None:
        with self._cond:
            if self._cancelled:
                return
            self._suspend_count += 1

    def cancel(self) -> None:
        """Stop the source permanently.

        Raises ``TimerSourceError`` if the source is still suspended.
        """
        with self._cond:
            if self._cancelled:
                return
            if self._suspend_count > 0:
                raise TimerSourceError(f"{self._name} cancelled while suspended")
            self._cancelled = True
            self._cond.notify_all()
        logger.debug("%s cancelled", self._name)

    # -- private helpers -----------------------------------------------------

    def _wake(self) -> None:
        """Start or notify the worker if the source is armed.

        Must be called with ``self._cond`` held.
        """
        if self._suspend_count > 0 or self._deadline is None:
            return
        if self._thread is not None:
            self._cond.notify_all()
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.debug("%s thread started", self._name)

    def _run(self) -> None:
        while True:
            with self._cond:
                handler = self._wait_until_due()
            if handler is None:
                return
            try:
                self._queue.submit(self._deliver, handler)
            except RuntimeError:
                logger.warning("%s: queue rejected event, cancelling source", self._name)
                with self._cond:
                    self._in_flight = False
                    self._cancelled = True
                return

    def _wait_until_due(self) -> Callable[[], None] | None:
        """Block until an event is due; return its handler, or ``None`` once cancelled.

        Must be called with ``self._cond`` held.
        """
        while not self._cancelled:
            if self._suspend_count > 0 or self._deadline is None or self._in_flight:
                self._cond.wait()
                continue
            now = time.monotonic()
            delay = self._deadline - now
            if delay > 0:
                self._cond.wait(delay)
                continue
            if self._period is None:
                self._deadline = None
            else:
                self._deadline += self._period
                if self._deadline <= now:
                    # Missed periods collapse into this single delivery.
                    self._deadline = now + self._period
            self._in_flight = True
            return self._handler
        return None

    def _deliver(self, handler: Callable[[], None]) -> None:
        try:
            handler()
        except Exception:
            logger.exception("%s: event handler raised", self._name)
        finally:
            with self._cond:
                self._in_flight = False
                self._cond.notify_all()
