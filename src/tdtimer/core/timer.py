"""Timer core -- a repeating or one-shot timer over a ``TimerSource``."""

from __future__ import annotations

import logging
import time
import weakref
from concurrent.futures import Executor
from typing import Callable

from tdtimer.core.interval import Interval, to_seconds
from tdtimer.core.queue import main_queue
from tdtimer.core.source import TimerSource

logger = logging.getLogger(__name__)

TimerHandler = Callable[["RepeatingTimer"], None]


def _noop() -> None:
    pass


class RepeatingTimer:
    """A timer that calls *handler* once after *interval*, or every *interval*.

    The timer is created suspended and only fires after :meth:`start`.
    Events are delivered on *queue* (the shared main queue by default).
    The callback installed on the source holds a weak reference to the
    timer, so an event arriving after the timer is gone does nothing.

    Example::

        timer = RepeatingTimer(0.5, lambda t: print("tick"), repeats=True)
        timer.start()

    Start, suspend and the reschedule methods are not thread-safe;
    callers must serialise access to one instance.
    """

    def __init__(
        self,
        interval: Interval,
        handler: TimerHandler,
        *,
        repeats: bool = False,
        queue: Executor | None = None,
        source_factory: Callable[[Executor], TimerSource] = TimerSource,
    ) -> None:
        self._interval = to_seconds(interval)
        self._repeats = repeats
        self._handler = handler
        self._is_running = False
        self._armed = False
        self._closed = False
        self._source = source_factory(queue if queue is not None else main_queue())
        self._bind(handler)
        self._schedule()

    @classmethod
    def repeating(
        cls,
        interval: Interval,
        handler: TimerHandler,
        *,
        queue: Executor | None = None,
    ) -> RepeatingTimer:
        """Return a suspended timer that fires every *interval*."""
        return cls(interval, handler, repeats=True, queue=queue)

    def __del__(self) -> None:
        # __init__ may have failed before the source existed.
        if hasattr(self, "_source"):
            self.close()

    def __enter__(self) -> RepeatingTimer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- public interface ----------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def repeats(self) -> bool:
        return self._repeats

    @property
    def interval(self) -> float:
        return self._interval

    def start(self) -> None:
        """Resume the source.  Does nothing if the timer is already running."""
        if self._closed or self._is_running:
            return
        self._source.resume()
        self._armed = True
        self._is_running = True
        logger.debug("timer %#x started", id(self))

    def suspend(self) -> None:
        """Suspend the source.  Does nothing if the timer is not running."""
        if self._closed or not self._is_running:
            return
        if self._armed:
            self._source.suspend()
            self._armed = False
        self._is_running = False
        logger.debug("timer %#x suspended", id(self))

    def fire(self) -> None:
        """Call the handler now, on the calling thread.

        A one-shot timer is marked as running afterwards even though its
        source is not resumed.
        """
        if self._closed:
            return
        self._handler(self)
        if not self._repeats:
            self._is_running = True

    def reschedule_interval(self, interval: Interval) -> None:
        """Re-arm a repeating timer to fire every *interval*, starting now.

        One-shot timers ignore this call.
        """
        if self._closed or not self._repeats:
            return
        self._interval = to_seconds(interval)
        self._schedule()

    def reschedule_handler(self, handler: TimerHandler) -> None:
        """Replace the handler called on every fire."""
        if self._closed:
            return
        self._handler = handler
        self._bind(handler)

    def close(self) -> None:
        """Release the source.

        The source is disarmed, then a suspended source is resumed once
        before it is cancelled.  Safe to call more than once.
        """
        if self._closed:
            return
        self._closed = True
        # The balancing resume below must neither start a worker nor deliver.
        self._source.set_event_handler(_noop)
        self._source.disarm()
        if not self._armed:
            self._source.resume()
            self._armed = True
        self._source.cancel()
        logger.debug("timer %#x closed", id(self))

    # -- private helpers -----------------------------------------------------

    def _bind(self, handler: TimerHandler) -> None:
        ref = weakref.ref(self)

        def on_event() -> None:
            timer = ref()
            if timer is not None:
                handler(timer)

        self._source.set_event_handler(on_event)

    def _schedule(self) -> None:
        deadline = time.monotonic() + self._interval
        if self._repeats:
            self._source.schedule(deadline, repeating=self._interval)
        else:
            self._source.schedule(deadline)
