"""Countdown timer -- fires a repeating timer a bounded number of times."""

from __future__ import annotations

import weakref
from concurrent.futures import Executor
from typing import Callable

from tdtimer.core.interval import Interval
from tdtimer.core.source import TimerSource
from tdtimer.core.timer import RepeatingTimer

CountdownHandler = Callable[["CountdownTimer", int], None]


def _placeholder(timer: RepeatingTimer) -> None:
    pass


class CountdownTimer:
    """Calls *handler* ``times`` times, every *interval*, then stops.

    The handler receives the countdown and the number of fires left after
    the current one, so the first call reports ``times - 1`` and the last
    reports ``0``.  After the last call the internal timer is suspended and
    stays quiet until :meth:`reset` or :meth:`reconfigure` followed by
    :meth:`start`.

    Example::

        countdown = CountdownTimer(1.0, 120, lambda _, left: print(left))
        countdown.start()
    """

    def __init__(
        self,
        interval: Interval,
        times: int,
        handler: CountdownHandler,
        *,
        queue: Executor | None = None,
        source_factory: Callable[[Executor], TimerSource] = TimerSource,
    ) -> None:
        self._remaining = times
        self._initial_count = times
        self._handler = handler
        self._timer = RepeatingTimer(
            interval,
            _placeholder,
            repeats=True,
            queue=queue,
            source_factory=source_factory,
        )
        self._install()

    def __enter__(self) -> CountdownTimer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- public interface ----------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._timer.is_running

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def initial_count(self) -> int:
        return self._initial_count

    @property
    def interval(self) -> float:
        return self._timer.interval

    def start(self) -> None:
        self._timer.start()

    def suspend(self) -> None:
        self._timer.suspend()

    def close(self) -> None:
        self._timer.close()

    def reset(self, times: int | None = None) -> CountdownTimer:
        """Restore the count, optionally to a new *times*.  Running state is kept."""
        if times is not None:
            self._initial_count = times
        self._remaining = self._initial_count
        return self

    def reconfigure(
        self,
        interval: Interval,
        handler: CountdownHandler,
        times: int | None = None,
    ) -> CountdownTimer:
        """Suspend, reset the count and switch to a new *interval* and *handler*.

        The countdown is left suspended; call :meth:`start` to run it.
        """
        self.suspend()
        self.reset(times)
        self._handler = handler
        self._timer.reschedule_interval(interval)
        self._install()
        return self

    # -- private helpers -----------------------------------------------------

    def _install(self) -> None:
        ref = weakref.ref(self)

        def on_fire(timer: RepeatingTimer) -> None:
            countdown = ref()
            if countdown is not None:
                countdown._tick()

        self._timer.reschedule_handler(on_fire)

    def _tick(self) -> None:
        if self._remaining <= 0:
            self._timer.suspend()
            return
        self._remaining -= 1
        self._handler(self, self._remaining)
        # The handler may have reset the count to keep going.
        if self._remaining == 0:
            self._timer.suspend()
