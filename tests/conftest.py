"""Shared test fixtures."""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Callable

import pytest

from tdtimer.core.queue import InlineExecutor
from tdtimer.core.source import TimerSourceError


class FakeTimerSource:
    """In-memory stand-in for ``TimerSource`` that tests drive by hand.

    Mirrors the real source's suspension and cancellation rules and
    records every call so tests can assert on them.
    """

    def __init__(self, queue: Executor) -> None:
        self.queue = queue
        self.handler: Callable[[], None] = lambda: None
        self.suspend_count = 1
        self.cancelled = False
        self.schedules: list[tuple[float, float | None]] = []
        self.resume_calls = 0
        self.suspend_calls = 0
        self.disarmed = False

    @property
    def is_suspended(self) -> bool:
        return self.suspend_count > 0

    @property
    def is_cancelled(self) -> bool:
        return self.cancelled

    def set_event_handler(self, handler: Callable[[], None]) -> None:
        self.handler = handler

    def schedule(self, deadline: float, repeating: float | None = None) -> None:
        self.schedules.append((deadline, repeating))

    def disarm(self) -> None:
        self.disarmed = True

    def resume(self) -> None:
        if self.cancelled:
            return
        if self.suspend_count == 0:
            raise TimerSourceError("resumed while not suspended")
        self.resume_calls += 1
        self.suspend_count -= 1

    def suspend(self) -> None:
        if self.cancelled:
            return
        self.suspend_calls += 1
        self.suspend_count += 1

    def cancel(self) -> None:
        if self.cancelled:
            return
        if self.suspend_count > 0:
            raise TimerSourceError("cancelled while suspended")
        self.cancelled = True

    # -- test drivers --------------------------------------------------------

    def tick(self) -> bool:
        """Deliver one scheduled event if the source is armed."""
        if self.is_suspended or self.cancelled:
            return False
        self.handler()
        return True

    def fire_event(self) -> None:
        """Deliver an event regardless of state, like one already in flight."""
        self.handler()


@pytest.fixture()
def sources() -> list[FakeTimerSource]:
    """Every fake source created by ``source_factory`` during the test."""
    return []


@pytest.fixture()
def source_factory(sources: list[FakeTimerSource]) -> Callable[[Executor], FakeTimerSource]:
    def factory(queue: Executor) -> FakeTimerSource:
        source = FakeTimerSource(queue)
        sources.append(source)
        return source

    return factory


@pytest.fixture()
def inline() -> InlineExecutor:
    return InlineExecutor()
