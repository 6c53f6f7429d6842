"""tdtimer: repeating and countdown timers on a dispatch-style timer source."""

from tdtimer.core.countdown import CountdownTimer
from tdtimer.core.interval import from_seconds, to_seconds
from tdtimer.core.queue import InlineExecutor, main_queue, serial_queue
from tdtimer.core.source import TimerSource, TimerSourceError
from tdtimer.core.timer import RepeatingTimer

__version__ = "0.1.0"

__all__ = [
    "CountdownTimer",
    "InlineExecutor",
    "RepeatingTimer",
    "TimerSource",
    "TimerSourceError",
    "from_seconds",
    "main_queue",
    "serial_queue",
    "to_seconds",
]
