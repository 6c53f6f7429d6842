"""CLI entry point for tdtimer.

Uses Click to expose the ``tdtimer`` command group with subcommands that
drive a :class:`RepeatingTimer` or :class:`CountdownTimer` and block until
it finishes.
"""

from __future__ import annotations

import logging
import sys
import threading
from concurrent.futures import Executor

import click

import tdtimer
from tdtimer.core.countdown import CountdownTimer
from tdtimer.core.queue import serial_queue
from tdtimer.core.timer import RepeatingTimer

logger = logging.getLogger(__name__)

_DEFAULT_INTERVAL = 1.0
_INTERVAL_ENVVAR = "TDTIMER_INTERVAL"
_QUEUE_LABEL = "tdtimer.cli"
_INTERRUPTED_EXIT_CODE = 130

_interval_option = click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=_DEFAULT_INTERVAL,
    show_default=True,
    envvar=_INTERVAL_ENVVAR,
    help="Seconds between fires.",
)


def _run(done: threading.Event, timer: RepeatingTimer | CountdownTimer, queue: Executor) -> None:
    """Start *timer* and block until *done* is set, then release everything.

    The queue is drained before the timer is closed so no event is still
    running against it.  On Ctrl-C the timer is suspended, ``Interrupted``
    is printed to stderr and the process exits with code 130.
    """
    try:
        timer.start()
        done.wait()
    except KeyboardInterrupt:
        timer.suspend()
        click.echo("Interrupted", err=True)
        sys.exit(_INTERRUPTED_EXIT_CODE)
    finally:
        queue.shutdown(wait=True)
        timer.close()


@click.group()
@click.version_option(version=tdtimer.__version__, prog_name="tdtimer")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """tdtimer: repeating and countdown timers from the terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("times", type=click.IntRange(min=0))
@_interval_option
def countdown(times: int, interval: float) -> None:
    """Count down TIMES fires, one every --interval seconds."""
    if times == 0:
        click.echo("Nothing to count down")
        return

    done = threading.Event()

    def on_fire(timer: CountdownTimer, remaining: int) -> None:
        click.echo(f"{remaining} remaining")
        if remaining == 0:
            done.set()

    queue = serial_queue(_QUEUE_LABEL)
    logger.debug("counting down %d fires every %.3fs", times, interval)
    _run(done, CountdownTimer(interval, times, on_fire, queue=queue), queue)
    click.echo("Countdown finished")


@cli.command()
@click.argument("count", type=click.IntRange(min=1))
@_interval_option
def repeat(count: int, interval: float) -> None:
    """Tick COUNT times, one every --interval seconds."""
    done = threading.Event()
    ticks = 0

    def on_tick(timer: RepeatingTimer) -> None:
        nonlocal ticks
        ticks += 1
        click.echo(f"tick {ticks}")
        if ticks >= count:
            timer.suspend()
            done.set()

    queue = serial_queue(_QUEUE_LABEL)
    _run(done, RepeatingTimer.repeating(interval, on_tick, queue=queue), queue)
    click.echo(f"Stopped after {ticks} ticks")


@cli.command()
@click.argument("delay", type=click.FloatRange(min=0, min_open=True))
def once(delay: float) -> None:
    """Fire a one-shot timer after DELAY seconds."""
    done = threading.Event()
    queue = serial_queue(_QUEUE_LABEL)
    _run(done, RepeatingTimer(delay, lambda _: done.set(), queue=queue), queue)
    click.echo(f"Fired after {delay:g}s")
