"""Periodic "still alive" output for long foreground operations.

CI systems kill jobs that stay silent for too long; a full build can be
quiet for much longer than that. The heartbeat runs on a daemon thread that
is signalled to stop when the wrapped call returns but is never joined, and
stopping never waits on a console write in progress.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TypeVar

from curator.output.console import ConsoleProtocol, Style

T = TypeVar("T")


class Heartbeat:
    def __init__(self, console: ConsoleProtocol, *, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"heartbeat interval must be positive: {interval_seconds}")
        self._console = console
        self._interval = interval_seconds
        self._stopped = threading.Event()
        self._lock = threading.Lock()
        self._ticks = 0

    @property
    def ticks(self) -> int:
        with self._lock:
            return self._ticks

    def start(self) -> None:
        thread = threading.Thread(target=self._loop, name="curator-heartbeat", daemon=True)
        thread.start()

    def stop(self) -> None:
        # Never waits on the loop; a tick already past its check may still print once.
        self._stopped.set()

    def _loop(self) -> None:
        while not self._stopped.wait(self._interval):
            with self._lock:
                if self._stopped.is_set():
                    return
                self._ticks += 1
                tick = self._ticks
            self._console.print(f"Still alive: {tick}", Style.DIM)


def with_heartbeat(
    interval_seconds: float,
    action: Callable[[], T],
    *,
    console: ConsoleProtocol,
) -> T:
    """Run ``action`` while printing a heartbeat every ``interval_seconds``."""
    beat = Heartbeat(console, interval_seconds=interval_seconds)
    beat.start()
    try:
        return action()
    finally:
        beat.stop()
