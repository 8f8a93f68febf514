from __future__ import annotations

import threading
import time

import pytest

from curator.output.console import MockConsole, Style
from curator.services.release.heartbeat import Heartbeat, with_heartbeat


def _alive(console: MockConsole) -> list[str]:
    return [o.message for o in console.find("Still alive")]


def test_quick_action_prints_nothing() -> None:
    console = MockConsole()
    assert with_heartbeat(10.0, lambda: 42, console=console) == 42
    assert _alive(console) == []


def test_ticks_while_action_runs_and_stop_after_return() -> None:
    console = MockConsole()

    def slow() -> str:
        time.sleep(0.35)
        return "done"

    assert with_heartbeat(0.05, slow, console=console) == "done"

    seen = _alive(console)
    assert len(seen) >= 2
    assert seen[:2] == ["Still alive: 1", "Still alive: 2"]
    assert all(o.style == Style.DIM for o in console.find("Still alive"))

    time.sleep(0.2)
    assert len(_alive(console)) <= len(seen) + 1


def test_stops_when_action_raises() -> None:
    console = MockConsole()

    def boom() -> None:
        time.sleep(0.12)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        with_heartbeat(0.05, boom, console=console)

    seen = _alive(console)
    time.sleep(0.2)
    assert len(_alive(console)) <= len(seen) + 1


def test_heartbeat_thread_is_daemon() -> None:
    beat = Heartbeat(MockConsole(), interval_seconds=10.0)
    beat.start()
    try:
        threads = [t for t in threading.enumerate() if t.name == "curator-heartbeat"]
        assert threads and all(t.daemon for t in threads)
    finally:
        beat.stop()
    assert beat.ticks == 0


def test_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError, match="positive"):
        Heartbeat(MockConsole(), interval_seconds=0)


class _BlockingConsole(MockConsole):
    """Console whose heartbeat writes hang until released."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        if message.startswith("Still alive"):
            self.entered.set()
            self.release.wait(5.0)
        super().print(message, style)


def test_blocked_console_write_does_not_delay_return() -> None:
    console = _BlockingConsole()

    def action() -> str:
        assert console.entered.wait(2.0)
        return "built"

    try:
        started = time.monotonic()
        assert with_heartbeat(0.01, action, console=console) == "built"
        assert time.monotonic() - started < 1.0
    finally:
        console.release.set()
