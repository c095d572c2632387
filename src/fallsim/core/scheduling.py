"""
Frame scheduling primitives for the simulation tick loop.

A scheduler hands out at most one pending frame callback at a time. The
callback receives the frame timestamp in MILLISECONDS, which is what the
controller uses to compute the elapsed real time between ticks.

Two implementations are provided:
- AsyncioFrameScheduler: real-time frames on an asyncio event loop
- ManualFrameScheduler: virtual clock advanced explicitly (tests, offline runs)
"""
from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any, Protocol

FrameCallback = Callable[[float], None]

# Default display refresh interval [s]
DEFAULT_FRAME_INTERVAL = 1.0 / 60.0


class FrameScheduler(Protocol):
    """Protocol for schedule-next-frame primitives."""

    def now(self) -> float:
        """Current clock reading [ms]."""
        ...

    def request(self, callback: FrameCallback) -> Any:
        """
        Schedule callback for the next frame.

        Returns
        -------
        Any
            Opaque handle accepted by cancel()
        """
        ...

    def cancel(self, handle: Any) -> None:
        """
        Cancel a pending frame.

        Must be idempotent: cancelling None, an already-cancelled handle or a
        handle whose callback already fired is a no-op and never raises.
        """
        ...


class AsyncioFrameScheduler:
    """
    Real-time frame scheduler backed by an asyncio event loop.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop | None
        Event loop to schedule on. Defaults to the running loop at request time.
    interval : float
        Frame interval [s]. Default: 1/60
    clock : Callable[[], float]
        Monotonic clock in seconds. Default: time.perf_counter

    Examples
    --------
    >>> async def main():
    ...     controller = SimulationController(scheduler=AsyncioFrameScheduler())
    ...     controller.start()
    ...     while controller.status is RunStatus.RUNNING:
    ...         await asyncio.sleep(0.1)
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        interval: float = DEFAULT_FRAME_INTERVAL,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Frame interval must be positive, got {interval}")
        self._loop = loop
        self.interval = float(interval)
        self._clock = clock

    def now(self) -> float:
        return self._clock() * 1000.0

    def request(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        return loop.call_later(self.interval, lambda: callback(self.now()))

    def cancel(self, handle: asyncio.TimerHandle | None) -> None:
        # TimerHandle.cancel() is already a no-op after firing or a prior cancel
        if handle is not None:
            handle.cancel()


class ManualFrameScheduler:
    """
    Frame scheduler driven by an explicit virtual clock.

    Nothing happens until advance() is called. Each advance moves the clock
    forward and fires the pending callback, if any, with the new timestamp.

    Parameters
    ----------
    start_ms : float
        Initial clock reading [ms]

    Examples
    --------
    >>> sched = ManualFrameScheduler()
    >>> controller = SimulationController(scheduler=sched)
    >>> controller.start()
    >>> sched.advance(100.0)  # one 0.1 s frame
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)
        self._pending: tuple[int, FrameCallback] | None = None
        self._next_id = 0

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> bool:
        """True if a frame callback is waiting."""
        return self._pending is not None

    def request(self, callback: FrameCallback) -> int:
        """
        Schedule callback for the next advance().

        Raises
        ------
        RuntimeError
            If another callback is already pending
        """
        if self._pending is not None:
            raise RuntimeError("A frame is already pending; only one tick may be in flight.")
        self._next_id += 1
        self._pending = (self._next_id, callback)
        return self._next_id

    def cancel(self, handle: int | None) -> None:
        if handle is not None and self._pending is not None and self._pending[0] == handle:
            self._pending = None

    def advance(self, ms: float) -> bool:
        """
        Move the clock forward and fire the pending frame.

        Parameters
        ----------
        ms : float
            Elapsed wall-clock time [ms], >= 0

        Returns
        -------
        bool
            True if a callback fired
        """
        if ms < 0:
            raise ValueError(f"Cannot move the clock backwards, got {ms} ms")
        self._now += float(ms)
        if self._pending is None:
            return False
        _, callback = self._pending
        self._pending = None
        callback(self._now)
        return True

    def idle(self, ms: float) -> None:
        """Let wall-clock time pass without firing any frame."""
        if ms < 0:
            raise ValueError(f"Cannot move the clock backwards, got {ms} ms")
        self._now += float(ms)
