"""Time sources for stabilization waits and duration measurement."""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import List


class Clock(ABC):
    """Monotonic time plus an awaitable sleep."""

    @abstractmethod
    def monotonic(self) -> float:
        pass

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        pass


class AsyncioClock(Clock):
    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class VirtualClock(Clock):
    """
    Clock that fast-forwards instead of waiting.

    Every ``sleep`` advances virtual time immediately and is recorded in
    ``sleeps`` so callers can assert on the waits that would have happened.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)
        # Yield so sleeping still behaves like a suspension point
        await asyncio.sleep(0)
