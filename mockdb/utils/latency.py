"""
Injectable delay abstraction for simulated network latency.

Stores and the sync service never call ``asyncio.sleep`` directly; they await
a ``Delay`` so tests can swap in ``no_delay`` or a ``GatedDelay`` and run
without real waits.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List

Delay = Callable[[float], Awaitable[None]]


async def asyncio_delay(seconds: float) -> None:
    """Production delay: cooperative sleep on the running event loop."""
    await asyncio.sleep(seconds)


async def no_delay(seconds: float) -> None:
    """Yield to the loop once without waiting."""
    del seconds
    await asyncio.sleep(0)


class GatedDelay:
    """
    Delay whose waiters resume only when released.

    Each awaited call parks on its own gate, in call order, which lets a test
    interleave a superseding load with one that is still in flight.
    """

    def __init__(self) -> None:
        self._gates: List[asyncio.Event] = []
        self.requested: List[float] = []

    async def __call__(self, seconds: float) -> None:
        gate = asyncio.Event()
        self._gates.append(gate)
        self.requested.append(seconds)
        await gate.wait()

    @property
    def pending(self) -> int:
        return sum(1 for gate in self._gates if not gate.is_set())

    def release(self, index: int) -> None:
        self._gates[index].set()

    def release_all(self) -> None:
        for gate in self._gates:
            gate.set()


__all__ = ["Delay", "asyncio_delay", "no_delay", "GatedDelay"]
