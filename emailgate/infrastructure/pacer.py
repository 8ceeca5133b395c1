"""
RequestPacer - spaces out dispatches to the verification oracle.

The first dispatch goes out immediately; every following one waits until
`min_interval` seconds have passed since the previous dispatch, and until any
rate-limit penalty has expired. The lock makes the pacer safe to share
between concurrent workers.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RequestPacer:
    def __init__(
        self,
        min_interval: float = 1.1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_dispatch: Optional[float] = None
        self._penalty_until = 0.0

    def penalize(self, seconds: float) -> None:
        """Hold back every dispatch for `seconds` (used after a 429)."""
        if seconds <= 0:
            return
        until = self._clock() + seconds
        if until > self._penalty_until:
            self._penalty_until = until
            logger.warning(f"[Pacer] Rate limit penalty active for {seconds:.1f}s")

    async def wait_turn(self, cancel_event: Optional[asyncio.Event] = None) -> bool:
        """
        Block until the caller may dispatch.
        Returns False, without consuming a turn, if `cancel_event` fires first.
        """
        async with self._lock:
            if cancel_event is not None and cancel_event.is_set():
                return False

            delay = self._delay()
            if delay > 0:
                logger.debug(f"[Pacer] Rate limiting: waiting {delay:.2f}s")
                if not await self._wait(delay, cancel_event):
                    return False

            self._last_dispatch = self._clock()
            return True

    def _delay(self) -> float:
        now = self._clock()
        delay = self._penalty_until - now
        if self._last_dispatch is not None:
            delay = max(delay, self._last_dispatch + self.min_interval - now)
        return delay

    async def _wait(self, delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
        if cancel_event is None:
            await self._sleep(delay)
            return True

        sleeper = asyncio.ensure_future(self._sleep(delay))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (sleeper, waiter):
                if not task.done():
                    task.cancel()
        return waiter not in done
