"""
Single-shot asyncio primitives used by the flow controller.

CompletionSignal resolves exactly once and then keeps returning the
same value. CancellationScope is a skip handle that lives for one
dialogue node and is never reused.

Both are built on asyncio.Event, so they can be created before a loop
is running (e.g. from synchronous input handlers or tests).
"""

from __future__ import annotations

import asyncio
from typing import Any, Generic, Optional, TypeVar

T = TypeVar('T')


class CompletionSignal(Generic[T]):
    """
    Resolve-once completion signal.

    Usage:
        signal = CompletionSignal()
        signal.set_result(3)      # True
        signal.set_result(4)      # False, ignored
        await signal.wait()       # 3
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._result: Optional[T] = None

    @property
    def done(self) -> bool:
        return self._event.is_set()

    def set_result(self, value: T) -> bool:
        """Settle the signal. Returns False if it was already settled."""
        if self._event.is_set():
            return False
        self._result = value
        self._event.set()
        return True

    def result(self) -> Optional[T]:
        """The settled value, or None while pending."""
        return self._result

    async def wait(self) -> T:
        await self._event.wait()
        return self._result


class CancellationScope:
    """
    Cancellation handle scoped to a single reveal step.

    Closing the scope detaches it: cancel() on a closed scope does
    nothing, so a late skip press can never reach a later node.

    Usage:
        with CancellationScope() as scope:
            interrupted = await scope.wait(0.05)
    """

    def __init__(self):
        self._cancelled = asyncio.Event()
        self._closed = False

    def __enter__(self) -> CancellationScope:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def closed(self) -> bool:
        return self._closed

    def cancel(self) -> bool:
        """Request cancellation. Returns True if this call had any effect."""
        if self._closed or self._cancelled.is_set():
            return False
        self._cancelled.set()
        return True

    def close(self) -> None:
        self._closed = True

    async def wait(self, delay: float) -> bool:
        """
        Sleep for `delay` seconds unless cancelled first.

        Returns:
            True if the scope was cancelled before the delay elapsed
        """
        if self._cancelled.is_set():
            return True
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True
