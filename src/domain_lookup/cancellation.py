"""
Cooperative cancellation for search runs.

A CancellationToken is a one-way flag: once set it stays set. The run loop
checks it at fixed checkpoints and can also sleep on it, waking up early
when cancellation is requested.
"""

import asyncio


class CancellationToken:
    """One-shot cancellation flag backed by an asyncio.Event."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """
        Request cancellation.

        Returns:
            True if this call set the flag, False if it was already set
        """
        if self._event.is_set():
            return False
        self._event.set()
        return True

    async def wait(self, timeout: float) -> bool:
        """
        Sleep for up to `timeout` seconds, waking early on cancellation.

        Returns:
            True if the token was cancelled, False if the timeout elapsed
        """
        if self._event.is_set():
            return True
        if timeout <= 0:
            return False
        try:
            await asyncio.wait_for(self._event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True
