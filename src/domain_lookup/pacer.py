"""
Request pacer for the domain lookup system.

The lookup API is rate limited, so consecutive availability queries are
separated by a fixed interval measured from the completion of one query
to the issue of the next. The wait is suspendable: a cancelled run stops
waiting immediately.
"""

import time
from dataclasses import dataclass
from typing import Optional

from .cancellation import CancellationToken


@dataclass
class PaceStatus:
    """Result of a pacing wait."""

    proceed: bool  # False if the wait was cut short by cancellation
    waited_seconds: float


class Pacer:
    """
    Fixed-interval pacer.

    Ensures:
    - The gap between record_completion() and the end of the next wait()
      is never shorter than the interval (measured on time.monotonic)
    - Cancellation during the wait returns immediately with proceed=False
    """

    def __init__(self, interval_seconds: float) -> None:
        """
        Initialize the pacer.

        Args:
            interval_seconds: Minimum gap between query completion and next issue
        """
        if interval_seconds < 0:
            raise ValueError(f"Pacing interval must be non-negative: {interval_seconds}")
        self._interval = interval_seconds
        self._last_completion: Optional[float] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def last_completion(self) -> Optional[float]:
        return self._last_completion

    def record_completion(self) -> None:
        """Record that a query just completed."""
        self._last_completion = time.monotonic()

    def remaining(self) -> float:
        """Seconds left before the next query may be issued."""
        if self._last_completion is None:
            return 0.0
        elapsed = time.monotonic() - self._last_completion
        return max(0.0, self._interval - elapsed)

    async def wait(self, token: CancellationToken) -> PaceStatus:
        """
        Wait until the next query may be issued.

        Args:
            token: Cancellation token of the run being paced

        Returns:
            PaceStatus; proceed is False if the token was cancelled
        """
        start = time.monotonic()

        if token.cancelled:
            return PaceStatus(proceed=False, waited_seconds=0.0)

        # Loop on the monotonic clock; the event loop timer may fire a hair early
        remaining = self.remaining()
        while remaining > 0:
            if await token.wait(remaining):
                return PaceStatus(proceed=False, waited_seconds=time.monotonic() - start)
            remaining = self.remaining()

        return PaceStatus(
            proceed=not token.cancelled,
            waited_seconds=time.monotonic() - start,
        )
