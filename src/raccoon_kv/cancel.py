"""Cooperative cancellation for blocking loops."""

import threading
import time


class CancelScope:
    """Cancellation signal with an optional deadline.

    A scope is cancelled once ``cancel()`` has been called or its deadline
    (a ``time.monotonic()`` value) has passed. Any thread may cancel it.
    """

    def __init__(self, deadline: float | None = None):
        self._event = threading.Event()
        self.deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> "CancelScope":
        """Create a scope that cancels itself after ``seconds``."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None for an unbounded scope."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait(self, seconds: float) -> bool:
        """Block for up to ``seconds`` or until cancelled.

        Returns:
            True if the scope was cancelled or its deadline reached.
        """
        remaining = self.remaining()
        reaches_deadline = remaining is not None and remaining <= seconds
        if reaches_deadline:
            seconds = remaining
        self._event.wait(seconds)
        return reaches_deadline or self.cancelled
