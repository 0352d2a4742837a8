"""Long-poll watch loop with capped exponential backoff.

The loop turns repeated conditional reads into a change stream:

1. Fetch the key with the last seen version and a long-poll hint
2. If the store reports a new version, record it and call the callback
3. If the long-poll simply expired, poll again straight away
4. On any other failure, wait out the backoff (doubling, capped) and retry

It only ends when its CancelScope is cancelled, either explicitly or by
deadline. Store failures are logged, never raised.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from .cancel import CancelScope
from .errors import KVError, RequestTimeoutError
from .versioned import FetchResult

logger = logging.getLogger(__name__)

Callback = Callable[[bytes], None]
FetchFn = Callable[[str, str, float | None], FetchResult]


@dataclass
class WatchSession:
    """State owned by one watch loop invocation."""

    key: str
    backoff_seconds: int
    last_version: str = ""
    polls: int = 0
    changes: int = 0
    failures: int = 0


def next_backoff(current: int, ceiling: int) -> int:
    """Double the backoff, capped at ``ceiling``."""
    return min(current * 2, ceiling)


def run_watch(
    fetch: FetchFn,
    key: str,
    callback: Callback,
    cancel: CancelScope,
    request_timeout: float,
    initial_backoff: int = 1,
    max_backoff: int = 60,
) -> WatchSession:
    """Poll ``key`` until ``cancel`` fires, calling ``callback`` on each new version.

    Args:
        fetch: Conditional read taking (key, last_version, timeout)
        key: Key to watch
        callback: Called synchronously with the payload of each new version
        cancel: Scope whose cancellation ends the loop
        request_timeout: Per-request timeout for each long-poll
        initial_backoff: First backoff delay in seconds; also the value
            restored after a successful poll
        max_backoff: Backoff ceiling in seconds

    Returns:
        The session state at the time the loop stopped.
    """
    session = WatchSession(key=key, backoff_seconds=initial_backoff)
    logger.info(f"Watching {key}")

    while not cancel.cancelled:
        timeout = request_timeout
        remaining = cancel.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        session.polls += 1
        try:
            result = fetch(key, session.last_version, timeout)
        except RequestTimeoutError:
            if cancel.cancelled:
                break
            # Long-poll ran its course with no change
            logger.debug(f"Long-poll on {key} expired, polling again")
            continue
        except KVError as e:
            if cancel.cancelled:
                break
            session.failures += 1
            logger.warning(
                f"Failed to query kv store for {key}, backing off "
                f"{session.backoff_seconds}s: {e}"
            )
            if cancel.wait(session.backoff_seconds):
                break
            session.backoff_seconds = next_backoff(session.backoff_seconds, max_backoff)
            continue

        session.backoff_seconds = initial_backoff
        if result.version != session.last_version:
            session.last_version = result.version
            session.changes += 1
            logger.debug(f"{key} changed: {result}")
            callback(result.payload)

    logger.info(f"Stopped watching {key} after {session.polls} polls")
    return session


class Watcher:
    """Handle for a watch loop running on a background thread."""

    def __init__(self, target: Callable[[CancelScope], WatchSession], key: str,
                 cancel: CancelScope | None = None):
        self.key = key
        self.cancel_scope = cancel or CancelScope()
        self.session: WatchSession | None = None
        self.error: Exception | None = None
        self._target = target
        self._thread = threading.Thread(
            target=self._run, name=f"raccoon-kv-watch:{key}", daemon=True
        )

    def start(self) -> "Watcher":
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self.session = self._target(self.cancel_scope)
        except Exception as e:
            # Only a failing callback gets here; keep it for the owner
            self.error = e
            logger.error(f"Watch on {self.key} stopped by callback error: {e!r}")

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def stop(self, timeout: float | None = None) -> bool:
        """Cancel the loop and wait for the thread to exit.

        Returns:
            True if the thread has exited.
        """
        self.cancel_scope.cancel()
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def __enter__(self) -> "Watcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
