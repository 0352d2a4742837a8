"""HTTP client for a raccoon-kv store.

Reads use the ``etag`` response header as the value's version and send
``if-none-match`` when the caller already knows one, so an unchanged key
costs a bodiless 304. Passing a ``watch`` hint turns the read into a
long-poll that the store may hold open until the key changes.
"""

import logging

import httpx

from .cancel import CancelScope
from .config import ClientConfig
from .errors import ProtocolError, UnexpectedStatusError
from .transport import build_http_client, key_url, translate_errors, validate_key
from .versioned import FetchOutcome, FetchResult
from .watch import Callback, Watcher, WatchSession, run_watch

logger = logging.getLogger(__name__)


class KVClient:
    """Client for one raccoon-kv store.

    Safe to share between threads: calls hold no per-call state on the
    client, and the underlying httpx connection pool is thread-safe.

    Examples:
        >>> with KVClient("http://localhost:8080") as kv:
        ...     kv.put("greeting", b"hello")
        ...     payload, version = kv.get("greeting")
    """

    def __init__(self, config: ClientConfig | str, http_client: httpx.Client | None = None):
        """Initialize client.

        Args:
            config: Base URL of the store, or a full ClientConfig
            http_client: Optional pre-built httpx client; the caller keeps
                ownership and must close it
        """
        if isinstance(config, str):
            config = ClientConfig(base_url=config)
        self.config = config
        self._owns_http = http_client is None
        self._http = http_client or build_http_client(config)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "KVClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def fetch(
        self,
        key: str,
        last_known_version: str = "",
        watch_seconds: int | None = None,
        timeout: float | None = None,
    ) -> FetchResult:
        """Issue one conditional read.

        Args:
            key: Key to read
            last_known_version: Version the caller already has, or "" for none
            watch_seconds: Long-poll hint; the store may hold the request
                this long waiting for a change
            timeout: Per-request timeout; defaults to config.request_timeout

        Returns:
            FetchResult describing what the store reported

        Raises:
            ProtocolError: Response carried no etag
            UnexpectedStatusError: Status other than 200, 304 or 404
            RequestTimeoutError: No response within the timeout (read timeout)
            TransportError: Any other request failure, including connect
                timeouts, undecodable bodies and redirect loops
        """
        url = key_url(self.config.base_url, key)
        params = {"watch": str(watch_seconds)} if watch_seconds is not None else None
        headers = {"if-none-match": last_known_version} if last_known_version else None
        if timeout is None:
            timeout = self.config.request_timeout

        with translate_errors("GET", url):
            response = self._http.get(url, params=params, headers=headers, timeout=timeout)
            # Drain the body even for statuses that ignore it
            body = response.read()

        logger.debug(f"GET {url} -> {response.status_code}")

        version = response.headers.get("etag", "")
        if not version:
            raise ProtocolError(f"missing version on GET {url}")

        if response.status_code == httpx.codes.NOT_FOUND:
            return FetchResult(FetchOutcome.NOT_FOUND, b"", version)
        if response.status_code == httpx.codes.NOT_MODIFIED:
            return FetchResult(FetchOutcome.NOT_MODIFIED, b"", last_known_version)
        if response.status_code == httpx.codes.OK:
            return FetchResult(FetchOutcome.FOUND, body, version)

        raise UnexpectedStatusError(response.status_code, "GET", url)

    def get(self, key: str) -> tuple[bytes, str]:
        """Read the current value of a key.

        Returns:
            Tuple of (payload, version). A missing key gives an empty
            payload and the store's version for the absence.
        """
        result = self.fetch(key)
        return result.payload, result.version

    def put(self, key: str, payload: bytes) -> None:
        """Unconditionally overwrite a key's value.

        Single attempt; retrying is up to the caller.

        Raises:
            UnexpectedStatusError: Status other than 204
            TransportError: Connection failure or timeout
        """
        url = key_url(self.config.base_url, key)
        with translate_errors("PUT", url):
            response = self._http.put(url, content=payload)
            response.read()

        logger.debug(f"PUT {url} ({len(payload)} bytes) -> {response.status_code}")

        if response.status_code != httpx.codes.NO_CONTENT:
            raise UnexpectedStatusError(response.status_code, "PUT", url)

    def watch(self, key: str, callback: Callback, cancel: CancelScope | None = None) -> WatchSession:
        """Call ``callback`` with the payload every time ``key`` gets a new version.

        Blocks until ``cancel`` is cancelled (explicitly or by its deadline).
        The first successful poll always reports the current value. Store
        failures are logged and retried with backoff, never raised.
        Exceptions raised by ``callback`` propagate.

        Args:
            key: Key to watch
            callback: Called on this thread with each new payload; an absent
                key is reported as b""
            cancel: Cancellation scope; an unbounded one is created if omitted

        Returns:
            Final WatchSession state
        """
        validate_key(key)
        if cancel is None:
            cancel = CancelScope()

        def long_poll(k: str, last_version: str, timeout: float | None) -> FetchResult:
            return self.fetch(
                k, last_version, watch_seconds=self.config.watch_timeout, timeout=timeout
            )

        return run_watch(
            long_poll,
            key,
            callback,
            cancel,
            request_timeout=self.config.watch_request_timeout,
            initial_backoff=self.config.initial_backoff_seconds,
            max_backoff=self.config.max_backoff_seconds,
        )

    def watch_in_thread(
        self, key: str, callback: Callback, cancel: CancelScope | None = None
    ) -> Watcher:
        """Run ``watch`` on a daemon thread.

        Returns:
            Started Watcher; call ``stop()`` to cancel and join it
        """
        validate_key(key)
        watcher = Watcher(lambda scope: self.watch(key, callback, scope), key, cancel)
        return watcher.start()
