"""HTTP plumbing shared by reads, writes and watches.

httpx exceptions are translated into the raccoon-kv hierarchy here and
nowhere else, so callers branch on ``RequestTimeoutError`` versus
``TransportError`` instead of on httpx types.
"""

import logging
from contextlib import contextmanager
from urllib.parse import quote

import httpx

from .config import ClientConfig
from .errors import RequestTimeoutError, TransportError

logger = logging.getLogger(__name__)


def validate_key(key: str) -> None:
    """Reject keys that cannot name a value in the store."""
    if not isinstance(key, str) or not key:
        raise ValueError(f"key must be a non-empty string, got {key!r}")


def key_url(base_url: str, key: str) -> str:
    """Build the resource URL for a key.

    The key is percent-encoded as a single path segment.

    Raises:
        ValueError: If key is empty
    """
    validate_key(key)
    return f"{base_url}/kv/{quote(key, safe='')}"


def build_http_client(config: ClientConfig) -> httpx.Client:
    """Create the pooled httpx client used by one KVClient.

    httpx.Client is safe to share between threads, so every read, write
    and watch of a KVClient goes through this single pool.
    """
    return httpx.Client(timeout=httpx.Timeout(config.request_timeout))


@contextmanager
def translate_errors(method: str, url: str):
    """Re-raise httpx request failures as raccoon-kv errors.

    Only a read timeout becomes RequestTimeoutError: that is how an expired
    long-poll surfaces. Connect, write and pool timeouts mean the store is
    unreachable and are plain TransportErrors.
    """
    try:
        yield
    except httpx.ReadTimeout as e:
        logger.debug(f"{method} {url} timed out: {e!r}")
        raise RequestTimeoutError(f"{method} {url} timed out") from e
    except httpx.RequestError as e:
        logger.debug(f"{method} {url} failed: {e!r}")
        raise TransportError(f"{method} {url} failed: {e}") from e
