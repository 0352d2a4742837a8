"""raccoon-kv - HTTP client for a versioned key-value store with long-poll watches."""

from ._version import __version__
from .cancel import CancelScope
from .client import KVClient
from .config import ClientConfig
from .errors import (
    ConfigError,
    KVError,
    ProtocolError,
    RequestTimeoutError,
    TransportError,
    UnexpectedStatusError,
)
from .logging_setup import configure_logging
from .versioned import FetchOutcome, FetchResult
from .watch import Watcher, WatchSession

__all__ = [
    "KVClient",
    "ClientConfig",
    "CancelScope",
    "FetchOutcome",
    "FetchResult",
    "Watcher",
    "WatchSession",
    "KVError",
    "ConfigError",
    "TransportError",
    "RequestTimeoutError",
    "ProtocolError",
    "UnexpectedStatusError",
    "configure_logging",
    "__version__",
]
