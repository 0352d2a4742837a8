"""Error types for raccoon-kv."""


class KVError(Exception):
    """Base exception for raccoon-kv errors."""
    pass


class ConfigError(KVError):
    """Configuration error."""
    pass


class TransportError(KVError):
    """Connection-level failure talking to the store.

    The underlying httpx exception is available as ``__cause__``.
    """
    pass


class RequestTimeoutError(TransportError):
    """The per-request timeout elapsed before the store answered."""
    pass


class ProtocolError(KVError):
    """The store answered with a response that breaks the wire protocol."""
    pass


class UnexpectedStatusError(KVError):
    """The store answered with a status outside the expected set."""

    def __init__(self, status_code: int, method: str = "", url: str = ""):
        self.status_code = status_code
        self.method = method
        self.url = url
        target = f" for {method} {url}" if method else ""
        super().__init__(f"unexpected status code {status_code}{target}")
