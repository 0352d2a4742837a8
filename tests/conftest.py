"""Test configuration and shared fixtures for raccoon-kv tests."""

import httpx
import pytest

from raccoon_kv import CancelScope, KVClient
from raccoon_kv.errors import RequestTimeoutError

BASE_URL = "http://kv.test"


class ScriptedStore:
    """Fake store that answers requests from a queue of scripted responses.

    Each script entry is an ``httpx.Response`` or an exception to raise.
    Once the script runs out, ``on_exhausted`` is called and its result (or
    raised exception) is used. Every request is recorded.
    """

    def __init__(self, *responses, on_exhausted=None):
        self.script = list(responses)
        self.requests: list[httpx.Request] = []
        self.on_exhausted = on_exhausted

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.script:
            item = self.script.pop(0)
        elif self.on_exhausted is not None:
            item = self.on_exhausted(request)
        else:
            raise AssertionError(f"Unscripted request: {request.method} {request.url}")
        if isinstance(item, BaseException):
            raise item
        return item

    def add(self, *responses) -> None:
        self.script.extend(responses)


class RecordingScope(CancelScope):
    """CancelScope that records backoff waits instead of sleeping.

    Cancels itself once ``cancel_after_waits`` waits have been requested.
    """

    def __init__(self, cancel_after_waits: int | None = None):
        super().__init__()
        self.waits: list[float] = []
        self.cancel_after_waits = cancel_after_waits

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        if self.cancel_after_waits is not None and len(self.waits) >= self.cancel_after_waits:
            self.cancel()
        return self.cancelled


def kv_response(status: int, body: bytes = b"", etag: str | None = None) -> httpx.Response:
    """Build a store response."""
    headers = {"etag": etag} if etag is not None else {}
    return httpx.Response(status, content=body, headers=headers)


def long_poll_timeout(request: httpx.Request) -> httpx.ReadTimeout:
    return httpx.ReadTimeout("long-poll elapsed", request=request)


@pytest.fixture
def store():
    """Provide an empty scripted store for each test."""
    return ScriptedStore()


@pytest.fixture
def kv(store):
    """KVClient wired to the scripted store through httpx.MockTransport."""
    http = httpx.Client(transport=httpx.MockTransport(store))
    client = KVClient(BASE_URL, http_client=http)
    yield client
    client.close()
    http.close()


@pytest.fixture
def cancel_when_exhausted(store):
    """Scope cancelled once the scripted store runs out of responses.

    The exhausted store then answers with a long-poll timeout, which the
    watch loop sees after the scope is already cancelled.
    """
    scope = RecordingScope()

    def finish(request):
        scope.cancel()
        return long_poll_timeout(request)

    store.on_exhausted = finish
    return scope


class ScriptedFetch:
    """Fetch function for run_watch driven by a list of results and errors."""

    def __init__(self, scope: CancelScope, *items):
        self.scope = scope
        self.items = list(items)
        self.calls: list[tuple[str, str, float | None]] = []

    def __call__(self, key, last_version, timeout):
        self.calls.append((key, last_version, timeout))
        if not self.items:
            self.scope.cancel()
            raise RequestTimeoutError("script exhausted")
        item = self.items.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item
