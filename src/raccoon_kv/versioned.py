"""Result types for versioned reads.

A read against the store always yields a version token (the HTTP ``etag``)
alongside the payload. Versions are opaque strings compared only for
equality.
"""

from dataclasses import dataclass
from enum import Enum


class FetchOutcome(str, Enum):
    """What a conditional read observed."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    NOT_MODIFIED = "not_modified"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a single conditional read.

    ``payload`` is empty unless the outcome is FOUND. For NOT_MODIFIED the
    version is the one the caller already knew; for NOT_FOUND it is the
    token the store assigned to the absence.
    """

    outcome: FetchOutcome
    payload: bytes
    version: str

    @property
    def found(self) -> bool:
        return self.outcome is FetchOutcome.FOUND

    def __str__(self) -> str:
        return f"{self.outcome.value}@{self.version} ({len(self.payload)} bytes)"
