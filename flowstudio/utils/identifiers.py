"""ID generation and timestamp utilities."""

import itertools
import uuid
from datetime import datetime, timezone
from typing import Protocol


class IdProvider(Protocol):
    """Callable that hands out a fresh id for a node or edge."""

    def __call__(self, prefix: str) -> str:
        ...


def uuid_id_provider(prefix: str) -> str:
    """Generate a collision-free id such as ``prompt-3f2a...`` (UUID4 hex)."""
    return f"{prefix}-{uuid.uuid4().hex}"


class CounterIdProvider:
    """Monotonic id provider, deterministic within one process.

    Useful for tests and for bulk inserts where ids must be predictable.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"


def generate_flow_id() -> str:
    """Generate a unique flow ID (UUID4)."""
    return str(uuid.uuid4())


def generate_event_id() -> str:
    """Generate a unique event ID (UUID4)."""
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
