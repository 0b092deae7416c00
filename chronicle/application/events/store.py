"""Event store interfaces and implementations for event persistence."""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from ...domain import ConcurrencyError, Event, InvariantViolation

LOGGER = logging.getLogger(__name__)


class EventStore(ABC):
    """Abstract interface for event persistence.

    EventStore provides the foundation for event sourcing by persisting
    events as an immutable, append-only log. Each aggregate's events form
    a stream that can be replayed to reconstruct aggregate state.

    Key responsibilities:
    - **Ordering**: Stream events are contiguous from version 1, and every
      persisted event gets a store-wide global position
    - **Concurrency Control**: Optimistic locking via expected_version
    - **Atomicity**: An append stores all of its events or none of them
    - **Immutability**: Events cannot be modified after storage

    A durable implementation (file, table) must honor the same contract.
    """

    @abstractmethod
    async def append(
        self,
        stream_id: UUID,
        events: Sequence[Event[Any]],
        expected_version: int,
    ) -> list[Event[Any]]:
        """Persist events to a stream with optimistic concurrency control.

        Args:
            stream_id: The stream (aggregate id) being appended to.
            events: Events to persist, in sequence order. Their sequence
                numbers must run from expected_version + 1 without gaps.
            expected_version: The version the stream is expected to be at
                before these events are appended.

        Returns:
            The stored events, carrying their global positions.

        Raises:
            ConcurrencyError: If expected_version doesn't match the current
                version of the stream. Nothing is appended.
            InvariantViolation: If the events don't belong to the stream or
                their sequence numbers are not contiguous. Nothing is appended.
        """
        ...

    @abstractmethod
    async def read_stream(
        self,
        stream_id: UUID,
        min_version: int = 1,
        max_version: int | None = None,
    ) -> list[Event[Any]]:
        """Load the events of one stream.

        Args:
            stream_id: The stream whose events should be loaded.
            min_version: Lowest sequence number to return (inclusive).
            max_version: Highest sequence number to return (inclusive).
                None returns everything up to the current version.

        Returns:
            Events in ascending sequence order. An unknown stream yields an
            empty list.
        """
        ...

    @abstractmethod
    async def read_all(self) -> list[Event[Any]]:
        """Load every event from every stream in global order.

        Returns:
            A consistent snapshot of all events ordered by global position.
        """
        ...

    @abstractmethod
    async def stream_version(self, stream_id: UUID) -> int:
        """Get the current version of a stream (0 if it has no events)."""
        ...


class InMemoryEventStore(EventStore):
    """Dictionary-based in-memory event store.

    Stores events in a dictionary keyed by stream id. Each stream's events
    are kept in a list ordered by sequence number.

    All access to the stream map goes through a single `threading.Lock`.
    The guarded sections never await, so the lock serializes appends coming
    from concurrent asyncio tasks as well as from separate threads running
    their own event loops. Two writers racing on the same expected version
    therefore cannot both succeed: the second one sees the first one's
    events and fails with ConcurrencyError.

    Suitable for tests, development and single-process deployments. Data
    does not survive a restart.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory event store."""
        self._streams: dict[UUID, list[Event[Any]]] = {}
        self._next_position = 1
        self._lock = threading.Lock()

    async def append(
        self,
        stream_id: UUID,
        events: Sequence[Event[Any]],
        expected_version: int,
    ) -> list[Event[Any]]:
        """Append events to a stream after checking its version.

        Args:
            stream_id: The stream being appended to.
            events: Events to store, typically an aggregate's uncommitted events.
            expected_version: Expected current version - must match actual version.

        Returns:
            Copies of the events stamped with their global positions.

        Raises:
            ConcurrencyError: If expected_version doesn't match the current version.
            InvariantViolation: If the events break stream contiguity.
        """
        if not events:
            return []

        with self._lock:
            current_version = self._current_version(stream_id)
            if current_version != expected_version:
                LOGGER.warning(
                    "Rejected append on version mismatch",
                    extra={
                        "stream_id": str(stream_id),
                        "expected_version": expected_version,
                        "actual_version": current_version,
                    },
                )
                raise ConcurrencyError(stream_id, expected_version, current_version)

            _check_contiguous(stream_id, events, expected_version)

            stored = [
                event.model_copy(update={"global_position": self._next_position + offset})
                for offset, event in enumerate(events)
            ]
            self._streams.setdefault(stream_id, []).extend(stored)
            self._next_position += len(stored)

        for event in stored:
            LOGGER.debug(
                "Stored event",
                extra={
                    "stream_id": str(stream_id),
                    "event_type": event.event_type,
                    "sequence_number": event.sequence_number,
                    "global_position": event.global_position,
                },
            )
        return stored

    async def read_stream(
        self,
        stream_id: UUID,
        min_version: int = 1,
        max_version: int | None = None,
    ) -> list[Event[Any]]:
        with self._lock:
            stream = list(self._streams.get(stream_id, ()))
        return [
            event
            for event in stream
            if event.sequence_number >= min_version
            and (max_version is None or event.sequence_number <= max_version)
        ]

    async def read_all(self) -> list[Event[Any]]:
        with self._lock:
            all_events = [event for stream in self._streams.values() for event in stream]
        all_events.sort(key=lambda e: e.global_position or 0)
        return all_events

    async def stream_version(self, stream_id: UUID) -> int:
        with self._lock:
            return self._current_version(stream_id)

    async def stream_ids(self) -> list[UUID]:
        """Get the ids of all streams that have at least one event."""
        with self._lock:
            return list(self._streams)

    async def count_events(self) -> int:
        """Get the total number of events across all streams."""
        with self._lock:
            return sum(len(stream) for stream in self._streams.values())

    def _current_version(self, stream_id: UUID) -> int:
        stream = self._streams.get(stream_id)
        return stream[-1].sequence_number if stream else 0


def _check_contiguous(
    stream_id: UUID, events: Sequence[Event[Any]], expected_version: int
) -> None:
    previous = expected_version
    for event in events:
        if event.aggregate_id != stream_id:
            raise InvariantViolation(
                f"Event {event.id} belongs to stream {event.aggregate_id}, not {stream_id}"
            )
        if event.sequence_number != previous + 1:
            raise InvariantViolation(
                f"Event {event.id} on stream {stream_id} has sequence number "
                f"{event.sequence_number}, expected {previous + 1}"
            )
        previous = event.sequence_number
