import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar
from uuid import UUID

from ...config import ChronicleSettings
from ...domain import Aggregate, AggregateNotFoundError, ConcurrencyError, Event
from ..events import EventStore

A = TypeVar("A", bound=Aggregate)

LOGGER = logging.getLogger(__name__)


class AggregateRepository(Generic[A]):
    """A mechanism for loading and saving aggregates in a consistent way.

    Loading reads the aggregate's stream and replays it; saving appends the
    aggregate's uncommitted events with the version the stream was at before
    those events were emitted as the expected version.

    Concurrency conflicts are never retried here. A ConcurrencyError from
    `save` means another writer got there first; the caller reloads and
    decides whether to re-run its command.
    """

    __slots__ = ("aggregate_type", "event_store", "settings")

    def __init__(
        self,
        aggregate_type: type[A],
        event_store: EventStore,
        settings: ChronicleSettings | None = None,
    ):
        self.aggregate_type = aggregate_type
        self.event_store = event_store
        self.settings = settings or ChronicleSettings()

    async def load(self, aggregate_id: UUID) -> A | None:
        """Rebuild an aggregate from its full stream.

        Returns:
            The replayed aggregate, or None if the stream has no events.
        """
        events = await self.event_store.read_stream(aggregate_id)
        return self._replay(aggregate_id, events)

    async def load_at(self, aggregate_id: UUID, version: int) -> A | None:
        """Rebuild an aggregate as it was right after `version` was applied.

        Returns:
            The replayed aggregate, or None if the stream has no events at
            or below `version`.
        """
        events = await self.event_store.read_stream(aggregate_id, max_version=version)
        return self._replay(aggregate_id, events)

    async def save(self, aggregate: A) -> None:
        """Append the aggregate's uncommitted events to its stream.

        Raises:
            ConcurrencyError: If the stream moved since the aggregate was
                loaded. The uncommitted events are kept.
        """
        if not (uncommitted_events := aggregate.get_uncommitted_events()):
            return

        expected_version = aggregate.version - len(uncommitted_events)
        await self.event_store.append(aggregate.id, uncommitted_events, expected_version)
        aggregate.clear_uncommitted_events()

    @asynccontextmanager
    async def acquire(self, aggregate_id: UUID) -> AsyncIterator[A]:
        """Load an aggregate, hand it to the caller and save it afterwards.

        Raises:
            AggregateNotFoundError: If the aggregate has no events.
            ConcurrencyError: If another writer appended in the meantime.
        """
        aggregate = await self.load(aggregate_id)
        if aggregate is None:
            raise AggregateNotFoundError(aggregate_id)
        original_version = aggregate.version

        try:
            yield aggregate
        except Exception:
            # On error, clear uncommitted events to prevent partial state from being saved
            aggregate.clear_uncommitted_events()
            raise

        if aggregate.changed_since(original_version):
            try:
                await self.save(aggregate)
            except ConcurrencyError:
                LOGGER.info(
                    "Aggregate changed concurrently",
                    extra={
                        "aggregate_type": self.aggregate_type.__name__,
                        "aggregate_id": str(aggregate_id),
                    },
                )
                raise

    def _replay(self, aggregate_id: UUID, events: list[Event[Any]]) -> A | None:
        if not events:
            return None

        aggregate = self.aggregate_type.replay(
            events, aggregate_id, strict=self.settings.strict_replay
        )
        LOGGER.debug(
            "Replayed aggregate",
            extra={
                "aggregate_type": self.aggregate_type.__name__,
                "aggregate_id": str(aggregate_id),
                "event_count": len(events),
                "version": aggregate.version,
            },
        )
        return aggregate
