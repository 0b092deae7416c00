from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, Field
from typing_extensions import Self

from ..routing import setup_event_applying
from .event import Event, utc_now
from .exceptions import UnknownEventError

if TYPE_CHECKING:
    from ..routing import MessageRouter


T = TypeVar("T", bound=BaseModel)


class Aggregate(BaseModel):
    """Base class for all aggregates in the event sourcing system.

    Aggregates are the core domain objects that maintain consistency boundaries
    and emit domain events when their state changes. Each aggregate has a unique
    identifier and maintains its version through event sequencing.

    Command methods validate business rules and call `emit()`. Event
    application is the only way state changes: `emit()` routes the new
    payload through the same `@applies_event` methods that `replay()` uses,
    so an aggregate rebuilt from its history ends up in the same state as
    the one that produced it.

    Examples:
        Create a simple counter aggregate:

        >>> from chronicle.routing import applies_event
        >>>
        >>> class Incremented(BaseModel):
        ...     by: int
        >>>
        >>> class Counter(Aggregate):
        ...     total: int = 0
        ...
        ...     def increment(self, by: int) -> None:
        ...         if by <= 0:
        ...             raise ValidationError("by must be positive")
        ...         self.emit(Incremented(by=by))
        ...
        ...     @applies_event
        ...     def apply_incremented(self, evt: Incremented) -> None:
        ...         self.total += evt.by
        >>>
        >>> counter = Counter()
        >>> counter.increment(3)
        >>> counter.total, counter.version
        (3, 1)

    Attributes:
        id: Unique identifier for this aggregate instance. Auto-generated if not provided.
        version: Sequence number of the last applied event (0 before any event).
            Used for optimistic concurrency control.
        last_event_time: Timestamp of the most recent applied event.
        uncommitted_events: List of events that have been emitted but not yet
            persisted to the event store. This field is excluded from serialization.
    """

    id: UUID = Field(default_factory=uuid4)
    version: int = 0
    last_event_time: datetime | None = None
    uncommitted_events: list[Event[Any]] = Field(default_factory=list, exclude=True)

    # Class-level routing table
    _event_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Set up event routing when a subclass is defined."""
        super().__init_subclass__(**kwargs)  # type: ignore[arg-type]
        cls._event_router = setup_event_applying(cls)

    @classmethod
    def replay(
        cls,
        events: Iterable[Event[Any]],
        aggregate_id: UUID | None = None,
        *,
        strict: bool = False,
    ) -> Self:
        """Rebuild an aggregate from its historical events.

        Replay trusts the log: no business rule is re-checked. Events are
        applied in sequence order regardless of the order they are given in.

        Args:
            events: Events of a single stream.
            aggregate_id: Id of the aggregate. Taken from the first event
                when omitted.
            strict: Raise UnknownEventError for payloads without an
                applier instead of skipping them.

        Returns:
            A new aggregate instance with no uncommitted events.
        """
        ordered = sorted(events, key=lambda e: e.sequence_number)
        if aggregate_id is None and ordered:
            aggregate_id = ordered[0].aggregate_id
        aggregate = cls(id=aggregate_id) if aggregate_id is not None else cls()
        aggregate.replay_events(ordered, strict=strict)
        return aggregate

    def apply(self, event: BaseModel) -> object:
        """Route an event payload to its registered applier method.

        Args:
            event: The event data to apply to the aggregate state.
        """
        return self._event_router.route(self, event)

    def emit(self, data: T) -> Event[T]:
        """Emit a domain event and apply it to the aggregate state.

        This method should be called by business logic methods once all
        validation has passed. It creates an event with the next sequence
        number, applies it and records it as uncommitted.

        Args:
            data: The event data as a Pydantic model representing what happened.

        Returns:
            The new event envelope.
        """
        event: Event[T] = Event(
            aggregate_id=self.id,
            sequence_number=self.version + 1,
            data=data,
            timestamp=utc_now(),
        )
        self._apply_event(event)
        self.uncommitted_events.append(event)
        return event

    def _apply_event(self, event: Event[Any]) -> None:
        self.apply(event.data)
        self.version = event.sequence_number
        self.last_event_time = event.timestamp

    def changed_since(self, version: int) -> bool:
        """Check if the aggregate has changed since a specific version.

        Args:
            version: The version number to compare against.

        Returns:
            True if the current version is greater than the provided version,
            False otherwise.
        """
        return self.version > version

    def get_uncommitted_events(self) -> list[Event[Any]]:
        """Get the list of events that haven't been persisted yet.

        Returns:
            A copy of the uncommitted events, in emission order.
        """
        return list(self.uncommitted_events)

    def clear_uncommitted_events(self) -> None:
        """Clear the list of uncommitted events.

        This is called by the repository after events have been successfully
        persisted to the event store.
        """
        self.uncommitted_events.clear()

    def replay_events(self, events: Iterable[Event[Any]], *, strict: bool = False) -> None:
        """Apply a sequence of historical events to this instance.

        Args:
            events: Events in sequence order.
            strict: Raise UnknownEventError for payloads without an applier.
        """
        for event in events:
            if strict and not self._event_router.handles(type(event.data)):
                raise UnknownEventError(event.event_type)
            self._apply_event(event)
