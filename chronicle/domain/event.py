from datetime import datetime, timezone
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID

T = TypeVar("T", bound=BaseModel)


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information

    Note:
        Used as default_factory for Event.timestamp to ensure all
        events are timestamped in UTC regardless of system timezone.
    """
    return datetime.now(tz=timezone.utc)


class Event(BaseModel, Generic[T]):
    """Immutable record of a state change in an aggregate.

    Event is the core data structure in event sourcing. Each event represents
    a fact that occurred in the past - a state transition in an aggregate's
    lifecycle. Events are:

    - **Immutable**: The model is frozen; once created it cannot be modified
    - **Ordered**: sequence_number orders events within one stream and
      global_position orders persisted events across all streams
    - **Typed**: Generic type parameter T specifies the event data schema
    - **Timestamped**: All events record when they occurred (UTC)
    - **Identifiable**: Each event has a unique ID and belongs to an aggregate

    Type Parameters:
        T: Pydantic BaseModel subclass defining the event data schema

    Attributes:
        id: Unique identifier for this specific event instance
        aggregate_id: ID of the aggregate (stream) that produced this event
        data: Typed event data (e.g., AccountCreated, MoneyDeposited)
        sequence_number: Version of the aggregate after this event is
            applied (1-indexed, contiguous within a stream)
        timestamp: When the event occurred (UTC timezone)
        global_position: Store-wide position assigned when the event is
            appended. None until the event has been persisted.

    Note:
        Events are typically created by aggregates via the `emit()` method,
        not constructed directly. The event store returns copies carrying a
        global_position; the original instance is never changed.

    Examples:
        Event created by aggregate:

        >>> # Inside an aggregate command method
        >>> self.emit(MoneyDeposited(account_id=self.id, amount=Decimal("100")))

        Event created manually:

        >>> event = Event(
        ...     aggregate_id=account_id,
        ...     data=MoneyDeposited(account_id=account_id, amount=Decimal("100")),
        ...     sequence_number=5,
        ... )
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(
        default_factory=ULID,
        description="Unique identifier for this event instance",
    )
    aggregate_id: UUID = Field(description="ID of the aggregate that produced this event")
    data: T = Field(description="Typed event data conforming to schema T")
    sequence_number: int = Field(
        gt=0,
        description="Position in aggregate's event stream (1-indexed, monotonically increasing)",
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC timezone)",
    )
    global_position: int | None = Field(
        default=None,
        description="Store-wide append position, assigned by the event store",
    )

    @property
    def event_type(self) -> str:
        """Name of the payload type, e.g. ``"MoneyDeposited"``."""
        return type(self.data).__name__
