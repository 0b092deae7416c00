"""Projection base class for building read models from events."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar

from ...domain import Event
from ...routing import setup_event_handling

if TYPE_CHECKING:
    from ...routing import MessageRouter


class Projection(ABC):
    """Base class for read models folded from the event log.

    Projections are the read side of the system. They keep denormalized
    views that are cheap to query, and they can be thrown away and rebuilt
    from the event store at any time. A projection is never consulted for
    concurrency checks or business rules; the event log stays the only
    source of truth.

    **Event Handling:**
    Use @handles_event to mark methods that process events. Annotate the
    parameter with the payload type to receive the payload, or with
    ``Event[Payload]`` to receive the envelope:

    ```python
    @handles_event
    def on_deposited(self, event: MoneyDeposited) -> None:
        self.totals[event.account_id] += event.amount

    @handles_event
    def on_closed(self, event: Event[AccountClosed]) -> None:
        self.closed_at[event.aggregate_id] = event.timestamp
    ```

    Event kinds without a handler are skipped.

    Example:
        >>> projection = AccountSummaryProjection()
        >>> projection.rebuild(await store.read_all())
        >>> projection.get(account_id).current_balance
        Decimal('1200')
    """

    # Class-level routing table (set during __init_subclass__)
    _event_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Set up event routing table when subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._event_router = setup_event_handling(cls)

    @abstractmethod
    def reset(self) -> None:
        """Discard all read model state."""
        ...

    def apply(self, event: Event[Any]) -> None:
        """Fold a single event into the read model."""
        self._event_router.route(self, event.data, event_wrapper=event)

    def rebuild(self, events: Iterable[Event[Any]]) -> None:
        """Discard current state and fold every event, in the order given.

        Args:
            events: Globally ordered events, typically from
                `EventStore.read_all()`.
        """
        self.reset()
        for event in events:
            self.apply(event)
