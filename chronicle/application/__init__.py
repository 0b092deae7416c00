"""Application layer: event storage, repositories and projections."""

from .aggregates import AggregateRepository
from .events import EventStore, InMemoryEventStore
from .projections import Projection

__all__ = [
    "AggregateRepository",
    "EventStore",
    "InMemoryEventStore",
    "Projection",
]
