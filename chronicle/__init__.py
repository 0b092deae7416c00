"""Chronicle - event-sourced aggregates, event store and projections.

This module provides the public API for building event-sourced applications.
"""

from .application import AggregateRepository, EventStore, InMemoryEventStore, Projection
from .config import ChronicleSettings, configure_logging
from .domain import Aggregate, Event
from .routing import applies_event, handles_event

__all__ = [
    # Application
    "AggregateRepository",
    "EventStore",
    "InMemoryEventStore",
    "Projection",
    # Configuration
    "ChronicleSettings",
    "configure_logging",
    # Domain primitives
    "Aggregate",
    "Event",
    # Decorators
    "applies_event",
    "handles_event",
]
