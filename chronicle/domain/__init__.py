"""Domain primitives for event sourcing.

This module contains the core building blocks that users extend to create
their domain models:

- Aggregate: Base class for domain aggregates that emit events
- Event: Immutable envelope around an event payload
- Exceptions raised by aggregates, repositories and stores
"""

from .aggregate import Aggregate
from .event import Event, utc_now
from .exceptions import (
    AggregateNotFoundError,
    ChronicleError,
    ConcurrencyError,
    DomainError,
    InsufficientFundsError,
    InvalidStateError,
    InvariantViolation,
    UnknownEventError,
    ValidationError,
)

__all__ = [
    "Aggregate",
    "Event",
    "utc_now",
    "ChronicleError",
    "DomainError",
    "ValidationError",
    "InvalidStateError",
    "InsufficientFundsError",
    "ConcurrencyError",
    "InvariantViolation",
    "UnknownEventError",
    "AggregateNotFoundError",
]
