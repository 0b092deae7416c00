"""Exceptions raised by aggregates, repositories and event stores."""

from typing import Any


class ChronicleError(Exception):
    """Base class for every error raised by chronicle."""

    pass


class DomainError(ChronicleError):
    """A command was rejected by an aggregate's business rules."""

    pass


class ValidationError(DomainError):
    """Raised when command input is malformed (non-positive amount, empty name)."""

    pass


class InvalidStateError(DomainError):
    """Raised when a command is not allowed in the aggregate's current state."""

    pass


class InsufficientFundsError(DomainError):
    """Raised when a withdrawal exceeds the available balance."""

    def __init__(self, balance: Any, requested: Any):
        self.balance = balance
        self.requested = requested
        super().__init__(f"Insufficient funds. Balance: {balance}, Requested: {requested}")


class ConcurrencyError(ChronicleError):
    """Raised when an optimistic concurrency check fails.

    This exception indicates that another writer has appended to the stream
    between when the aggregate was loaded and when its changes were saved.
    The caller is expected to reload the aggregate and retry the command.

    Attributes:
        stream_id: The stream whose append was rejected.
        expected_version: The version the writer believed the stream was at.
        actual_version: The version the stream was actually at.
    """

    def __init__(self, stream_id: Any, expected_version: int, actual_version: int):
        self.stream_id = stream_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrency conflict on stream {stream_id}: "
            f"expected version {expected_version}, but current version is {actual_version}"
        )


class InvariantViolation(ChronicleError):
    """Raised when events handed to the store break stream contiguity.

    This signals a programming error (for example a hand-built event with the
    wrong sequence number) and is never expected from a well-formed aggregate.
    """

    pass


class UnknownEventError(ChronicleError):
    """Raised by strict replay when an event payload has no applier."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(f"No applier registered for event type {event_type}")


class AggregateNotFoundError(ChronicleError):
    """Raised when an aggregate is required but its stream is empty."""

    def __init__(self, aggregate_id: Any):
        self.aggregate_id = aggregate_id
        super().__init__(f"Aggregate {aggregate_id} not found")
