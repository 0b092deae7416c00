"""Event storage for chronicle.

This package provides:
- EventStore: Append-only, per-stream event persistence contract
- InMemoryEventStore: Lock-guarded single-process implementation
"""

from .store import EventStore, InMemoryEventStore

__all__ = [
    "EventStore",
    "InMemoryEventStore",
]
