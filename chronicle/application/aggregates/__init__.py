"""Repository for loading aggregates by replay and saving their new events."""

from .repository import AggregateRepository

__all__ = [
    "AggregateRepository",
]
