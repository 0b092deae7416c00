"""Projection infrastructure for building read models."""

from .projection import Projection

__all__ = [
    "Projection",
]
