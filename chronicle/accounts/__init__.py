"""Event-sourced bank accounts and their read models."""

from .aggregate import BankAccount
from .events import (
    AccountClosed,
    AccountCreated,
    AccountEvent,
    MoneyDeposited,
    MoneyWithdrawn,
)
from .summary import AccountSummary, AccountSummaryProjection

__all__ = [
    "BankAccount",
    "AccountEvent",
    "AccountCreated",
    "MoneyDeposited",
    "MoneyWithdrawn",
    "AccountClosed",
    "AccountSummary",
    "AccountSummaryProjection",
]
