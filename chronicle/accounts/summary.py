"""Account summary read model."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from ..application.projections import Projection
from ..domain import Event
from ..routing import handles_event
from .events import AccountClosed, AccountCreated, MoneyDeposited, MoneyWithdrawn


class AccountSummary(BaseModel):
    """Denormalized view of one account, rebuilt from its events."""

    account_id: UUID
    account_holder: str
    current_balance: Decimal
    is_closed: bool = False
    total_transactions: int = 0
    created_at: datetime
    closed_at: datetime | None = None
    last_activity_at: datetime


class AccountSummaryProjection(Projection):
    """Summaries of every account, keyed by account id.

    Deposits and withdrawals count as transactions; opening and closing do
    not. Events for accounts whose creation was never seen are ignored.
    """

    def __init__(self) -> None:
        self.summaries: dict[UUID, AccountSummary] = {}

    def reset(self) -> None:
        self.summaries.clear()

    def get(self, account_id: UUID) -> AccountSummary | None:
        return self.summaries.get(account_id)

    def get_all(self) -> list[AccountSummary]:
        return list(self.summaries.values())

    @handles_event
    def on_created(self, event: Event[AccountCreated]) -> None:
        self.summaries[event.data.account_id] = AccountSummary(
            account_id=event.data.account_id,
            account_holder=event.data.account_holder,
            current_balance=event.data.initial_balance,
            created_at=event.timestamp,
            last_activity_at=event.timestamp,
        )

    @handles_event
    def on_deposited(self, event: Event[MoneyDeposited]) -> None:
        if summary := self.summaries.get(event.data.account_id):
            summary.current_balance += event.data.amount
            summary.total_transactions += 1
            summary.last_activity_at = event.timestamp

    @handles_event
    def on_withdrawn(self, event: Event[MoneyWithdrawn]) -> None:
        if summary := self.summaries.get(event.data.account_id):
            summary.current_balance -= event.data.amount
            summary.total_transactions += 1
            summary.last_activity_at = event.timestamp

    @handles_event
    def on_closed(self, event: Event[AccountClosed]) -> None:
        if summary := self.summaries.get(event.data.account_id):
            summary.is_closed = True
            summary.closed_at = event.timestamp
            summary.last_activity_at = event.timestamp
