"""Events recorded against a bank account stream."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AccountEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: UUID


class AccountCreated(AccountEvent):
    account_holder: str
    initial_balance: Decimal


class MoneyDeposited(AccountEvent):
    amount: Decimal
    description: str = ""


class MoneyWithdrawn(AccountEvent):
    amount: Decimal
    description: str = ""


class AccountClosed(AccountEvent):
    reason: str = ""
