"""Central test fixtures."""

from decimal import Decimal
from uuid import UUID, uuid4

import pytest
import pytest_asyncio

from chronicle.accounts import BankAccount
from chronicle.application import AggregateRepository, InMemoryEventStore
from chronicle.config import ChronicleSettings


@pytest.fixture
def account_id() -> UUID:
    """Generate a unique account ID."""
    return uuid4()


@pytest.fixture
def event_store() -> InMemoryEventStore:
    """Create an in-memory event store."""
    return InMemoryEventStore()


@pytest.fixture
def settings() -> ChronicleSettings:
    """Default settings, independent of the environment."""
    return ChronicleSettings(log_level="INFO", unknown_events="ignore")


@pytest.fixture
def repository(
    event_store: InMemoryEventStore, settings: ChronicleSettings
) -> AggregateRepository[BankAccount]:
    """Create a repository for BankAccount aggregates."""
    return AggregateRepository(BankAccount, event_store, settings)


@pytest.fixture
def bank_account(account_id: UUID) -> BankAccount:
    """A freshly opened account with 1000 and nothing saved yet."""
    return BankAccount.open(account_id, "Alice", Decimal("1000"))


@pytest_asyncio.fixture
async def saved_account(
    bank_account: BankAccount, repository: AggregateRepository[BankAccount]
) -> BankAccount:
    """An account opened with 1000 and persisted."""
    await repository.save(bank_account)
    return bank_account
