"""Tests for the BankAccount aggregate."""

from decimal import Decimal
from uuid import uuid4

import pytest

from chronicle.accounts import (
    AccountClosed,
    AccountCreated,
    BankAccount,
    MoneyDeposited,
    MoneyWithdrawn,
)
from chronicle.domain import InsufficientFundsError, InvalidStateError, ValidationError

# Opening


def test_open_emits_account_created_at_version_one(account_id):
    account = BankAccount.open(account_id, "Alice", Decimal("1000"))

    [event] = account.get_uncommitted_events()
    assert event.sequence_number == 1
    assert event.data == AccountCreated(
        account_id=account_id, account_holder="Alice", initial_balance=Decimal("1000")
    )
    assert account.id == account_id
    assert account.account_holder == "Alice"
    assert account.balance == Decimal("1000")
    assert account.version == 1
    assert account.is_closed is False


def test_open_allows_zero_initial_balance(account_id):
    account = BankAccount.open(account_id, "Bob", 0)

    assert account.balance == 0


@pytest.mark.parametrize("holder", ["", "   ", "\t\n"])
def test_open_rejects_blank_holder(account_id, holder):
    with pytest.raises(ValidationError):
        BankAccount.open(account_id, holder, Decimal("10"))


def test_open_rejects_negative_initial_balance(account_id):
    with pytest.raises(ValidationError):
        BankAccount.open(account_id, "Alice", Decimal("-0.01"))


# Deposits and withdrawals


def test_deposit_increases_balance(bank_account):
    bank_account.deposit(Decimal("500"), "Salary")

    event = bank_account.get_uncommitted_events()[-1]
    assert event.sequence_number == 2
    assert event.data == MoneyDeposited(
        account_id=bank_account.id, amount=Decimal("500"), description="Salary"
    )
    assert bank_account.balance == Decimal("1500")
    assert bank_account.version == 2


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
def test_deposit_rejects_non_positive_amount(bank_account, amount):
    with pytest.raises(ValidationError):
        bank_account.deposit(amount, "bad")

    assert bank_account.version == 1


def test_withdraw_decreases_balance(bank_account):
    bank_account.withdraw(Decimal("300"), "Rent")

    event = bank_account.get_uncommitted_events()[-1]
    assert isinstance(event.data, MoneyWithdrawn)
    assert bank_account.balance == Decimal("700")


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
def test_withdraw_rejects_non_positive_amount(bank_account, amount):
    with pytest.raises(ValidationError):
        bank_account.withdraw(amount, "bad")


MALFORMED_AMOUNTS = [
    Decimal("NaN"),
    Decimal("sNaN"),
    Decimal("Infinity"),
    Decimal("-Infinity"),
    "5",
    0.1,
    True,
    None,
]


@pytest.mark.parametrize("amount", MALFORMED_AMOUNTS)
def test_deposit_rejects_malformed_amount(bank_account, amount):
    with pytest.raises(ValidationError):
        bank_account.deposit(amount, "bad")

    assert bank_account.balance == Decimal("1000")
    assert bank_account.version == 1


@pytest.mark.parametrize("amount", MALFORMED_AMOUNTS)
def test_withdraw_rejects_malformed_amount(bank_account, amount):
    with pytest.raises(ValidationError):
        bank_account.withdraw(amount, "bad")

    assert bank_account.balance == Decimal("1000")
    assert bank_account.version == 1


@pytest.mark.parametrize("amount", MALFORMED_AMOUNTS)
def test_open_rejects_malformed_initial_balance(account_id, amount):
    with pytest.raises(ValidationError):
        BankAccount.open(account_id, "Alice", amount)


def test_int_amounts_are_converted_to_decimal(bank_account):
    bank_account.deposit(5)

    assert bank_account.get_uncommitted_events()[-1].data.amount == Decimal("5")
    assert isinstance(bank_account.balance, Decimal)


def test_withdraw_more_than_balance_fails_and_leaves_state(bank_account):
    with pytest.raises(InsufficientFundsError) as exc_info:
        bank_account.withdraw(Decimal("1000.01"), "Too much")

    assert exc_info.value.balance == Decimal("1000")
    assert exc_info.value.requested == Decimal("1000.01")
    assert bank_account.balance == Decimal("1000")
    assert bank_account.version == 1
    assert len(bank_account.get_uncommitted_events()) == 1


def test_withdraw_entire_balance_is_allowed(bank_account):
    bank_account.withdraw(Decimal("1000"), "Everything")

    assert bank_account.balance == 0


def test_insufficient_funds_is_a_domain_error():
    from chronicle.domain import DomainError

    assert issubclass(InsufficientFundsError, DomainError)


# Closing


def test_close_with_zero_balance(bank_account):
    bank_account.withdraw(Decimal("1000"), "Empty")

    bank_account.close("done")

    assert bank_account.is_closed is True
    assert bank_account.version == 3
    assert bank_account.get_uncommitted_events()[-1].data == AccountClosed(
        account_id=bank_account.id, reason="done"
    )


def test_close_with_non_zero_balance_fails(bank_account):
    with pytest.raises(InvalidStateError):
        bank_account.close("done")

    assert bank_account.is_closed is False


def test_close_twice_fails():
    account = BankAccount.open(uuid4(), "Carol", 0)
    account.close("first")

    with pytest.raises(InvalidStateError):
        account.close("second")

    assert account.version == 2


def test_closed_account_rejects_deposits_and_withdrawals():
    account = BankAccount.open(uuid4(), "Dave", 0)
    account.close("moving")

    with pytest.raises(InvalidStateError):
        account.deposit(Decimal("1"), "late")
    with pytest.raises(InvalidStateError):
        account.withdraw(Decimal("1"), "late")

    assert account.version == 2
    assert len(account.get_uncommitted_events()) == 2


def test_closed_check_comes_before_amount_validation():
    account = BankAccount.open(uuid4(), "Erin", 0)
    account.close("done")

    with pytest.raises(InvalidStateError):
        account.deposit(Decimal("-1"), "late")


# Replay


def test_replay_reproduces_live_state(bank_account):
    bank_account.deposit(Decimal("500"), "Salary")
    bank_account.withdraw(Decimal("300"), "Rent")
    bank_account.withdraw(Decimal("1200"), "Empty")
    bank_account.close("done")

    replayed = BankAccount.replay(bank_account.get_uncommitted_events())

    assert replayed.id == bank_account.id
    assert replayed.account_holder == bank_account.account_holder
    assert replayed.balance == bank_account.balance == 0
    assert replayed.is_closed is True
    assert replayed.version == bank_account.version == 5


def test_replay_does_not_revalidate_history(account_id):
    from chronicle.domain import Event

    events = [
        Event(
            aggregate_id=account_id,
            data=AccountCreated(
                account_id=account_id, account_holder="Frank", initial_balance=Decimal("0")
            ),
            sequence_number=1,
        ),
        Event(
            aggregate_id=account_id,
            data=MoneyWithdrawn(account_id=account_id, amount=Decimal("50")),
            sequence_number=2,
        ),
    ]

    account = BankAccount.replay(events)

    assert account.balance == Decimal("-50")


def test_balance_equals_initial_plus_deposits_minus_withdrawals(account_id):
    account = BankAccount.open(account_id, "Gina", Decimal("100"))
    deposits = [Decimal("10"), Decimal("20.50"), Decimal("3")]
    withdrawals = [Decimal("40"), Decimal("0.50")]
    for amount in deposits:
        account.deposit(amount)
    for amount in withdrawals:
        account.withdraw(amount)

    assert account.balance == Decimal("100") + sum(deposits) - sum(withdrawals)
    assert account.version == 1 + len(deposits) + len(withdrawals)
