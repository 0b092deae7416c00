from decimal import Decimal
from uuid import UUID

from ..domain import Aggregate, InsufficientFundsError, InvalidStateError, ValidationError
from ..routing import applies_event
from .events import AccountClosed, AccountCreated, MoneyDeposited, MoneyWithdrawn


def _as_amount(value: object, what: str) -> Decimal:
    # Floats are refused; Decimal(0.1) is inexact
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise ValidationError(f"{what} must be an int or Decimal, got {type(value).__name__}")
    amount = Decimal(value)
    if not amount.is_finite():
        raise ValidationError(f"{what} must be a finite number, got {amount}")
    return amount


class BankAccount(Aggregate):
    """Event-sourced bank account.

    The account starts Open when created and moves to Closed, a terminal
    state, once closed with a zero balance. Every command validates against
    the current state and then emits exactly one event; the `apply_*`
    methods below are the only code that mutates the account.

    Examples:
        >>> account = BankAccount.open(uuid4(), "Alice", Decimal("1000"))
        >>> account.deposit(Decimal("500"), "Salary")
        >>> account.withdraw(Decimal("300"), "Rent")
        >>> account.balance, account.version
        (Decimal('1200'), 3)
    """

    account_holder: str = ""
    balance: Decimal = Decimal("0")
    is_closed: bool = False

    @classmethod
    def open(
        cls, account_id: UUID, account_holder: str, initial_balance: Decimal | int = 0
    ) -> "BankAccount":
        """Create a new account, emitting its AccountCreated event.

        Raises:
            ValidationError: If the holder name is blank or the initial
                balance is negative or not a finite int/Decimal.
        """
        if not account_holder or not account_holder.strip():
            raise ValidationError("Account holder name is required")
        balance = _as_amount(initial_balance, "Initial balance")
        if balance < 0:
            raise ValidationError("Initial balance cannot be negative")

        account = cls(id=account_id)
        account.emit(
            AccountCreated(
                account_id=account_id,
                account_holder=account_holder,
                initial_balance=balance,
            )
        )
        return account

    def deposit(self, amount: Decimal | int, description: str = "") -> None:
        if self.is_closed:
            raise InvalidStateError("Cannot deposit into a closed account")
        value = _as_amount(amount, "Deposit amount")
        if value <= 0:
            raise ValidationError("Deposit amount must be positive")

        self.emit(MoneyDeposited(account_id=self.id, amount=value, description=description))

    def withdraw(self, amount: Decimal | int, description: str = "") -> None:
        if self.is_closed:
            raise InvalidStateError("Cannot withdraw from a closed account")
        value = _as_amount(amount, "Withdrawal amount")
        if value <= 0:
            raise ValidationError("Withdrawal amount must be positive")
        if value > self.balance:
            raise InsufficientFundsError(balance=self.balance, requested=value)

        self.emit(MoneyWithdrawn(account_id=self.id, amount=value, description=description))

    def close(self, reason: str = "") -> None:
        if self.is_closed:
            raise InvalidStateError("Account is already closed")
        if self.balance != 0:
            raise InvalidStateError("Cannot close account with non-zero balance")

        self.emit(AccountClosed(account_id=self.id, reason=reason))

    @applies_event
    def apply_created(self, event: AccountCreated) -> None:
        self.id = event.account_id
        self.account_holder = event.account_holder
        self.balance = event.initial_balance

    @applies_event
    def apply_deposited(self, event: MoneyDeposited) -> None:
        self.balance += event.amount

    @applies_event
    def apply_withdrawn(self, event: MoneyWithdrawn) -> None:
        self.balance -= event.amount

    @applies_event
    def apply_closed(self, event: AccountClosed) -> None:
        self.is_closed = True
