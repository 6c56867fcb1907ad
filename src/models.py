from collections import Counter
from dataclasses import dataclass, field
from decimal import Context, Decimal, Inexact, InvalidOperation, ROUND_DOWN, localcontext
from enum import Enum
from typing import Optional

AMOUNT_PRECISION = Decimal("0.0001")

# Available, held and total stay below this magnitude so that, at 4
# fractional digits, each fits the default 28-digit decimal context exactly.
MAX_BALANCE = Decimal("1e24")

LEDGER_CONTEXT = Context(prec=34, traps=[Inexact, InvalidOperation])


class BalanceOverflow(ArithmeticError):
    pass


def quantize_amount(value: Decimal) -> Decimal:
    """Fix a value to 4 fractional digits, truncating any extra precision."""
    return value.quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    SUCCESS = "success"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def _move(self, available_delta: Decimal, held_delta: Decimal) -> None:
        """Apply both deltas exactly, or raise BalanceOverflow and change nothing."""
        try:
            with localcontext(LEDGER_CONTEXT):
                available = self.available + available_delta
                held = self.held + held_delta
                total = available + held
        except (Inexact, InvalidOperation) as e:
            raise BalanceOverflow(f"account {self.client_id}: balance not representable") from e

        if any(value.copy_abs() >= MAX_BALANCE for value in (available, held, total)):
            raise BalanceOverflow(f"account {self.client_id}: balance would reach {MAX_BALANCE}")

        self.available = available
        self.held = held

    def credit(self, amount: Decimal) -> None:
        self._move(amount, Decimal("0"))

    def debit(self, amount: Decimal) -> None:
        self._move(-amount, Decimal("0"))

    def hold(self, amount: Decimal) -> None:
        self._move(-amount, amount)

    def release_hold(self, amount: Decimal) -> None:
        self._move(amount, -amount)

    def remove_held(self, amount: Decimal) -> None:
        self._move(Decimal("0"), -amount)

    def lock(self) -> None:
        self.locked = True


@dataclass
class ProcessingStats:
    """Counters for a single run, with failures broken down by error kind."""

    applied: int = 0
    ignored: int = 0
    failed: int = 0
    failures_by_kind: Counter = field(default_factory=Counter)

    def record_result(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.SUCCESS:
            self.applied += 1
        else:
            self.ignored += 1

    def record_failure(self, error: Exception) -> None:
        self.failed += 1
        self.failures_by_kind[type(error).__name__] += 1

    @property
    def seen(self) -> int:
        return self.applied + self.ignored + self.failed
