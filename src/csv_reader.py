import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import MAX_BALANCE, Transaction, TransactionType, quantize_amount

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 65535
MAX_TRANSACTION_ID = 4294967295
MAX_AMOUNT = MAX_BALANCE


def open_transactions(filepath: str) -> Iterator[Transaction]:
    """Lazily read transactions from a CSV file. OSError propagates to the caller."""
    with open(filepath, "r", newline="") as f:
        yield from read_transactions(f)


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """Yield one Transaction per well-formed row; malformed rows are logged and skipped."""
    reader = csv.DictReader(stream, skipinitialspace=True)
    for row in reader:
        if not any(value for value in row.values() if isinstance(value, str)):
            continue
        transaction = parse_row(row)
        if transaction is not None:
            yield transaction


def _parse_id(value: str, upper: int, name: str) -> int:
    parsed = int(value)
    if not 0 <= parsed <= upper:
        raise ValueError(f"{name} {parsed} out of range 0..{upper}")
    return parsed


def parse_row(row: Dict[str, str]) -> Optional[Transaction]:
    """Parse CSV row into Transaction."""
    try:
        normalized = {
            k.strip(): (v or "").strip()
            for k, v in row.items()
            if isinstance(k, str)
        }

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID, "client")
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID, "tx")

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str:
            amount = Decimal(amount_str)
            if not amount.is_finite():
                raise ValueError(f"amount {amount_str!r} is not a finite number")
            if amount.copy_abs() >= MAX_AMOUNT:
                raise ValueError(f"amount {amount_str!r} out of range, must be below {MAX_AMOUNT}")
            amount = quantize_amount(amount)

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError, InvalidOperation) as e:
        logger.warning(f"Failed to parse row {row}: {e!r}")
        return None
