import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple

from models import TransactionType

logger = logging.getLogger(__name__)


class DisputeState(Enum):
    UNDISPUTED = "undisputed"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


# Every (state, record kind) pair missing from this table is a no-op.
TRANSITIONS: Dict[tuple, DisputeState] = {
    (DisputeState.UNDISPUTED, TransactionType.DISPUTE): DisputeState.DISPUTED,
    (DisputeState.DISPUTED, TransactionType.RESOLVE): DisputeState.UNDISPUTED,
    (DisputeState.DISPUTED, TransactionType.CHARGEBACK): DisputeState.CHARGED_BACK,
}


@dataclass
class DepositRecord:
    transaction_id: int
    client_id: int
    amount: Decimal
    state: DisputeState = DisputeState.UNDISPUTED


class DisputeResolver:
    """
    Owns the deposit history and the dispute lifecycle of each deposit.

    Only deposits are recorded here: withdrawn funds have already left the
    system, so a dispute referencing a withdrawal finds nothing and is inert.
    """

    def __init__(self):
        self._deposits: Dict[int, DepositRecord] = {}

    def __len__(self) -> int:
        return len(self._deposits)

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._deposits

    def record_deposit(self, transaction_id: int, client_id: int, amount: Decimal) -> DepositRecord:
        record = DepositRecord(transaction_id=transaction_id, client_id=client_id, amount=amount)
        self._deposits[transaction_id] = record
        return record

    def get_deposit(self, transaction_id: int) -> Optional[DepositRecord]:
        return self._deposits.get(transaction_id)

    def pending_transition(
        self, kind: TransactionType, transaction_id: int, client_id: int
    ) -> Optional[Tuple[DepositRecord, DisputeState]]:
        """
        Find the referenced deposit and the state `kind` would move it to,
        without changing anything.

        Returns None when the reference is unknown, belongs to another client,
        or the transition is not allowed from the deposit's current state.
        """
        record = self._deposits.get(transaction_id)
        if record is None:
            logger.debug(f"{kind.value} for tx {transaction_id}: no such deposit")
            return None

        if record.client_id != client_id:
            logger.debug(f"{kind.value} for tx {transaction_id}: belongs to client {record.client_id}, not {client_id}")
            return None

        next_state = TRANSITIONS.get((record.state, kind))
        if next_state is None:
            logger.debug(f"{kind.value} for tx {transaction_id}: not allowed while {record.state.value}")
            return None

        return record, next_state

    def transition(self, kind: TransactionType, transaction_id: int, client_id: int) -> Optional[DepositRecord]:
        """Move the referenced deposit to its next dispute state; None if not allowed."""
        pending = self.pending_transition(kind, transaction_id, client_id)
        if pending is None:
            return None

        record, next_state = pending
        record.state = next_state
        return record

    def dispute(self, transaction_id: int, client_id: int) -> Optional[DepositRecord]:
        return self.transition(TransactionType.DISPUTE, transaction_id, client_id)

    def resolve(self, transaction_id: int, client_id: int) -> Optional[DepositRecord]:
        return self.transition(TransactionType.RESOLVE, transaction_id, client_id)

    def chargeback(self, transaction_id: int, client_id: int) -> Optional[DepositRecord]:
        return self.transition(TransactionType.CHARGEBACK, transaction_id, client_id)
