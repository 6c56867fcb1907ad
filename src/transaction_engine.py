import logging
from dataclasses import replace
from decimal import Decimal
from typing import Callable, List, Optional

from errors import AccountLocked, BalanceOutOfRange, DuplicateTransaction, InsufficientFunds, InvalidAmount, MissingAmount
from models import BalanceOverflow, Transaction, TransactionType, ClientAccount, ProcessingResult
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionEngine:
    """
    Applies transactions one at a time against account state.

    apply() returns SUCCESS when the record changed state and IGNORED for
    dispute, resolve and chargeback records that reference nothing they can
    act on. Rejected records raise a TransactionError and leave state untouched.
    """

    def __init__(self, state: Optional[StateManager] = None):
        self._state = state if state is not None else StateManager()

    @property
    def state(self) -> StateManager:
        return self._state

    def apply(self, transaction: Transaction) -> ProcessingResult:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)
        raise ValueError(f"unknown transaction type: {transaction.transaction_type!r}")

    def snapshot(self) -> List[ClientAccount]:
        """Copies of every known account, ordered by client id."""
        return [replace(account) for account in self._state.iter_accounts()]

    def check_invariants(self) -> bool:
        return all(
            account.total == account.available + account.held and account.held >= 0
            for account in self._state.iter_accounts()
        )

    def _validate_funding(self, transaction: Transaction) -> None:
        if transaction.amount is None:
            raise MissingAmount(transaction)
        if transaction.amount <= 0:
            raise InvalidAmount(transaction)
        if self._state.is_transaction_id_used(transaction.transaction_id):
            raise DuplicateTransaction(transaction)

    def _unlocked_account(self, transaction: Transaction) -> ClientAccount:
        account = self._state.get_or_create_account(transaction.client_id)
        if account.locked:
            raise AccountLocked(transaction)
        return account

    def _move_funds(self, transaction: Transaction, move: Callable[[Decimal], None], amount: Decimal) -> None:
        try:
            move(amount)
        except BalanceOverflow as e:
            raise BalanceOutOfRange(transaction, str(e)) from e

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        self._validate_funding(transaction)
        account = self._unlocked_account(transaction)

        self._move_funds(transaction, account.credit, transaction.amount)
        self._state.mark_transaction_id_used(transaction.transaction_id)
        self._state.disputes.record_deposit(transaction.transaction_id, transaction.client_id, transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        self._validate_funding(transaction)
        account = self._unlocked_account(transaction)

        if account.available < transaction.amount:
            raise InsufficientFunds(transaction, account.available)

        self._move_funds(transaction, account.debit, transaction.amount)
        self._state.mark_transaction_id_used(transaction.transaction_id)
        return ProcessingResult.SUCCESS

    def _settle_dispute_step(self, transaction: Transaction, move: Callable[[Decimal], None]) -> ProcessingResult:
        # Funds move before the deposit's state changes, so a rejected move leaves both untouched.
        pending = self._state.disputes.pending_transition(
            transaction.transaction_type, transaction.transaction_id, transaction.client_id
        )
        if pending is None:
            return ProcessingResult.IGNORED

        deposit, next_state = pending
        self._move_funds(transaction, move, deposit.amount)
        deposit.state = next_state
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        account = self._unlocked_account(transaction)
        return self._settle_dispute_step(transaction, account.hold)

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        account = self._unlocked_account(transaction)
        return self._settle_dispute_step(transaction, account.release_hold)

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        account = self._unlocked_account(transaction)
        result = self._settle_dispute_step(transaction, account.remove_held)
        if result == ProcessingResult.SUCCESS:
            account.lock()
            logger.info(f"Chargeback for tx {transaction.transaction_id}: account {account.client_id} locked")
        return result
