import logging
from typing import Dict, Iterable, Optional

from csv_reader import open_transactions
from errors import TransactionError
from models import Transaction, ClientAccount, ProcessingStats
from state_manager import StateManager
from transaction_engine import TransactionEngine

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds an ordered stream of transactions through a TransactionEngine.
    A rejected record is logged and counted; it never stops the run.
    """

    def __init__(self, state: Optional[StateManager] = None):
        self._engine = TransactionEngine(state)
        self._stats = ProcessingStats()

    @property
    def engine(self) -> TransactionEngine:
        return self._engine

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        return self.process_stream(open_transactions(filepath))

    def process_stream(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        for transaction in transactions:
            self._process_transaction(transaction)

        logger.info(
            f"Applied: {self._stats.applied}, "
            f"Ignored: {self._stats.ignored}, "
            f"Failed: {self._stats.failed}"
        )
        for kind, count in sorted(self._stats.failures_by_kind.items()):
            logger.info(f"  {kind}: {count}")

        return {account.client_id: account for account in self._engine.snapshot()}

    def _process_transaction(self, transaction: Transaction) -> None:
        try:
            result = self._engine.apply(transaction)
        except TransactionError as e:
            self._stats.record_failure(e)
            logger.warning(f"Rejected {e}")
            return
        self._stats.record_result(result)
