from typing import Dict, List, Optional, Set

from models import ClientAccount
from disputes import DisputeResolver


class StateManager:
    """
    State for one run: client accounts, deposit history for dispute lookups,
    and the ids of every applied deposit or withdrawal.
    Not thread-safe; records are applied strictly in order.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._used_transaction_ids: Set[int] = set()
        self.disputes = DisputeResolver()

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def is_transaction_id_used(self, transaction_id: int) -> bool:
        return transaction_id in self._used_transaction_ids

    def mark_transaction_id_used(self, transaction_id: int) -> None:
        self._used_transaction_ids.add(transaction_id)

    def iter_accounts(self) -> List[ClientAccount]:
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]
