import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from disputes import DisputeResolver, DisputeState
from models import TransactionType


class TestDisputeResolver:
    def setup_method(self):
        self.resolver = DisputeResolver()
        self.resolver.record_deposit(transaction_id=1, client_id=1, amount=Decimal("10"))

    def test_new_deposit_is_undisputed(self):
        deposit = self.resolver.get_deposit(1)
        assert deposit.state == DisputeState.UNDISPUTED
        assert deposit.amount == Decimal("10")
        assert 1 in self.resolver
        assert len(self.resolver) == 1

    def test_dispute_then_resolve(self):
        assert self.resolver.dispute(1, 1).state == DisputeState.DISPUTED
        assert self.resolver.resolve(1, 1).state == DisputeState.UNDISPUTED

    def test_dispute_then_chargeback_is_terminal(self):
        self.resolver.dispute(1, 1)
        assert self.resolver.chargeback(1, 1).state == DisputeState.CHARGED_BACK

        assert self.resolver.dispute(1, 1) is None
        assert self.resolver.resolve(1, 1) is None
        assert self.resolver.chargeback(1, 1) is None
        assert self.resolver.get_deposit(1).state == DisputeState.CHARGED_BACK

    def test_redispute_after_resolve(self):
        self.resolver.dispute(1, 1)
        self.resolver.resolve(1, 1)
        assert self.resolver.dispute(1, 1).state == DisputeState.DISPUTED

    def test_unknown_transaction(self):
        assert self.resolver.dispute(99, 1) is None
        assert self.resolver.get_deposit(99) is None

    def test_other_client_cannot_dispute(self):
        assert self.resolver.dispute(1, 2) is None
        assert self.resolver.get_deposit(1).state == DisputeState.UNDISPUTED

    @pytest.mark.parametrize("kind", [TransactionType.RESOLVE, TransactionType.CHARGEBACK])
    def test_undisputed_deposit_cannot_settle(self, kind):
        assert self.resolver.transition(kind, 1, 1) is None
        assert self.resolver.get_deposit(1).state == DisputeState.UNDISPUTED

    def test_double_dispute_ignored(self):
        self.resolver.dispute(1, 1)
        assert self.resolver.dispute(1, 1) is None
        assert self.resolver.get_deposit(1).state == DisputeState.DISPUTED

    def test_funding_kinds_never_transition(self):
        assert self.resolver.transition(TransactionType.DEPOSIT, 1, 1) is None
        assert self.resolver.transition(TransactionType.WITHDRAWAL, 1, 1) is None

    def test_pending_transition_does_not_change_state(self):
        record, next_state = self.resolver.pending_transition(TransactionType.DISPUTE, 1, 1)

        assert record is self.resolver.get_deposit(1)
        assert next_state == DisputeState.DISPUTED
        assert record.state == DisputeState.UNDISPUTED
