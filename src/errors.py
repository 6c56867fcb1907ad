from models import Transaction


class TransactionError(Exception):
    """A record that was rejected without changing any account state."""

    def __init__(self, transaction: Transaction, message: str):
        super().__init__(message)
        self.transaction = transaction

    def __str__(self) -> str:
        return f"{self.transaction}: {self.args[0]}"


class MissingAmount(TransactionError):
    def __init__(self, transaction: Transaction):
        super().__init__(transaction, f"{transaction.transaction_type.value} requires an amount")


class InvalidAmount(TransactionError):
    def __init__(self, transaction: Transaction):
        super().__init__(transaction, f"amount must be positive, got {transaction.amount}")


class InsufficientFunds(TransactionError):
    def __init__(self, transaction: Transaction, available):
        super().__init__(transaction, f"insufficient funds (available {available})")
        self.available = available


class DuplicateTransaction(TransactionError):
    def __init__(self, transaction: Transaction):
        super().__init__(transaction, f"transaction id {transaction.transaction_id} already used")


class AccountLocked(TransactionError):
    def __init__(self, transaction: Transaction):
        super().__init__(transaction, f"account {transaction.client_id} is locked")


class BalanceOutOfRange(TransactionError):
    pass
