from enum import Enum


class LeaseState(Enum):
    """Combined connection and transaction state of a lease"""

    UNLEASED = "unleased"
    LEASED = "leased"
    IN_TRANSACTION = "in_transaction"


class TransactionState(Enum):
    NONE = "none"
    ACTIVE = "active"

    @classmethod
    def of(cls, state: LeaseState) -> "TransactionState":
        return cls.ACTIVE if state is LeaseState.IN_TRANSACTION else cls.NONE
