from .controller import TransactionController
from .interfaces import LeaseState, TransactionState

__all__ = [
    "TransactionController",
    "LeaseState",
    "TransactionState",
]
