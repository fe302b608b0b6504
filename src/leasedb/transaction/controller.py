from __future__ import annotations

import logging
from inspect import isawaitable
from typing import TYPE_CHECKING, Any, Callable, Optional

from leasedb.exception import (
    CONNECTION_NOT_FOUND,
    TRANSACTION_NOT_FOUND,
    ResourceError,
    TransactionError,
)

from .interfaces import LeaseState, TransactionState

if TYPE_CHECKING:
    from leasedb.lease import ConnectionLease

logger = logging.getLogger(__name__)

RollbackCallback = Callable[[Optional[BaseException]], Any]


class TransactionController:
    """Begin, commit and rollback for the connection held by a lease.

    The controller owns no state of its own. It reads and moves the lease's
    state so that the transaction can never be ``ACTIVE`` while the lease
    holds no connection.
    """

    def __init__(self, lease: ConnectionLease) -> None:
        self._lease = lease

    @property
    def state(self) -> TransactionState:
        return TransactionState.of(self._lease.state)

    @property
    def is_active(self) -> bool:
        return self._lease.state is LeaseState.IN_TRANSACTION

    async def begin(self) -> None:
        """Begin a transaction on the leased connection

        Raises:
            TransactionError: If no connection is leased or a transaction is
                already active
        """
        state = self._lease.state
        if state is LeaseState.UNLEASED:
            raise TransactionError(CONNECTION_NOT_FOUND)
        if state is LeaseState.IN_TRANSACTION:
            raise TransactionError("Transaction already active")

        await self._lease.connection.begin_transaction()
        self._lease.state = LeaseState.IN_TRANSACTION
        logger.debug("Transaction begun on %s", self._lease)

    async def commit(self) -> None:
        """Commit the active transaction

        A failed commit is followed by a best-effort rollback, and the
        commit error is the one raised.

        Raises:
            TransactionError: If there is no active transaction
        """
        if not self.is_active:
            raise TransactionError(TRANSACTION_NOT_FOUND)

        try:
            await self._lease.connection.commit()
        except Exception as e:
            logger.error(
                "Commit failed on %s, attempting rollback: %s", self._lease, e
            )
            await self.rollback(self._log_rollback_failure)
            raise
        self._lease.state = LeaseState.LEASED
        logger.debug("Transaction committed on %s", self._lease)

    async def rollback(
        self, on_done: Optional[RollbackCallback] = None
    ) -> None:
        """Roll back the active transaction

        Nothing is raised from here. The outcome is handed to ``on_done``:
        ``None`` on success, the driver error on failure, or a
        ``ResourceError`` when there is no transaction to roll back. The
        state leaves ``ACTIVE`` before the driver is called, so a second
        rollback reports the missing transaction instead of issuing another.

        Args:
            on_done (Callable, optional): Plain or async callable receiving
                the error or ``None``. Defaults to `None`.
        """
        if not self.is_active:
            await self._notify(on_done, ResourceError(CONNECTION_NOT_FOUND))
            return

        self._lease.state = LeaseState.LEASED
        error: Optional[BaseException] = None
        try:
            await self._lease.connection.rollback()
        except Exception as e:
            error = e
            if on_done is None:
                logger.warning("Rollback failed on %s: %s", self._lease, e)
        else:
            logger.debug("Transaction rolled back on %s", self._lease)
        await self._notify(on_done, error)

    @staticmethod
    async def _notify(
        on_done: Optional[RollbackCallback], error: Optional[BaseException]
    ) -> None:
        if on_done is None:
            return
        result = on_done(error)
        if isawaitable(result):
            await result

    def _log_rollback_failure(self, error: Optional[BaseException]) -> None:
        if error is not None:
            logger.critical(
                "Rollback after failed commit also failed on %s: %s",
                self._lease,
                error,
            )
