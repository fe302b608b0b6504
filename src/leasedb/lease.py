from __future__ import annotations

import logging
from typing import Optional

from leasedb.base.interface import BaseConnection, BaseInterface
from leasedb.exception import (
    CONNECTION_NOT_FOUND,
    AcquisitionError,
    LeaseDBError,
    ResourceError,
)
from leasedb.transaction import LeaseState, TransactionController

logger = logging.getLogger(__name__)


class ConnectionLease:
    """Exclusive ownership of at most one pooled connection.

    The lease also carries the transaction state, so that the connection
    and its transaction are created and destroyed together.
    """

    def __init__(self, pool: BaseInterface) -> None:
        self._pool = pool
        self._connection: Optional[BaseConnection] = None
        self.state = LeaseState.UNLEASED
        self.transaction = TransactionController(self)

    def __str__(self) -> str:
        return f"<{self.__class__.__name__} {self._pool} {self.state.value}>"

    @property
    def pool(self) -> BaseInterface:
        return self._pool

    @property
    def connection(self) -> BaseConnection:
        if self._connection is None:
            raise ResourceError(CONNECTION_NOT_FOUND)
        return self._connection

    @property
    def is_held(self) -> bool:
        return self.state is not LeaseState.UNLEASED

    async def acquire(self, want_transaction: bool = False) -> BaseConnection:
        """Lease a connection from the pool

        If a transaction is wanted and fails to begin, the error is raised
        but the connection stays leased. It must still be released.

        Args:
            want_transaction (bool, optional): Begin a transaction right
                after acquiring. Defaults to `False`.

        Raises:
            AcquisitionError: If a connection is already held or the pool
                fails to provide one

        Returns:
            BaseConnection: The leased connection
        """
        if self.is_held:
            raise AcquisitionError(
                f"{self} already holds a connection; close it first"
            )

        try:
            connection = await self._pool.acquire_connection()
        except LeaseDBError:
            raise
        except Exception as e:
            raise AcquisitionError(
                f"Failed to acquire connection from {self._pool}: {e}"
            ) from e

        self._connection = connection
        self.state = LeaseState.LEASED
        logger.debug("Leased connection from %s", self._pool)

        if want_transaction:
            await self.transaction.begin()
        return connection

    async def release(self) -> None:
        """Return the connection to the pool

        An active transaction is committed first. If that commit fails, the
        error is raised and the connection is kept.

        Raises:
            ResourceError: If no connection is held
        """
        if not self.is_held:
            raise ResourceError(CONNECTION_NOT_FOUND)

        if self.transaction.is_active:
            logger.debug("Auto-committing open transaction on %s", self)
            await self.transaction.commit()

        connection = self.connection
        try:
            await connection.release()
        finally:
            self._connection = None
            self.state = LeaseState.UNLEASED
        logger.debug("Released connection to %s", self._pool)
