from __future__ import annotations

from typing import Any, List, Optional

from leasedb.base.interface import BaseConnection, BaseInterface
from leasedb.exception import ConfigurationError, QueryError
from leasedb.policy import Params

try:
    from psycopg import Error as PostgresError
    from psycopg.rows import dict_row
    from psycopg_pool import AsyncConnectionPool

    POSTGRES_ENABLED = True
except ModuleNotFoundError:
    POSTGRES_ENABLED = False


class PostgresConnection(BaseConnection):
    """Leased psycopg connection.

    The connection runs in autocommit mode; transactions are opened and
    closed with explicit statements so that a connection leased without a
    transaction never holds one implicitly.
    """

    def __init__(self, pool: Any, conn: Any) -> None:
        self._pool = pool
        self._conn = conn

    async def _execute(self, text: str, params: Params = None) -> Any:
        try:
            return await self._conn.execute(text, params)
        except PostgresError as e:
            raise QueryError(e.sqlstate, str(e)) from e

    async def begin_transaction(self) -> None:
        await self._execute("BEGIN")

    async def commit(self) -> None:
        await self._execute("COMMIT")

    async def rollback(self) -> None:
        await self._execute("ROLLBACK")

    async def query(self, text: str, params: Params = None) -> List[Any]:
        try:
            async with self._conn.cursor(row_factory=dict_row) as cursor:
                await cursor.execute(text, params)
                if cursor.description is None:
                    return []
                return await cursor.fetchall()
        except PostgresError as e:
            raise QueryError(e.sqlstate, str(e)) from e

    async def release(self) -> None:
        await self._pool.putconn(self._conn)


class PostgresPool(BaseInterface):
    """Interface for connecting to a Postgres database"""

    scheme = "postgres"

    def _setup_pool(self):
        if not POSTGRES_ENABLED:
            raise ConfigurationError(
                "Postgres driver not found. Try reinstalling leasedb: "
                "pip install leasedb[postgres]"
            )
        self._pool = AsyncConnectionPool(
            self.full_dsn,
            min_size=self.min_size,
            max_size=self.max_size,
            kwargs={"autocommit": True},
            open=False,
        )

    async def open(self):
        """Open connections to the pool"""
        await self._pool.open()
        self._opened = True

    async def close(self):
        """Close connections to the pool"""
        await self._pool.close()
        self._opened = False

    async def _acquire(
        self, timeout: Optional[float] = None
    ) -> PostgresConnection:
        conn = await self._pool.getconn(timeout=timeout)
        return PostgresConnection(self._pool, conn)
