from __future__ import annotations

from collections.abc import Mapping
from inspect import isawaitable
from typing import Any, List, Optional

from leasedb.base.interface import BaseConnection, BaseInterface
from leasedb.exception import ConfigurationError, QueryError
from leasedb.policy import Params

try:
    from asyncmy import create_pool
    from asyncmy.cursors import DictCursor
    from asyncmy.errors import MySQLError

    MYSQL_ENABLED = True
except ModuleNotFoundError:
    MYSQL_ENABLED = False

# Symbolic names for the server and client error numbers most often seen in
# retry policies. Unlisted numbers are reported as their decimal string.
MYSQL_ERROR_CODES = {
    1062: "ER_DUP_ENTRY",
    1064: "ER_PARSE_ERROR",
    1146: "ER_NO_SUCH_TABLE",
    1205: "ER_LOCK_WAIT_TIMEOUT",
    1213: "ER_LOCK_DEADLOCK",
    1040: "ER_CON_COUNT_ERROR",
    2006: "CR_SERVER_GONE_ERROR",
    2013: "CR_SERVER_LOST",
}


def mysql_error_code(error: BaseException) -> Optional[str]:
    if not error.args or not isinstance(error.args[0], int):
        return None
    errno = error.args[0]
    return MYSQL_ERROR_CODES.get(errno, str(errno))


class MysqlConnection(BaseConnection):
    def __init__(self, pool: Any, conn: Any) -> None:
        self._pool = pool
        self._conn = conn

    async def begin_transaction(self) -> None:
        await self._conn.begin()

    async def commit(self) -> None:
        await self._conn.commit()

    async def rollback(self) -> None:
        await self._conn.rollback()

    async def query(self, text: str, params: Params = None) -> List[Any]:
        try:
            async with self._conn.cursor(cursor=DictCursor) as cursor:
                exec_values: Any = None
                if isinstance(params, Mapping):
                    exec_values = dict(params)
                elif params is not None:
                    exec_values = list(params)
                await cursor.execute(text, exec_values)
                if cursor.description is None:
                    return []
                return list(await cursor.fetchall())
        except MySQLError as e:
            message = e.args[1] if len(e.args) > 1 else str(e)
            raise QueryError(mysql_error_code(e), message) from e

    async def release(self) -> None:
        released = self._pool.release(self._conn)
        if isawaitable(released):
            await released


class MysqlPool(BaseInterface):
    """Interface for connecting to a MySQL database"""

    scheme = "mysql"

    def _setup_pool(self):
        if not MYSQL_ENABLED:
            raise ConfigurationError(
                "MySQL driver not found. Try reinstalling leasedb: "
                "pip install leasedb[mysql]"
            )
        self._pool = None

    async def open(self):
        """Open connections to the pool"""
        kwargs = {"maxsize": self.max_size} if self.max_size else {}
        self._pool = await create_pool(
            user=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            db=self.db,
            minsize=self.min_size,
            autocommit=True,
            **kwargs,
        )
        self._opened = True

    async def close(self):
        """Close connections to the pool"""
        if self._pool is not None:
            self._pool.close()
            await self._pool.wait_closed()
        self._opened = False

    async def _acquire(self) -> MysqlConnection:
        conn = await self._pool.acquire()
        return MysqlConnection(self._pool, conn)
