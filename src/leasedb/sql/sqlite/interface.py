from __future__ import annotations

from typing import Any, List, Optional
from urllib.parse import urlparse

from leasedb.base.interface import BaseConnection, BaseInterface
from leasedb.exception import ConfigurationError, QueryError
from leasedb.policy import Params

try:
    import aiosqlite

    AIOSQLITE_ENABLED = True
except ModuleNotFoundError:
    AIOSQLITE_ENABLED = False


def sqlite_error_code(error: BaseException) -> str:
    return getattr(error, "sqlite_errorname", None) or type(error).__name__


class SQLiteConnection(BaseConnection):
    def __init__(self, db: Any) -> None:
        self._db = db

    async def _execute(self, text: str, params: Params = None) -> List[Any]:
        try:
            async with self._db.execute(text, params or ()) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise QueryError(sqlite_error_code(e), str(e)) from e
        return [dict(row) for row in rows]

    async def begin_transaction(self) -> None:
        await self._execute("BEGIN")

    async def commit(self) -> None:
        await self._execute("COMMIT")

    async def rollback(self) -> None:
        await self._execute("ROLLBACK")

    async def query(self, text: str, params: Params = None) -> List[Any]:
        return await self._execute(text, params)

    async def release(self) -> None:
        await self._db.close()


class SQLitePool(BaseInterface):
    """Interface for connecting to a SQLite database

    SQLite has no server side pool; every lease opens its own connection to
    the database file and closes it on release.
    """

    scheme = "sqlite"

    def __init__(self, db_path: str):
        self._db_path = db_path
        super().__init__()

    @classmethod
    def from_dsn(
        cls, dsn: str, min_size: int = 1, max_size: Optional[int] = None
    ) -> SQLitePool:
        parts = urlparse(dsn)
        path = f"{parts.netloc}{parts.path}"
        if path.startswith("/") and not parts.netloc:
            path = path[1:]
        return cls(path)

    def __str__(self) -> str:
        return f"<{self.__class__.__name__} {self._db_path}>"

    def _setup_pool(self):
        if not AIOSQLITE_ENABLED:
            raise ConfigurationError(
                "SQLite driver not found. Try reinstalling leasedb: "
                "pip install leasedb[sqlite]"
            )

    def _populate_dsn(self): ...

    def _populate_connection_args(self): ...

    @property
    def db_path(self) -> str:
        return self._db_path

    async def open(self):
        self._opened = True

    async def close(self):
        self._opened = False

    async def _acquire(self) -> SQLiteConnection:
        db = await aiosqlite.connect(self._db_path, isolation_level=None)
        db.row_factory = aiosqlite.Row
        return SQLiteConnection(db)
