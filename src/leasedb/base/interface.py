from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import namedtuple
from typing import Any, Dict, List, Optional, Set, Type
from urllib.parse import urlparse

from leasedb.exception import (
    AcquisitionError,
    ConfigurationError,
    LeaseDBError,
)
from leasedb.policy import Params

logger = logging.getLogger(__name__)

UrlMapping = namedtuple("UrlMapping", ("key", "cast"))


URLPARSE_MAPPING = {
    "hostname": UrlMapping("_host", str),
    "username": UrlMapping("_user", str),
    "password": UrlMapping("_password", str),
    "port": UrlMapping("_port", int),
    "path": UrlMapping("_db", lambda value: value.replace("/", "")),
    "query": UrlMapping("_query", str),
}

DEFAULT_PORTS = {
    "postgres": 5432,
    "mysql": 3306,
}


class BaseConnection(ABC):
    """A single leased driver connection.

    This is the narrow surface that the lease, transaction controller and
    retrying executor rely on. Every method is awaited.
    """

    @abstractmethod
    async def begin_transaction(self) -> None: ...

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...

    @abstractmethod
    async def query(self, text: str, params: Params = None) -> List[Any]: ...

    @abstractmethod
    async def release(self) -> None: ...


class BaseInterface(ABC):
    scheme = "dummy"
    registered_interfaces: Set[Type[BaseInterface]] = set()

    def __init_subclass__(cls) -> None:
        BaseInterface.registered_interfaces.add(cls)

    @abstractmethod
    def _setup_pool(self): ...

    @abstractmethod
    async def open(self): ...

    @abstractmethod
    async def close(self): ...

    @abstractmethod
    async def _acquire(self) -> BaseConnection: ...

    def __init__(
        self,
        dsn: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        db: Optional[str] = None,
        query: Optional[str] = None,
        min_size: int = 1,
        max_size: Optional[int] = None,
    ) -> None:
        """Pool initialization.

        Args:
            dsn (str, optional): DB data source name
            host (str, optional): DB address URL or IP
            port (int, optional): DB port
            user (str, optional): DB user
            password (str, optional): DB password
            db (str, optional): DB name
            query (str, optional): DB query parameters. Defaults to None
            min_size (int, optional): Minimum number of connections in pool.
                Defaults to 1
            max_size (int, optional): Maximum number of connections in pool.
                Defaults to None
        """

        if dsn and host:
            raise ConfigurationError("Cannot connect to DB using host and dsn")

        if not dsn:
            if port and (
                not isinstance(port, int) or port not in range(0, 65536)
            ):
                raise ConfigurationError(
                    "port: must be an integer between 0 and 65535"
                )

            if host and (not isinstance(host, str) or not len(host) > 0):
                raise ConfigurationError(
                    "host: must be a string at least 1 character long"
                )

        if password is not None and (
            not isinstance(password, str) or not len(password) > 0
        ):
            raise ConfigurationError(
                "password: must be a string at least 1 character long"
            )

        self._dsn = dsn
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._db = db
        self._query = query
        self._min_size = min_size
        self._max_size = max_size
        self._full_dsn: Optional[str] = None
        self._opened = False

        self._populate_connection_args()
        self._populate_dsn()
        self._setup_pool()

    @classmethod
    def from_dsn(
        cls, dsn: str, min_size: int = 1, max_size: Optional[int] = None
    ) -> BaseInterface:
        return cls(dsn, min_size=min_size, max_size=max_size)

    def __str__(self) -> str:
        return f"<{self.__class__.__name__} {self.dsn}>"

    def _populate_connection_args(self):
        dsn = self.dsn or ""
        if dsn:
            parts = urlparse(dsn)
            defaults: Dict[str, Any] = {
                "port": DEFAULT_PORTS.get(self.scheme),
                "hostname": "localhost",
                "username": None,
                "password": None,
                "path": "/",
                "query": "",
            }
            for key, mapping in URLPARSE_MAPPING.items():
                if not getattr(self, mapping.key):
                    value = getattr(parts, key, None)
                    if value is None:
                        value = defaults.get(key)
                    if value is not None:
                        setattr(self, mapping.key, mapping.cast(value))

    def _populate_dsn(self):
        self._dsn = (
            (
                f"{self.scheme}://{self.user}:...@"
                f"{self.host}:{self.port}/{self.db}"
            )
            if self.password
            else (
                f"{self.scheme}://{self.user}@"
                f"{self.host}:{self.port}/{self.db}"
            )
        )
        self._full_dsn = (
            (
                f"{self.scheme}://{self.user}:{self.password}@"
                f"{self.host}:{self.port}/{self.db}"
            )
            if self.password
            else self.dsn
        )
        self._full_dsn += f"?{self._query}" if self._query else ""

    async def acquire_connection(self) -> BaseConnection:
        """Lease a connection from the pool, opening the pool if needed

        Raises:
            AcquisitionError: If the pool cannot be opened or cannot hand
                out a connection

        Returns:
            BaseConnection: A connection owned by the caller until released
        """
        try:
            if not self._opened:
                await self.open()
            connection = await self._acquire()
        except LeaseDBError:
            raise
        except Exception as e:
            raise AcquisitionError(
                f"Failed to acquire connection from {self}: {e}"
            ) from e
        logger.debug("Acquired connection from %s", self)
        return connection

    @property
    def dsn(self):
        return self._dsn

    @property
    def host(self):
        return self._host

    @property
    def port(self):
        return self._port

    @property
    def user(self):
        return self._user

    @property
    def password(self):
        return self._password

    @property
    def db(self):
        return self._db

    @property
    def full_dsn(self):
        return self._full_dsn

    @property
    def min_size(self):
        return self._min_size

    @property
    def max_size(self):
        return self._max_size
