from importlib.metadata import version

from .base.interface import BaseConnection, BaseInterface
from .database import Database
from .exception import (
    AcquisitionError,
    ConfigurationError,
    LeaseDBError,
    QueryError,
    ResourceError,
    TransactionError,
)
from .executor import RetryingExecutor
from .lease import ConnectionLease
from .policy import QueryRequest, RetryPolicy
from .sql.mysql.interface import MysqlPool
from .sql.postgres.interface import PostgresPool
from .sql.sqlite.interface import SQLitePool
from .transaction import LeaseState, TransactionController, TransactionState

__version__ = version("leasedb")

__all__ = (
    "BaseConnection",
    "BaseInterface",
    "ConnectionLease",
    "Database",
    "LeaseState",
    "MysqlPool",
    "PostgresPool",
    "QueryRequest",
    "RetryingExecutor",
    "RetryPolicy",
    "SQLitePool",
    "TransactionController",
    "TransactionState",
    "AcquisitionError",
    "ConfigurationError",
    "LeaseDBError",
    "QueryError",
    "ResourceError",
    "TransactionError",
)
