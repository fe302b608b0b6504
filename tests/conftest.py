from unittest.mock import AsyncMock, MagicMock

import pytest

from leasedb import Database
from leasedb.registry import PoolRegistry


@pytest.fixture(autouse=True)
def reset_registry():
    PoolRegistry().reset()


@pytest.fixture
def connection():
    connection = MagicMock()
    connection.begin_transaction = AsyncMock()
    connection.commit = AsyncMock()
    connection.rollback = AsyncMock()
    connection.query = AsyncMock(return_value=[{"id": 1}])
    connection.release = AsyncMock()
    return connection


@pytest.fixture
def pool(connection):
    pool = MagicMock()
    pool.acquire_connection = AsyncMock(return_value=connection)
    return pool


@pytest.fixture
def database(pool):
    return Database(pool)


@pytest.fixture
async def connected(database):
    return await database.get_connection()


@pytest.fixture
async def transactional(database):
    return await database.get_connection(transaction=True)
