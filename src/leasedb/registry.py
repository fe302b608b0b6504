from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Type

if TYPE_CHECKING:
    from leasedb.base.interface import BaseInterface


class PoolRegistry:
    """
    Registry to ensure databases created from the same DSN share the same
    pool instance.
    """

    _singleton = None
    _pools: Dict[str, BaseInterface]

    def __new__(cls, *args, **kwargs):
        if cls._singleton is None:
            cls.reset()
        return cls._singleton

    @classmethod
    def get_or_create(
        cls,
        dsn: str,
        pool_class: Type[BaseInterface],
        min_size: int = 1,
        max_size: Optional[int] = None,
    ) -> BaseInterface:
        """
        Get existing pool or create new one for DSN.

        Args:
            dsn: Database connection string
            pool_class: Class to use for creating new pool
            min_size: Minimum number of connections in pool
            max_size: Maximum number of connections in pool

        Returns:
            Shared pool instance for the DSN
        """
        instance = cls()
        if dsn not in instance._pools:
            instance._pools[dsn] = pool_class.from_dsn(
                dsn, min_size=min_size, max_size=max_size
            )
        return instance._pools[dsn]

    @classmethod
    def get(cls, dsn: str) -> Optional[BaseInterface]:
        """Get pool for DSN if it exists"""
        instance = cls()
        return instance._pools.get(dsn)

    @classmethod
    async def close_all(cls) -> None:
        """Close every registered pool"""
        instance = cls()
        for pool in instance._pools.values():
            await pool.close()

    @classmethod
    def reset(cls):
        """Reset the registry (useful for testing)"""
        cls._singleton = super().__new__(cls)
        cls._singleton._pools = {}
