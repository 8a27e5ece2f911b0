# src/utxo_gateway/storage/database.py
import json
import logging
from typing import Any, List, Optional

import asyncpg

from ..config import GatewaySettings
from ..exceptions import DatabaseError

logger = logging.getLogger(__name__)


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode json/jsonb columns into Python objects"""
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog"
        )


class Database:
    def __init__(self, settings: GatewaySettings):
        """Hold connection parameters; the pool is created by connect()"""
        self.settings = settings
        self._pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        """Create the connection pool"""
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(
                user=self.settings.db_user,
                host=self.settings.db_host,
                port=self.settings.db_port,
                database=self.settings.db_name,
                password=self.settings.db_password or None,
                min_size=self.settings.db_min_pool_size,
                max_size=self.settings.db_max_pool_size,
                init=_init_connection
            )
        except (asyncpg.PostgresError, OSError) as e:
            raise DatabaseError(f"Error connecting to database: {str(e)}")
        logger.info(
            "Connected to %s@%s:%s/%s",
            self.settings.db_user, self.settings.db_host,
            self.settings.db_port, self.settings.db_name
        )

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise DatabaseError("Database is not connected")
        return self._pool

    async def fetch(self, query: str, *args: Any) -> List[asyncpg.Record]:
        """Run a query and return all rows"""
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetch(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise DatabaseError(f"Error fetching rows: {str(e)}")

    async def fetchrow(self, query: str, *args: Any) -> Optional[asyncpg.Record]:
        """Run a query and return the first row, or None"""
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchrow(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise DatabaseError(f"Error fetching row: {str(e)}")

    async def fetchval(self, query: str, *args: Any) -> Any:
        """Run a query and return the first column of the first row"""
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchval(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise DatabaseError(f"Error fetching value: {str(e)}")

    async def close(self) -> None:
        """Close the connection pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")
