"""Process-wide MongoDB connection."""

import asyncio
import logging

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from backend.app.core.errors import DataAccessError
from backend.app.core.settings import get_settings

logger = logging.getLogger(__name__)


class MongoConnection:
    """Lazily connected client for one named database.

    The first caller of ``get_database`` builds the client and pings the
    server. Concurrent first callers wait on the same lock and reuse that
    client. A failed connect caches nothing, so the next caller tries again.
    """

    def __init__(self, uri: str, db_name: str, client_factory=AsyncMongoClient):
        self._uri = uri
        self._db_name = db_name
        self._client_factory = client_factory
        self._client = None
        self._lock = asyncio.Lock()

    @property
    def db_name(self) -> str:
        return self._db_name

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def get_database(self):
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = await self._connect()
        return self._client[self._db_name]

    async def _connect(self):
        client = self._client_factory(self._uri)
        try:
            await client.admin.command("ping")
        except PyMongoError:
            logger.exception("Could not connect to MongoDB database %s", self._db_name)
            await client.close()
            raise DataAccessError("connect to the database") from None
        logger.info("Connected to MongoDB database %s", self._db_name)
        return client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


_connection = None


def get_connection() -> MongoConnection:
    """Return the process-wide connection, creating it on first use."""
    global _connection
    if _connection is None:
        settings = get_settings()
        if not settings.mongodb_uri:
            raise RuntimeError("MONGODB_URI environment variable is not set.")
        _connection = MongoConnection(settings.mongodb_uri, settings.mongodb_db)
    return _connection


async def get_db():
    return await get_connection().get_database()


async def close_connection() -> None:
    global _connection
    if _connection is not None:
        await _connection.close()
        _connection = None
