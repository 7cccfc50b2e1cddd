"""
Generic MongoDB connection manager.

This module provides async MongoDB connectivity that works with any database.
The manager owns one Motor client (and therefore one connection pool); the
application creates it at startup, hands its database handle to the services
that need it and closes it at shutdown. There is no module-level connection.

Example:
    from common.database import MongoDB

    db = MongoDB(timeout_ms=5000)
    await db.connect(uri="mongodb://localhost:27017", database_name="myapp")
    users = db.get_collection("users")
    ...
    await db.disconnect()

Fallback connection strings:
    db = await connect_with_fallback(
        uris=["mongodb+srv://primary...", "mongodb://replica..."],
        database_name="myapp",
        attempts=3,
        backoff_seconds=0.5,
    )
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from common.utils.logging import mask_uri

logger = logging.getLogger(__name__)


class MongoDB:
    """Generic MongoDB connection manager - works with any database."""

    def __init__(self, timeout_ms: int = 5000):
        """
        Args:
            timeout_ms: Bound on server selection, connect and socket waits so
                a stalled backend fails the request instead of hanging it.
        """
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._timeout_ms = timeout_ms

    async def connect(self, uri: str, database_name: str) -> None:
        """
        Connect to MongoDB and confirm the server answers a ping.

        Args:
            uri: MongoDB connection string
            database_name: Name of the database to use

        Raises:
            PyMongoError: If the server cannot be reached within the timeout
        """
        logger.info(f"Connecting to MongoDB: {mask_uri(uri)}")
        logger.debug(f"Database name: {database_name}")

        client = AsyncIOMotorClient(
            uri,
            serverSelectionTimeoutMS=self._timeout_ms,
            connectTimeoutMS=self._timeout_ms,
            socketTimeoutMS=self._timeout_ms,
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            logger.error(f"Failed to connect to MongoDB at {mask_uri(uri)}: {type(e).__name__}")
            raise

        self._client = client
        self._database_name = database_name
        logger.info(f"Successfully connected to MongoDB database: {database_name}")

    async def disconnect(self) -> None:
        """Close the MongoDB connection."""
        if self._client:
            logger.info(f"Disconnecting from MongoDB database: {self._database_name}")
            self._client.close()
            self._client = None
            self._database_name = None
            logger.debug("MongoDB connection closed")

    async def ping(self) -> bool:
        """Round-trip to the server; False when unreachable."""
        if not self._client:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {type(e).__name__}")
            return False

    @property
    def database_name(self) -> Optional[str]:
        """Get the current database name."""
        return self._database_name

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get the underlying Motor database instance."""
        if not self._client or not self._database_name:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]

    def get_collection(self, name: str):
        """
        Get a raw Motor collection for direct access.

        Args:
            name: Collection name

        Returns:
            AsyncIOMotorCollection instance
        """
        if not self._client or not self._database_name:
            logger.error("Attempted to get collection without database connection")
            raise RuntimeError("Database not connected")
        return self._client[self._database_name][name]


async def connect_with_fallback(
    uris: Sequence[str],
    database_name: str,
    attempts: int = 3,
    backoff_seconds: float = 0.5,
    timeout_ms: int = 5000,
) -> MongoDB:
    """
    Try each connection string in order, retrying with exponential backoff.

    Every URI gets up to ``attempts`` tries; the wait doubles after each
    failed try. The first configuration that answers a ping wins.

    Args:
        uris: Connection strings, most preferred first
        database_name: Database to select on the winning connection
        attempts: Tries per connection string
        backoff_seconds: Initial wait between tries
        timeout_ms: Per-operation timeout passed to the client

    Returns:
        A connected MongoDB manager

    Raises:
        ConnectionError: When every configuration is exhausted
    """
    if not uris:
        raise ConnectionError("No MongoDB connection strings configured")

    errors: List[str] = []
    for uri in uris:
        delay = backoff_seconds
        for attempt in range(1, attempts + 1):
            db = MongoDB(timeout_ms=timeout_ms)
            try:
                await db.connect(uri, database_name)
                return db
            except PyMongoError as e:
                errors.append(f"{mask_uri(uri)} (attempt {attempt}): {type(e).__name__}")
                logger.warning(
                    f"MongoDB connection attempt {attempt}/{attempts} to {mask_uri(uri)} failed"
                )
                if attempt < attempts:
                    await asyncio.sleep(delay)
                    delay *= 2

    raise ConnectionError("Unable to connect to MongoDB:\n- " + "\n- ".join(errors))
