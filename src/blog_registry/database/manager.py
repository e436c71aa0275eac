"""
# Database Manager

MongoDB connection lifecycle for the registry's persistent state, built on
**Motor** (async MongoDB driver).

**Lifecycle:**
1. **Instantiation**: `db_manager` is created at import time, no I/O.
2. **Connection**: `connect()` establishes the client, retrying with exponential backoff.
3. **Operations**: `get_collection()` hands out Motor collections to the state store.
4. **Shutdown**: `disconnect()` closes the client.

```python
from blog_registry.database import db_manager

await db_manager.connect()
await db_manager.create_indexes()
authors = db_manager.get_collection("authors")
await db_manager.disconnect()
```

The manager is only used when `settings.STORAGE_BACKEND == "mongodb"`.
"""

import asyncio
import time
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from blog_registry.config import settings
from blog_registry.database.state_store import REGISTRY_COLLECTIONS
from blog_registry.managers.logging_manager import get_logger

db_logger = get_logger(prefix="[DATABASE]")
perf_logger = get_logger(prefix="[DB_PERFORMANCE]")
health_logger = get_logger(prefix="[DB_HEALTH]")


class DatabaseManager:
    """
    Manages the MongoDB client and database used as the registry ledger.

    Attributes:
        client (`Optional[AsyncIOMotorClient]`): The Motor client, `None` until `connect()` succeeds.
        database (`Optional[AsyncIOMotorDatabase]`): The selected database, `None` until connected.
    """

    def __init__(self, connection_retries: int = 3):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._connection_retries = connection_retries

    @property
    def database_name(self) -> str:
        return settings.MONGODB_DATABASE

    def _connection_string(self) -> str:
        if settings.MONGODB_USERNAME and settings.MONGODB_PASSWORD:
            password = settings.MONGODB_PASSWORD.get_secret_value()
            db_logger.debug("Using authenticated connection to MongoDB")
            return (
                f"mongodb://{settings.MONGODB_USERNAME}:{password}@"
                f"{settings.MONGODB_URL.replace('mongodb://', '')}"
            )
        db_logger.debug("Using unauthenticated connection to MongoDB")
        return settings.MONGODB_URL

    async def connect(self):
        """
        Establish the MongoDB connection with exponential backoff (1s, 2s, ...).

        Raises:
            `ServerSelectionTimeoutError`: If MongoDB is unreachable after all attempts.
            `ConnectionFailure`: If authentication fails or the connection is refused.
            `ConnectionError`: If `MONGODB_URL` is not configured.
        """
        if not settings.MONGODB_URL:
            raise ConnectionError("MONGODB_URL is not configured")

        start_time = time.time()
        db_logger.info("Starting MongoDB connection process")

        for attempt in range(self._connection_retries):
            attempt_start = time.time()
            try:
                db_logger.info("Connection attempt %d/%d to MongoDB", attempt + 1, self._connection_retries)

                self.client = AsyncIOMotorClient(
                    self._connection_string(),
                    serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    connectTimeoutMS=settings.MONGODB_CONNECTION_TIMEOUT,
                )
                self.database = self.client[settings.MONGODB_DATABASE]

                ping_start = time.time()
                await self.client.admin.command("ping")
                ping_duration = time.time() - ping_start

                perf_logger.info(
                    "MongoDB connection established in %.3fs (ping: %.3fs)", time.time() - start_time, ping_duration
                )
                db_logger.info("Successfully connected to MongoDB database: %s", settings.MONGODB_DATABASE)
                return

            except (ServerSelectionTimeoutError, ConnectionFailure) as e:
                perf_logger.warning("Connection attempt %d failed after %.3fs", attempt + 1, time.time() - attempt_start)
                db_logger.warning(
                    "Failed to connect to MongoDB (attempt %d/%d): %s", attempt + 1, self._connection_retries, e
                )
                if attempt == self._connection_retries - 1:
                    db_logger.error("All connection attempts failed after %.3fs", time.time() - start_time)
                    raise

                backoff_time = 2**attempt
                db_logger.info("Waiting %.1fs before retry (exponential backoff)", backoff_time)
                await asyncio.sleep(backoff_time)

    async def disconnect(self):
        """Close the Motor client. Safe to call when not connected."""
        if not self.client:
            db_logger.warning("Disconnect called but no active MongoDB connection found")
            return

        start_time = time.time()
        self.client.close()
        self.client = None
        self.database = None
        perf_logger.info("MongoDB disconnection completed in %.3fs", time.time() - start_time)
        db_logger.info("Successfully disconnected from MongoDB")

    async def health_check(self) -> bool:
        """Ping MongoDB. Returns False instead of raising when the database is unavailable."""
        if not self.client:
            health_logger.warning("Health check failed: no MongoDB client")
            return False

        start_time = time.time()
        try:
            await self.client.admin.command("ping")
            perf_logger.debug("Database health check completed in %.3fs", time.time() - start_time)
            return True
        except PyMongoError as e:
            health_logger.error("MongoDB health check failed after %.3fs: %s", time.time() - start_time, e)
            return False

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Retrieve a collection from the connected database.

        Raises:
            `ConnectionError`: If `connect()` has not been called.
        """
        if self.database is None:
            db_logger.error("Attempted to get collection '%s' without database connection", collection_name)
            raise ConnectionError("Database not connected. Call connect() first.")

        db_logger.debug("Retrieving collection: %s", collection_name)
        return self.database[collection_name]

    async def create_indexes(self):
        """Ensure the insertion-order index on every registry collection."""
        for collection_name in REGISTRY_COLLECTIONS:
            start_time = time.time()
            try:
                await self.get_collection(collection_name).create_index([("seq", ASCENDING)], name="seq_1")
                perf_logger.debug("Ensured seq index on '%s' in %.3fs", collection_name, time.time() - start_time)
            except PyMongoError as e:
                db_logger.warning("Could not create seq index on '%s': %s", collection_name, e)
