"""Waitlist storage backed by a MongoDB collection.

The Mongo client is a process-wide, lazily created handle. It is reused while
it answers a ping and rebuilt transparently when it goes stale, so a cold or
broken connection only costs latency, never correctness.
"""

import logging
import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from waitlist.config import get_settings
from waitlist.errors import StoreUnavailableError, WriteFailedError
from waitlist.schemas import WaitlistEntry

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "waitlist"
DEFAULT_COLLECTION = "emails"


class WaitlistStore(ABC):
    """Abstract interface for the waitlist collection."""

    @abstractmethod
    def insert(self, entry: WaitlistEntry) -> str:
        """
        Persist one entry.

        Args:
            entry: Validated entry to write

        Returns:
            Identifier assigned by the store, as a string

        Raises:
            StoreUnavailableError: No connection could be established
            WriteFailedError: The write itself failed
        """

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the store is reachable. Never raises."""

    def close(self) -> None:
        """Release any held connection."""


def redact_uri(uri: str) -> str:
    """Hide credentials in a connection string before logging it."""
    if "@" not in uri:
        return uri
    scheme, _, rest = uri.partition("://")
    host = rest.rsplit("@", 1)[1]
    return f"{scheme}://***:***@{host}"


class MongoWaitlistStore(WaitlistStore):
    """Waitlist store writing to ``<database>.<collection>`` in MongoDB."""

    def __init__(
        self,
        uri: Optional[str],
        database: str = DEFAULT_DATABASE,
        collection: str = DEFAULT_COLLECTION,
        client_factory=MongoClient,
        **client_options: Any,
    ):
        self.uri = uri
        self.database_name = database
        self.collection_name = collection
        self.client_options = client_options
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._lock = threading.Lock()

    # ==================== Connection ====================

    def _connect(self) -> MongoClient:
        """Create a new client and verify it with a ping."""
        if not self.uri:
            raise StoreUnavailableError("MONGODB_URI environment variable is not set")

        logger.info(
            "Creating new MongoDB client for %s",
            redact_uri(self.uri),
            extra={"event": "store.connect"},
        )
        client = None
        try:
            client = self._client_factory(
                self.uri,
                server_api=ServerApi("1", strict=True, deprecation_errors=True),
                **self.client_options,
            )
            client.admin.command("ping")
        except PyMongoError as e:
            if client is not None:
                client.close()
            logger.error(
                "Failed to connect to MongoDB: %s",
                e,
                extra={"event": "store.connect_failed", "error": type(e).__name__},
            )
            raise StoreUnavailableError(f"MongoDB connection failed: {e}") from e

        logger.info("MongoDB connected successfully", extra={"event": "store.connected"})
        return client

    def _is_healthy(self, client: MongoClient) -> bool:
        try:
            client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(
                "Cached MongoDB client failed health check: %s",
                e,
                extra={"event": "store.stale", "error": type(e).__name__},
            )
            return False

    def get_client(self) -> MongoClient:
        """Return the cached client if healthy, otherwise reconnect.

        The lock only guards reading and swapping ``self._client``; pings and
        connects run outside it so one slow server selection does not stall
        every other caller.
        """
        with self._lock:
            client = self._client

        if client is not None:
            if self._is_healthy(client):
                logger.debug("Using cached MongoDB client")
                return client
            with self._lock:
                if self._client is client:
                    self._client = None
            self._close_quietly(client)

        fresh = self._connect()
        with self._lock:
            if self._client is None:
                self._client = fresh
                return fresh
            existing = self._client

        # Another caller installed a client while we were connecting
        self._close_quietly(fresh)
        return existing

    @staticmethod
    def _close_quietly(client: MongoClient) -> None:
        try:
            client.close()
        except PyMongoError as e:
            logger.debug("Ignoring error while closing MongoDB client: %s", e)

    def get_collection(self) -> Collection:
        """Target collection on a healthy client."""
        return self.get_client()[self.database_name][self.collection_name]

    # ==================== WaitlistStore ====================

    def insert(self, entry: WaitlistEntry) -> str:
        collection = self.get_collection()
        try:
            result = collection.insert_one(entry.to_document())
        except PyMongoError as e:
            logger.error(
                "Error inserting email: %s",
                e,
                extra={"event": "store.write_failed", "error": type(e).__name__},
            )
            raise WriteFailedError(f"Insert failed: {e}") from e
        return str(result.inserted_id)

    def ping(self) -> bool:
        try:
            self.get_client()
            return True
        except StoreUnavailableError:
            return False

    def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            self._close_quietly(client)


@lru_cache
def get_store() -> WaitlistStore:
    """Process-wide store built from settings."""
    settings = get_settings()
    return MongoWaitlistStore(
        settings.mongodb_uri,
        database=settings.mongodb_database,
        collection=settings.mongodb_collection,
        **settings.mongo_client_options(),
    )


def reset_store() -> None:
    """Close the process-wide store and forget it."""
    if get_store.cache_info().currsize:
        get_store().close()
    get_store.cache_clear()
