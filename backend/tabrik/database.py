"""
Tabrik Backend — MongoDB Connection Management
================================================

What:  The persistence connector: async MongoDB client, connection state and
       a FastAPI dependency that hands the connector to route handlers.
How:   `MongoConnector.connect()` makes a single connection attempt at startup
       (ping with bounded timeouts). Its outcome is the connection state read
       by every request; there is no reconnection loop.
Who:   Created by the application lifespan (main.py) and stored on
       `app.state.mongo`; injected into routes via `Depends(get_connector)`.
When:  Connected once at server startup, closed at shutdown.

Connection states:
    connected       ping succeeded; collections are available
    not-connected   no URI configured or the startup attempt failed
                    (degraded mode: lists are empty, creates are only logged)
"""

import logging
from typing import List, Optional

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from tabrik.config import Settings, settings as default_settings
from tabrik.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class MongoConnector:
    """
    Owns the MongoDB client and the connected/not-connected signal.

    Attributes:
        client:  AsyncMongoClient, or None when not connected
        db:      Database handle, or None when not connected
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.client: Optional[AsyncMongoClient] = None
        self.db: Optional[AsyncDatabase] = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def status(self) -> str:
        """`connected` or `disconnected`, as reported by /health."""
        return "connected" if self._connected else "disconnected"

    async def connect(self) -> bool:
        """
        Make the single startup connection attempt.

        Returns:
            True when MongoDB answered a ping, False in degraded mode.
            Never raises: a failed connection must not stop the server.
        """
        if not self.config.mongodb_configured:
            logger.warning(
                "MONGODB_URI is not set; running without a database (test mode)",
                extra={"connected": False},
            )
            return False

        logger.info("Connecting to MongoDB...")
        client: Optional[AsyncMongoClient] = None
        try:
            client = AsyncMongoClient(
                self.config.mongodb_uri,
                serverSelectionTimeoutMS=self.config.mongodb_server_selection_timeout_ms,
                socketTimeoutMS=self.config.mongodb_socket_timeout_ms,
                tz_aware=True,
            )
            await client.admin.command("ping")
            db = client.get_default_database(default=self.config.mongodb_database)
        except PyMongoError as e:
            logger.error("MongoDB connection failed: %s", str(e), extra={"connected": False})
            logger.warning("Server keeps running without a database (test mode)")
            logger.info(
                "Environment: NODE_ENV=%s, MONGODB_URI %s",
                self.config.environment,
                "set" if self.config.mongodb_configured else "missing",
            )
            if client is not None:
                await client.close()
            return False

        self.client = client
        self.db = db
        self._connected = True
        logger.info(
            "MongoDB connected: %s",
            ", ".join(self._hosts()) or "unknown host",
            extra={"connected": True},
        )
        logger.info("Database: %s", db.name)
        return True

    def _hosts(self) -> List[str]:
        description = self.client.topology_description
        return [f"{host}:{port}" for host, port in description.server_descriptions()]

    def collection(self, name: str) -> AsyncCollection:
        """
        Return a collection handle.

        Raises:
            DatabaseError: In degraded mode. Operations without a fallback
                (update, delete) surface this as a 500 response.
        """
        if self.db is None:
            raise DatabaseError(
                message="Database is not connected",
                context={"collection": name},
            )
        return self.db[name]

    async def close(self) -> None:
        """Close the client on shutdown. Safe to call when never connected."""
        if self.client is not None:
            await self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None
        self._connected = False


# ── Dependency ────────────────────────────────────────────────────────────
def get_connector(request: Request) -> MongoConnector:
    """
    FastAPI dependency returning the connector created by the lifespan.

    Example usage in a route:
        @router.get("/orders")
        async def list_orders(connector: MongoConnector = Depends(get_connector)):
            ...
    """
    return request.app.state.mongo
