"""
Tabrik Backend — Collection Service Base
==========================================

What:  Shared list/create/delete logic for one MongoDB collection, plus the
       degraded-mode guard.
How:   `DocumentService` subclasses name their collection, schema models and
       user-facing messages. List and create are wrapped by
       `fallback_when_disconnected`; delete (and media update) are not, so in
       degraded mode they fail through `MongoConnector.collection()`.
Who:   OrderService and MediaService; called by route handlers.

Degraded mode (connector not connected):
    list    → []
    create  → payload logged, the submitted JSON echoed back as-is (no id,
              no createdAt, unknown fields and original types kept)
    update  → DatabaseError (500)
    delete  → DatabaseError (500)
"""

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from tabrik.database import MongoConnector
from tabrik.exceptions import DatabaseError
from tabrik.schemas.documents import DocumentFields, StoredDocument

logger = logging.getLogger(__name__)

# Newest first; _id breaks ties between documents created in the same millisecond
NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


def fallback_when_disconnected(fallback: Callable[..., Any]):
    """
    Route a service call to `fallback` when the connector is not connected.

    The decorated coroutine and the (synchronous) fallback share the
    signature `(self, connector, *args, **kwargs)`.
    """

    def decorator(method):
        @functools.wraps(method)
        async def wrapper(self, connector: MongoConnector, *args, **kwargs):
            if not connector.is_connected:
                return fallback(self, connector, *args, **kwargs)
            return await method(self, connector, *args, **kwargs)

        return wrapper

    return decorator


def parse_object_id(document_id: str) -> ObjectId:
    """
    Convert a path parameter into an ObjectId.

    Raises:
        DatabaseError: The value is not a 24-character hex ObjectId. Answered
            like any other failed store operation.
    """
    try:
        return ObjectId(document_id)
    except (InvalidId, TypeError):
        raise DatabaseError(
            message=f'Cast to ObjectId failed for value "{document_id}" at path "_id"',
            context={"document_id": document_id},
        )


class DocumentService:
    """
    CRUD operations for a single collection.

    Subclasses set:
        fields_model / document_model   request and response schemas
        label                           noun used in log lines
        created_message, offline_created_message, deleted_message
    """

    fields_model: Type[DocumentFields] = DocumentFields
    document_model: Type[StoredDocument] = StoredDocument
    label: str = "document"

    created_message: str = ""
    offline_created_message: str = ""
    deleted_message: str = ""

    @property
    def collection_name(self) -> str:
        return self.fields_model.collection_name

    def describe(self, payload: DocumentFields) -> Dict[str, Any]:
        """What gets logged about a submitted payload."""
        return payload.to_mongo()

    # ── Degraded-mode fallbacks ───────────────────────────────────────────

    def _offline_list(self, connector: MongoConnector) -> List[StoredDocument]:
        logger.debug(
            "Listing %s without a database",
            self.collection_name,
            extra={"collection": self.collection_name, "connected": False},
        )
        return []

    def _offline_create(
        self,
        connector: MongoConnector,
        payload: DocumentFields,
        body: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, Any], bool]:
        logger.info(
            "MongoDB not connected, %s received but not stored: %s",
            self.label,
            self.describe(payload),
            extra={"collection": self.collection_name, "connected": False, "stored": False},
        )
        echo = dict(body) if body is not None else payload.to_mongo()
        return echo, False

    # ── Operations ────────────────────────────────────────────────────────

    @fallback_when_disconnected(_offline_list)
    async def list_documents(self, connector: MongoConnector) -> List[StoredDocument]:
        """
        All documents of the collection, newest first.

        Driver errors are logged and reported as an empty list.
        """
        collection = connector.collection(self.collection_name)
        try:
            docs = await collection.find().sort(NEWEST_FIRST).to_list(length=None)
        except PyMongoError as e:
            logger.error(
                "Error listing %s: %s",
                self.collection_name,
                str(e),
                extra={"collection": self.collection_name},
            )
            return []

        logger.debug("Listed %d %s", len(docs), self.collection_name)
        return [self.document_model.from_mongo(doc) for doc in docs]

    @fallback_when_disconnected(_offline_create)
    async def create_document(
        self,
        connector: MongoConnector,
        payload: DocumentFields,
        body: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Union[StoredDocument, Dict[str, Any]], bool]:
        """
        Insert a new document with server-assigned `_id` and `createdAt`.

        `body` is the request JSON exactly as submitted. Only the degraded-mode
        echo uses it; the stored document is always built from `payload`.

        Returns:
            (document, stored). `stored` is False only in degraded mode, and
            then `document` is the submitted body rather than a model.

        Raises:
            DatabaseError: The insert failed.
        """
        doc = payload.to_mongo()
        doc["createdAt"] = datetime.now(timezone.utc)

        collection = connector.collection(self.collection_name)
        try:
            await collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(
                "Error saving %s: %s",
                self.label,
                str(e),
                extra={"collection": self.collection_name},
            )
            raise DatabaseError(message=str(e), context={"collection": self.collection_name})

        logger.info(
            "%s saved: %s",
            self.label.capitalize(),
            doc["_id"],
            extra={"collection": self.collection_name, "document_id": str(doc["_id"]), "stored": True},
        )
        return self.document_model.from_mongo(doc), True

    async def delete_document(self, connector: MongoConnector, document_id: str) -> int:
        """
        Delete by id. A missing id is not an error.

        Returns:
            Number of deleted documents (0 or 1).

        Raises:
            DatabaseError: Malformed id, not connected, or the delete failed.
        """
        oid = parse_object_id(document_id)
        collection = connector.collection(self.collection_name)
        try:
            result = await collection.delete_one({"_id": oid})
        except PyMongoError as e:
            logger.error("Error deleting %s %s: %s", self.label, document_id, str(e))
            raise DatabaseError(message=str(e), context={"document_id": document_id})

        logger.info(
            "%s deleted: %s",
            self.label.capitalize(),
            document_id,
            extra={
                "collection": self.collection_name,
                "document_id": document_id,
                "deleted_count": result.deleted_count,
            },
        )
        return result.deleted_count
