"""
Tabrik Backend — Media Service
================================

What:  Business logic for the `media` collection (list, create, update, delete).
Who:   Called by the /api/media route handlers.

Media items hold a caption and/or an external audio URL. Logs record only
whether each part is present, never the content.
"""

import logging
from typing import Any, Dict, Optional

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from tabrik.database import MongoConnector
from tabrik.exceptions import DatabaseError
from tabrik.schemas.documents import MediaDocument, MediaFields
from tabrik.services.base import DocumentService, parse_object_id

logger = logging.getLogger(__name__)


class MediaService(DocumentService):
    fields_model = MediaFields
    document_model = MediaDocument
    label = "media"

    created_message = "✅ Media qo'shildi"
    offline_created_message = "✅ Media qo'shildi (test rejimi)"
    updated_message = "✏️ Media yangilandi"
    deleted_message = "🗑️ Media o'chirildi"

    def describe(self, payload: MediaFields) -> Dict[str, Any]:
        return payload.presence()

    async def create_document(
        self,
        connector: MongoConnector,
        payload: MediaFields,
        body: Optional[Dict[str, Any]] = None,
    ):
        if connector.is_connected:
            logger.info(
                "New media received: %s",
                payload.presence(),
                extra={"collection": self.collection_name, **payload.presence()},
            )
        return await super().create_document(connector, payload, body)

    async def update_document(
        self,
        connector: MongoConnector,
        document_id: str,
        payload: MediaFields,
    ) -> Optional[MediaDocument]:
        """
        Set the supplied fields on an existing media item.

        Fields absent from the payload are left untouched. An empty payload
        returns the current document.

        Returns:
            The post-update document, or None when the id does not exist.

        Raises:
            DatabaseError: Malformed id, not connected, or the update failed.
        """
        oid = parse_object_id(document_id)
        collection = connector.collection(self.collection_name)
        changes = payload.to_mongo()

        try:
            if changes:
                doc = await collection.find_one_and_update(
                    {"_id": oid},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
            else:
                doc = await collection.find_one({"_id": oid})
        except PyMongoError as e:
            logger.error("Error updating media %s: %s", document_id, str(e))
            raise DatabaseError(message=str(e), context={"document_id": document_id})

        logger.info(
            "Media updated: %s",
            document_id,
            extra={
                "collection": self.collection_name,
                "document_id": document_id,
                "fields": sorted(changes),
                "found": doc is not None,
            },
        )
        if doc is None:
            return None
        return MediaDocument.from_mongo(doc)


# ── Singleton Instance ────────────────────────────────────────────────────
media_service = MediaService()
