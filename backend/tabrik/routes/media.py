"""
Tabrik Backend — Media Route Handlers
=======================================

What:  GET/POST /api/media, PUT/DELETE /api/media/{media_id}.
Who:   Called by the media admin page of the frontend.

PUT and DELETE have no degraded-mode fallback: without a database they
answer 500 with `{"error": "Database is not connected"}`.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from tabrik.database import MongoConnector, get_connector
from tabrik.schemas.documents import MediaDocument, MediaFields
from tabrik.schemas.responses import ErrorResponse, MediaSavedResponse, MessageResponse
from tabrik.services.media_service import media_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Media"])

_ERRORS = {
    500: {
        "description": "Malformed id, database unavailable or operation failed",
        "model": ErrorResponse,
    },
}


@router.get(
    "/media",
    response_model=List[MediaDocument],
    response_model_exclude_unset=True,
    summary="List media items, newest first",
)
async def list_media(
    connector: MongoConnector = Depends(get_connector),
) -> List[MediaDocument]:
    media = await media_service.list_documents(connector)
    logger.info("Media requested: %d items", len(media))
    return media


@router.post(
    "/media",
    response_model=MediaSavedResponse,
    response_model_exclude_unset=True,
    responses={500: _ERRORS[500]},
    summary="Add a media item",
)
async def create_media(
    payload: MediaFields,
    request: Request,
    connector: MongoConnector = Depends(get_connector),
) -> MediaSavedResponse:
    body = await request.json()
    media, stored = await media_service.create_document(connector, payload, body)
    message = media_service.created_message if stored else media_service.offline_created_message
    return MediaSavedResponse(message=message, media=media)


@router.put(
    "/media/{media_id}",
    response_model=MediaSavedResponse,
    response_model_exclude_unset=True,
    responses=_ERRORS,
    summary="Update fields of a media item",
    description="Only the supplied fields change. `media` is null when the id does not exist.",
)
async def update_media(
    media_id: str,
    payload: MediaFields,
    connector: MongoConnector = Depends(get_connector),
) -> MediaSavedResponse:
    media = await media_service.update_document(connector, media_id, payload)
    return MediaSavedResponse(message=media_service.updated_message, media=media)


@router.delete(
    "/media/{media_id}",
    response_model=MessageResponse,
    responses=_ERRORS,
    summary="Delete a media item",
)
async def delete_media(
    media_id: str,
    connector: MongoConnector = Depends(get_connector),
) -> MessageResponse:
    await media_service.delete_document(connector, media_id)
    return MessageResponse(message=media_service.deleted_message)
