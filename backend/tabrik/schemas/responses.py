"""
Tabrik Backend — Response Envelopes
=====================================

What:  Pydantic models for the JSON envelopes the API returns around documents,
       plus the error and health shapes.
Who:   Used by route handlers as `response_model`s (and for the OpenAPI docs).
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


def as_json_document(value: Any) -> Any:
    """Stored documents become their public JSON shape; echoed bodies pass through."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return value


class MessageResponse(BaseModel):
    """Returned by DELETE endpoints."""
    message: str = Field(description="Human-readable confirmation")


class OrderSavedResponse(BaseModel):
    """
    Returned by POST /api/orders.

    `order` is the stored document (with id and createdAt). In degraded mode
    it is the submitted JSON body, unchanged.
    """
    message: str
    order: Dict[str, Any]

    @field_validator("order", mode="before")
    @classmethod
    def dump_order(cls, v: Any) -> Any:
        return as_json_document(v)


class MediaSavedResponse(BaseModel):
    """
    Returned by POST and PUT /api/media.

    `media` is null when PUT targets an id that does not exist, and the
    submitted JSON body when POST runs in degraded mode.
    """
    message: str
    media: Optional[Dict[str, Any]] = None

    @field_validator("media", mode="before")
    @classmethod
    def dump_media(cls, v: Any) -> Any:
        return as_json_document(v)


class ErrorResponse(BaseModel):
    """
    Error format for all API errors.

    Example:
        {"error": "Database is not connected", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Error message")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health, always with HTTP 200."""
    status: str = Field(default="OK")
    timestamp: datetime = Field(description="Current server time (UTC)")
    env: str = Field(description="Environment name (NODE_ENV)")
    mongodb: str = Field(description="connected or disconnected")
    message: str = Field(description="Human-readable database status")
