"""
Tabrik Backend — Document Schemas
===================================

What:  Pydantic models for the two MongoDB collections, `orders` and `media`.
How:   Each collection has a *fields* model (what clients may send) and a
       *document* model (what the API returns: fields + id + createdAt).
Who:   Routes use the fields models as request bodies; services build the
       document models from stored MongoDB documents.

Typing rules (same casting as the previous Node.js backend):
    - Every field is optional; missing fields are simply not stored.
    - Unknown fields are ignored.
    - Numbers are accepted for string fields ("telefon": 998901234567).
    - Empty strings for numeric/date fields become null.
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocumentFields(BaseModel):
    """Base for client-supplied document fields."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    collection_name: ClassVar[str] = ""

    def to_mongo(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, keyed by stored name."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Orders
# ══════════════════════════════════════════════════════════════════════════


class OrderFields(DocumentFields):
    """
    A single customer submission (a song dedication request).

    Field names are the stored names used by the frontend.
    """

    collection_name: ClassVar[str] = "orders"

    ism: Optional[str] = Field(default=None, description="Name")
    yosh: Optional[Union[int, float]] = Field(default=None, description="Age")
    tugilgan_sana: Optional[datetime] = Field(default=None, description="Birth date")
    telefon: Optional[str] = Field(default=None, description="Phone")
    tabriklovchilar: Optional[str] = Field(default=None, description="Well-wishers")
    asosiy: Optional[str] = Field(default=None, description="Main request text")
    murojaat: Optional[str] = Field(default=None, description="Address / message")
    qoshiq: Optional[str] = Field(default=None, description="Requested song")
    buyurtmachi_telefon: Optional[str] = Field(default=None, description="Orderer's phone")

    @field_validator("yosh", "tugilgan_sana", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


# ══════════════════════════════════════════════════════════════════════════
# Media
# ══════════════════════════════════════════════════════════════════════════


class MediaFields(DocumentFields):
    """A text/audio content item. Audio is referenced by URL only."""

    collection_name: ClassVar[str] = "media"

    text: Optional[str] = Field(default=None, description="Caption or content")
    audio_url: Optional[str] = Field(
        default=None,
        alias="audioUrl",
        description="URL of externally hosted audio",
    )

    def presence(self) -> Dict[str, bool]:
        """Which parts were supplied; logged instead of the content itself."""
        return {"text": bool(self.text), "audio": bool(self.audio_url)}


# ══════════════════════════════════════════════════════════════════════════
# Stored documents (responses)
# ══════════════════════════════════════════════════════════════════════════


class StoredDocument(BaseModel):
    """Mixin adding the store-generated fields."""

    id: Optional[str] = Field(default=None, description="Document id (ObjectId hex)")
    created_at: Optional[datetime] = Field(
        default=None,
        alias="createdAt",
        description="Creation time (UTC)",
    )

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]):
        """Build from a raw MongoDB document, renaming `_id` to `id`."""
        data = {k: v for k, v in doc.items() if k != "_id"}
        if doc.get("_id") is not None:
            value = doc["_id"]
            data["id"] = str(value) if isinstance(value, ObjectId) else value
        return cls.model_validate(data)


class OrderDocument(StoredDocument, OrderFields):
    pass


class MediaDocument(StoredDocument, MediaFields):
    pass
