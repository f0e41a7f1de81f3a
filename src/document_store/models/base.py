"""Base models and utilities for the document store module."""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def new_document_id() -> str:
    return str(uuid4())


class BaseDocument(BaseModel):
    """Base model for all document store models."""

    id: str = Field(default_factory=new_document_id, alias="_id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = {"populate_by_name": True, "arbitrary_types_allowed": True, "from_attributes": True}

    def to_document(self) -> dict:
        """Serialize the model into the shape stored in MongoDB."""
        return self.model_dump(by_alias=True)
