"""Read-only projection of the users owned by the identity service."""

from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    id: str = Field(..., alias="_id")
    username: str
    email: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}
