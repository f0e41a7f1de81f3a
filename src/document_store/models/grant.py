"""Direct per-user grant on a dataset."""

from pydantic import Field

from document_store.models.base import BaseDocument
from document_store.models.permission import Permission


class SharedGrant(BaseDocument):
    """A user's direct permission on a dataset. Unique per (dataset_id, user_id)."""

    dataset_id: str
    user_id: str
    permission: Permission = Field(default=Permission.VIEW)
