"""Team model."""

from typing import List

from pydantic import Field

from document_store.models.base import BaseDocument
from document_store.models.permission import Permission


class Team(BaseDocument):
    """A group of users sharing a single permission level over a set of datasets."""

    name: str
    owner: str
    members: List[str] = Field(default_factory=list, description="Member user ids, owner included")
    member_permission: Permission = Field(default=Permission.VIEW, alias="memberPermission")
    datasets: List[str] = Field(default_factory=list)

    def is_member(self, user_id: str) -> bool:
        return user_id == self.owner or user_id in self.members
