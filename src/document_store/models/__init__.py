"""Models package for document store."""

from document_store.models.dataset import (
    FILTERED_CATEGORIES,
    Dataset,
    FilteredInsight,
    InsightCategory,
    InsightReference,
)
from document_store.models.grant import SharedGrant
from document_store.models.permission import Permission
from document_store.models.team import Team
from document_store.models.user import User

__all__ = [
    "Dataset",
    "FilteredInsight",
    "FILTERED_CATEGORIES",
    "InsightCategory",
    "InsightReference",
    "Permission",
    "SharedGrant",
    "Team",
    "User",
]
