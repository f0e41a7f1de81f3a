"""Document store package."""

from document_store.dataset_manager import DatasetManager
from document_store.manager import DatabaseManager
from document_store.models import Dataset, SharedGrant, Team, User
from document_store.team_manager import TeamManager
from document_store.user_manager import UserManager

__all__ = [
    # Repositories
    "DatabaseManager",
    "DatasetManager",
    "TeamManager",
    "UserManager",
    # Models
    "Dataset",
    "SharedGrant",
    "Team",
    "User",
]
