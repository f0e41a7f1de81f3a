"""Team repository backed by MongoDB."""

from typing import List, Optional

import pymongo
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from document_store.models import Team
from document_store.models.base import utc_now
from exceptions import DatabaseError, NotFoundError
from utils.logging import logger


class TeamManager:
    """Persistence for teams."""

    COLLECTION_TEAMS: str = "teams"

    def __init__(self, mongodb_client: AsyncIOMotorClient, database_name: str) -> None:
        """Initialize manager with MongoDB client.
        Note: Use TeamManager.setup() to create a properly initialized instance."""
        self.client = mongodb_client
        self._db: AsyncIOMotorDatabase = self.client.get_database(database_name)
        self._teams: AsyncIOMotorCollection = self._db.get_collection(self.COLLECTION_TEAMS)

    @classmethod
    async def setup(cls, mongodb_client: AsyncIOMotorClient, database_name: str) -> "TeamManager":
        """Factory method to create and setup a TeamManager instance."""
        try:
            manager = cls(mongodb_client, database_name)

            await manager._teams.create_indexes(
                [
                    # Team names are unique per owner
                    pymongo.IndexModel([("owner", 1), ("name", 1)], unique=True, background=True),
                    # Index for teams a user belongs to
                    pymongo.IndexModel([("members", 1)], background=True),
                    # Index for teams holding a dataset
                    pymongo.IndexModel([("datasets", 1)], background=True),
                ]
            )

            return manager

        except Exception as e:
            raise DatabaseError(f"Failed to setup team indexes: {str(e)}")

    async def get_team(self, team_id: str) -> Team:
        """Retrieves a team by id."""
        try:
            logger.debug(f"Getting team {team_id}")
            doc = await self._teams.find_one({"_id": team_id})
            if not doc:
                raise NotFoundError(f"Team {team_id} not found", field="teamId")
            return Team.model_validate(doc)

        except NotFoundError:
            raise
        except Exception as e:
            raise DatabaseError(f"Failed to get team: {str(e)}")

    async def find_team_by_name(self, owner: str, name: str) -> Optional[Team]:
        try:
            doc = await self._teams.find_one({"owner": owner, "name": name})
            return Team.model_validate(doc) if doc else None
        except Exception as e:
            raise DatabaseError(f"Failed to find team: {str(e)}")

    async def list_teams_for_user(self, user_id: str) -> List[Team]:
        """Lists teams the user owns or belongs to."""
        try:
            logger.info(f"Listing teams for user {user_id}")
            cursor = self._teams.find({"$or": [{"owner": user_id}, {"members": user_id}]})
            return [Team.model_validate(doc) async for doc in cursor]
        except Exception as e:
            raise DatabaseError(f"Failed to list teams: {str(e)}")

    async def list_teams_for_dataset(self, dataset_id: str) -> List[Team]:
        """Lists teams the dataset is assigned to."""
        try:
            cursor = self._teams.find({"datasets": dataset_id})
            return [Team.model_validate(doc) async for doc in cursor]
        except Exception as e:
            raise DatabaseError(f"Failed to list teams for dataset: {str(e)}")

    async def save_team(self, team: Team) -> Team:
        """Inserts or replaces a team and returns the saved copy."""
        try:
            saved = team.model_copy(update={"updated_at": utc_now()})
            await self._teams.replace_one({"_id": saved.id}, saved.to_document(), upsert=True)
            logger.info(f"Team {saved.id} saved")
            return saved
        except Exception as e:
            raise DatabaseError(f"Failed to save team: {str(e)}")

    async def detach_dataset(self, dataset_id: str) -> None:
        """Removes a dataset from every team it is assigned to."""
        try:
            result = await self._teams.update_many(
                {"datasets": dataset_id},
                {"$pull": {"datasets": dataset_id}, "$set": {"updated_at": utc_now()}},
            )
            logger.info(f"Dataset {dataset_id} detached from {result.modified_count} teams")
        except Exception as e:
            raise DatabaseError(f"Failed to detach dataset from teams: {str(e)}")
