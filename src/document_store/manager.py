"""Database setup shared by the API process."""

import asyncio
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from document_store.dataset_manager import DatasetManager
from document_store.team_manager import TeamManager
from document_store.user_manager import UserManager
from settings import settings
from utils.logging import logger


class DatabaseManager:
    """Owns the MongoDB client and lazily sets up the repositories on it."""

    def __init__(self, connection_string: Optional[str] = None, database_name: Optional[str] = None):
        logger.info("Initializing DatabaseManager")
        self._client = AsyncIOMotorClient(connection_string or settings.database_connection_string)
        self._client.get_io_loop = asyncio.get_running_loop
        self._database_name = database_name or settings.database_name
        self._dataset_manager: Optional[DatasetManager] = None
        self._team_manager: Optional[TeamManager] = None
        self._user_manager: Optional[UserManager] = None

    async def setup_dataset_manager(self) -> DatasetManager:
        """Initialize and return the dataset manager."""
        if self._dataset_manager is None:
            logger.info("Setting up dataset manager")
            self._dataset_manager = await DatasetManager.setup(self._client, self._database_name)
        return self._dataset_manager

    async def setup_team_manager(self) -> TeamManager:
        """Initialize and return the team manager."""
        if self._team_manager is None:
            logger.info("Setting up team manager")
            self._team_manager = await TeamManager.setup(self._client, self._database_name)
        return self._team_manager

    def user_manager(self) -> UserManager:
        if self._user_manager is None:
            self._user_manager = UserManager(self._client, self._database_name)
        return self._user_manager

    def close(self):
        """Close database connection."""
        logger.info("Closing database connection")
        if self._client:
            self._client.close()
