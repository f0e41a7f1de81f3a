"""Read-only access to the users collection maintained by the identity service."""

from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection

from document_store.models import User
from exceptions import DatabaseError, NotFoundError
from utils.logging import logger


class UserManager:
    """Looks up grant targets and team members."""

    COLLECTION_USERS: str = "users"

    def __init__(self, mongodb_client: AsyncIOMotorClient, database_name: str) -> None:
        self.client = mongodb_client
        self._users: AsyncIOMotorCollection = self.client.get_database(database_name).get_collection(self.COLLECTION_USERS)

    async def find_user(self, user_id: str) -> Optional[User]:
        try:
            logger.debug(f"Getting user {user_id}")
            doc = await self._users.find_one({"_id": user_id}, projection={"_id": 1, "username": 1, "email": 1})
            return User.model_validate(doc) if doc else None
        except Exception as e:
            raise DatabaseError(f"Failed to get user: {str(e)}")

    async def get_user(self, user_id: str, field: str = "userId") -> User:
        user = await self.find_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", field=field)
        return user

    async def get_users(self, user_ids: List[str]) -> Dict[str, User]:
        """Returns the existing users among the given ids, keyed by id."""
        if not user_ids:
            return {}
        try:
            cursor = self._users.find({"_id": {"$in": list(user_ids)}}, projection={"_id": 1, "username": 1, "email": 1})
            users: Dict[str, User] = {}
            async for doc in cursor:
                user = User.model_validate(doc)
                users[user.id] = user
            return users
        except Exception as e:
            raise DatabaseError(f"Failed to get users: {str(e)}")
