"""Dataset and shared-grant repository backed by MongoDB."""

from typing import List, Optional

import pymongo
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from document_store.models import Dataset, SharedGrant
from document_store.models.base import utc_now
from exceptions import DatabaseError, NotFoundError
from utils.logging import logger


class DatasetManager:
    """Persistence for datasets and their direct grants. No business rules live here."""

    COLLECTION_DATASETS: str = "datasets"
    COLLECTION_GRANTS: str = "shared_grants"

    def __init__(self, mongodb_client: AsyncIOMotorClient, database_name: str) -> None:
        """Initialize manager with MongoDB client.
        Note: Use DatasetManager.setup() to create a properly initialized instance."""
        self.client = mongodb_client
        self._db: AsyncIOMotorDatabase = self.client.get_database(database_name)
        self._datasets: AsyncIOMotorCollection = self._db.get_collection(self.COLLECTION_DATASETS)
        self._grants: AsyncIOMotorCollection = self._db.get_collection(self.COLLECTION_GRANTS)

    @classmethod
    async def setup(cls, mongodb_client: AsyncIOMotorClient, database_name: str) -> "DatasetManager":
        """Factory method to create and setup a DatasetManager instance."""
        try:
            manager = cls(mongodb_client, database_name)

            await manager._datasets.create_indexes(
                [
                    # Index for listing a user's datasets, newest first
                    pymongo.IndexModel([("user_id", 1), ("created_at", -1)], background=True),
                ]
            )

            await manager._grants.create_indexes(
                [
                    # One grant per user and dataset
                    pymongo.IndexModel([("dataset_id", 1), ("user_id", 1)], unique=True, background=True),
                    # Index for datasets shared with a user
                    pymongo.IndexModel([("user_id", 1)], background=True),
                ]
            )

            return manager

        except Exception as e:
            raise DatabaseError(f"Failed to setup dataset indexes: {str(e)}")

    async def find_dataset(self, dataset_id: str) -> Optional[Dataset]:
        """Returns the dataset or None when it does not exist."""
        try:
            logger.debug(f"Getting dataset {dataset_id}")
            doc = await self._datasets.find_one({"_id": dataset_id})
            return Dataset.model_validate(doc) if doc else None
        except Exception as e:
            raise DatabaseError(f"Failed to get dataset: {str(e)}")

    async def get_dataset(self, dataset_id: str) -> Dataset:
        """Retrieves a dataset by id."""
        dataset = await self.find_dataset(dataset_id)
        if dataset is None:
            raise NotFoundError(f"Dataset {dataset_id} not found", field="dataset_id")
        return dataset

    async def get_datasets(self, dataset_ids: List[str]) -> List[Dataset]:
        """Retrieves the existing datasets among the given ids, in no particular order."""
        if not dataset_ids:
            return []
        try:
            cursor = self._datasets.find({"_id": {"$in": list(dataset_ids)}})
            return [Dataset.model_validate(doc) async for doc in cursor]
        except Exception as e:
            raise DatabaseError(f"Failed to get datasets: {str(e)}")

    async def list_datasets(self, user_id: str, limit: int = 10, skip: int = 0) -> List[Dataset]:
        """Lists the datasets owned by a user, newest first."""
        try:
            logger.info(f"Listing datasets for user {user_id}")
            cursor = self._datasets.find({"user_id": user_id})
            cursor = cursor.sort([("created_at", -1)])
            cursor = cursor.skip(skip).limit(limit)
            return [Dataset.model_validate(doc) async for doc in cursor]
        except Exception as e:
            raise DatabaseError(f"Failed to list datasets: {str(e)}")

    async def save_dataset(self, dataset: Dataset) -> Dataset:
        """Inserts or replaces a dataset and returns the saved copy."""
        try:
            saved = dataset.model_copy(update={"updated_at": utc_now()})
            await self._datasets.replace_one({"_id": saved.id}, saved.to_document(), upsert=True)
            logger.info(f"Dataset {saved.id} saved")
            return saved
        except Exception as e:
            raise DatabaseError(f"Failed to save dataset: {str(e)}")

    async def delete_dataset(self, dataset_id: str) -> None:
        """Deletes a dataset and all of its grants."""
        try:
            logger.info(f"Deleting dataset {dataset_id} and its grants")
            async with await self.client.start_session() as session:
                async with session.start_transaction():
                    await self._grants.delete_many({"dataset_id": dataset_id}, session=session)
                    result = await self._datasets.delete_one({"_id": dataset_id}, session=session)
                    if result.deleted_count == 0:
                        raise NotFoundError(f"Dataset {dataset_id} not found", field="dataset_id")

        except NotFoundError:
            raise
        except Exception as e:
            raise DatabaseError(f"Failed to delete dataset: {str(e)}")

    async def get_grant(self, dataset_id: str, user_id: str) -> Optional[SharedGrant]:
        """Returns the user's grant on a dataset, if any."""
        try:
            doc = await self._grants.find_one({"dataset_id": dataset_id, "user_id": user_id})
            return SharedGrant.model_validate(doc) if doc else None
        except Exception as e:
            raise DatabaseError(f"Failed to get grant: {str(e)}")

    async def list_grants(self, dataset_id: str) -> List[SharedGrant]:
        """Lists the grants on a dataset in creation order."""
        try:
            cursor = self._grants.find({"dataset_id": dataset_id}).sort([("created_at", 1)])
            return [SharedGrant.model_validate(doc) async for doc in cursor]
        except Exception as e:
            raise DatabaseError(f"Failed to list grants: {str(e)}")

    async def list_grants_for_user(self, user_id: str) -> List[SharedGrant]:
        """Lists every grant held by a user."""
        try:
            cursor = self._grants.find({"user_id": user_id})
            return [SharedGrant.model_validate(doc) async for doc in cursor]
        except Exception as e:
            raise DatabaseError(f"Failed to list grants for user: {str(e)}")

    async def save_grant(self, grant: SharedGrant, dataset: Dataset) -> SharedGrant:
        """Upserts a grant and saves the dataset's denormalized usernames atomically."""
        try:
            saved = grant.model_copy(update={"updated_at": utc_now()})
            async with await self.client.start_session() as session:
                async with session.start_transaction():
                    await self._grants.replace_one(
                        {"dataset_id": saved.dataset_id, "user_id": saved.user_id},
                        saved.to_document(),
                        upsert=True,
                        session=session,
                    )
                    await self._datasets.replace_one(
                        {"_id": dataset.id},
                        dataset.model_copy(update={"updated_at": utc_now()}).to_document(),
                        session=session,
                    )

            logger.info(f"Grant {saved.permission.value} on dataset {saved.dataset_id} saved for user {saved.user_id}")
            return saved

        except Exception as e:
            raise DatabaseError(f"Failed to save grant: {str(e)}")

    async def delete_grant(self, grant: SharedGrant, dataset: Dataset) -> None:
        """Deletes a grant and saves the dataset's denormalized usernames atomically."""
        try:
            async with await self.client.start_session() as session:
                async with session.start_transaction():
                    result = await self._grants.delete_one(
                        {"dataset_id": grant.dataset_id, "user_id": grant.user_id},
                        session=session,
                    )
                    if result.deleted_count == 0:
                        raise NotFoundError(f"No grant for user {grant.user_id} on dataset {grant.dataset_id}", field="user_id")

                    await self._datasets.replace_one(
                        {"_id": dataset.id},
                        dataset.model_copy(update={"updated_at": utc_now()}).to_document(),
                        session=session,
                    )

            logger.info(f"Grant on dataset {grant.dataset_id} removed for user {grant.user_id}")

        except NotFoundError:
            raise
        except Exception as e:
            raise DatabaseError(f"Failed to delete grant: {str(e)}")
