"""Access-controlled dataset operations."""

from typing import List, Union

from access_control.resolver import PermissionResolver
from access_control.sharing import SharingService
from document_store.dataset_manager import DatasetManager
from document_store.models import Dataset, Permission, SharedGrant
from document_store.team_manager import TeamManager
from exceptions import InvalidInputError
from utils.logging import logger


class DatasetService:
    """Dataset reads and writes, each gated by the permission resolver."""

    def __init__(
        self,
        resolver: PermissionResolver,
        sharing: SharingService,
        datasets: DatasetManager,
        teams: TeamManager,
    ) -> None:
        self.resolver = resolver
        self.sharing = sharing
        self.datasets = datasets
        self.teams = teams

    async def list_owned(self, user_id: str, page: int = 1, limit: int = 10) -> List[Dataset]:
        """Datasets owned by the user, newest first."""
        if page < 1:
            raise InvalidInputError("page must be greater than or equal to 1", field="page")
        if limit < 1:
            raise InvalidInputError("limit must be greater than or equal to 1", field="limit")
        return await self.datasets.list_datasets(user_id, limit=limit, skip=(page - 1) * limit)

    async def list_shared(self, user_id: str) -> List[Dataset]:
        """Datasets visible to the user through a direct grant or a team, owned ones excluded."""
        dataset_ids: List[str] = [grant.dataset_id for grant in await self.datasets.list_grants_for_user(user_id)]
        for team in await self.teams.list_teams_for_user(user_id):
            dataset_ids.extend(team.datasets)

        # Keep first-seen order
        unique_ids = list(dict.fromkeys(dataset_ids))
        found = {dataset.id: dataset for dataset in await self.datasets.get_datasets(unique_ids)}
        return [found[i] for i in unique_ids if i in found and found[i].user_id != user_id]

    async def get(self, user_id: str, dataset_id: str) -> Dataset:
        return await self.resolver.require_dataset(user_id, dataset_id, Permission.VIEW)

    async def rename(self, user_id: str, dataset_id: str, name: str) -> Dataset:
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Dataset name is required", field="dataset_name")

        dataset = await self.resolver.require_dataset(user_id, dataset_id, Permission.EDIT)
        logger.info(f"Renaming dataset {dataset_id} to '{name}'")
        return await self.datasets.save_dataset(dataset.model_copy(update={"name": name}))

    async def delete(self, user_id: str, dataset_id: str) -> None:
        """Delete a dataset together with its grants and team assignments."""
        await self.resolver.require_dataset(user_id, dataset_id, Permission.ADMIN)
        await self.datasets.delete_dataset(dataset_id)
        await self.teams.detach_dataset(dataset_id)

    async def share(self, user_id: str, dataset_id: str, target_user_id: str, permission: Union[Permission, str]) -> SharedGrant:
        await self.resolver.require_dataset(user_id, dataset_id, Permission.ADMIN)
        return await self.sharing.share(dataset_id, target_user_id, permission)

    async def unshare(self, user_id: str, dataset_id: str, target_user_id: str) -> None:
        await self.resolver.require_dataset(user_id, dataset_id, Permission.ADMIN)
        await self.sharing.unshare(dataset_id, target_user_id)

    async def list_permissions(self, user_id: str, dataset_id: str) -> List[SharedGrant]:
        await self.resolver.require_dataset(user_id, dataset_id, Permission.VIEW)
        return await self.sharing.list_grants(dataset_id)
