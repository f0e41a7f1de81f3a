"""Grant mutations on datasets."""

from typing import List, Union

from document_store.dataset_manager import DatasetManager
from document_store.models import Permission, SharedGrant
from document_store.user_manager import UserManager
from exceptions import InvalidInputError
from utils.logging import logger


class SharingService:
    """Creates, updates and revokes direct grants.

    Callers are responsible for checking that the requester may administer the
    dataset; the orchestrator calls ``share`` on behalf of the dataset owner.
    """

    def __init__(self, datasets: DatasetManager, users: UserManager) -> None:
        self.datasets = datasets
        self.users = users

    async def share(self, dataset_id: str, user_id: str, permission: Union[Permission, str]) -> SharedGrant:
        """Grant ``permission`` to a user, updating an existing grant in place."""
        permission = Permission.parse(permission)
        dataset = await self.datasets.get_dataset(dataset_id)

        if user_id == dataset.user_id:
            raise InvalidInputError("User is already the owner of this dataset", field="userId")

        user = await self.users.get_user(user_id)
        existing = await self.datasets.get_grant(dataset_id, user_id)

        if existing is None:
            grant = SharedGrant(dataset_id=dataset_id, user_id=user_id, permission=permission)
        elif existing.permission is permission:
            raise InvalidInputError(f"User already has {permission.value} access to this dataset", field="permission")
        else:
            logger.info(f"Changing permission of user {user_id} on dataset {dataset_id} from {existing.permission.value} to {permission.value}")
            grant = existing.model_copy(update={"permission": permission})

        usernames = list(dataset.shared_usernames)
        if user.username not in usernames:
            usernames.append(user.username)

        return await self.datasets.save_grant(grant, dataset.model_copy(update={"shared_usernames": usernames}))

    async def unshare(self, dataset_id: str, user_id: str) -> None:
        """Revoke a user's direct grant."""
        dataset = await self.datasets.get_dataset(dataset_id)
        grant = await self.datasets.get_grant(dataset_id, user_id)
        if grant is None:
            raise InvalidInputError("User does not have access to this dataset", field="userId")

        usernames = list(dataset.shared_usernames)
        user = await self.users.find_user(user_id)
        if user is None:
            logger.warning(f"User {user_id} no longer exists, shared usernames of dataset {dataset_id} left unchanged")
        elif user.username in usernames:
            usernames.remove(user.username)

        await self.datasets.delete_grant(grant, dataset.model_copy(update={"shared_usernames": usernames}))

    async def list_grants(self, dataset_id: str) -> List[SharedGrant]:
        return await self.datasets.list_grants(dataset_id)
