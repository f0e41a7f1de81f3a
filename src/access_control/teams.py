"""Team creation and total-replace team mutations."""

from typing import List, Optional, Union

from access_control.resolver import PermissionResolver
from document_store.models import Permission, Team
from document_store.team_manager import TeamManager
from document_store.user_manager import UserManager
from exceptions import InvalidInputError, NotFoundError
from utils.logging import logger


class TeamService:
    """Teams grant a single permission level to all non-owner members over their datasets."""

    def __init__(self, teams: TeamManager, users: UserManager, resolver: PermissionResolver) -> None:
        self.teams = teams
        self.users = users
        self.resolver = resolver

    async def create_team(
        self,
        owner: str,
        name: str,
        members: Optional[List[str]] = None,
        datasets: Optional[List[str]] = None,
        member_permission: Optional[Union[Permission, str]] = None,
    ) -> Team:
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Team name is required", field="name")

        permission = Permission.parse(member_permission, field="memberPermission") if member_permission else Permission.VIEW

        if await self.teams.find_team_by_name(owner, name):
            raise InvalidInputError("Team name already taken", field="name")

        await self.users.get_user(owner, field="owner")
        member_ids = await self._validate_members(owner, members or [])
        dataset_ids = await self._validate_datasets(owner, datasets or [])

        team = Team(name=name, owner=owner, members=member_ids, datasets=dataset_ids, member_permission=permission)
        logger.info(f"Creating team '{name}' for user {owner} with {len(member_ids)} members")
        return await self.teams.save_team(team)

    async def list_teams(self, user_id: str) -> List[Team]:
        return await self.teams.list_teams_for_user(user_id)

    async def update_members(self, requester: str, team_id: str, members: Optional[List[str]]) -> Team:
        """Replace the member set. The owner is always kept."""
        team = await self.resolver.require_team(requester, team_id, Permission.ADMIN)
        if members is None:
            raise InvalidInputError("Members are not provided", field="members")

        member_ids = await self._validate_members(team.owner, members)
        logger.info(f"Replacing members of team {team_id} with {len(member_ids)} users")
        return await self.teams.save_team(team.model_copy(update={"members": member_ids}))

    async def assign_datasets(self, requester: str, team_id: str, datasets: Optional[List[str]]) -> Team:
        """Replace the dataset set. The requester must administer every dataset assigned."""
        team = await self.resolver.require_team(requester, team_id, Permission.ADMIN)
        if datasets is None:
            raise InvalidInputError("Datasets are not provided", field="datasets")

        dataset_ids = await self._validate_datasets(requester, datasets)
        logger.info(f"Assigning {len(dataset_ids)} datasets to team {team_id}")
        return await self.teams.save_team(team.model_copy(update={"datasets": dataset_ids}))

    async def update_member_permission(self, requester: str, team_id: str, permission: Optional[Union[Permission, str]]) -> Team:
        """Replace the single permission level shared by all non-owner members."""
        team = await self.resolver.require_team(requester, team_id, Permission.ADMIN)
        if not permission:
            raise InvalidInputError("Member permission is not provided", field="memberPermission")

        level = Permission.parse(permission, field="memberPermission")
        logger.info(f"Setting member permission of team {team_id} to {level.value}")
        return await self.teams.save_team(team.model_copy(update={"member_permission": level}))

    async def _validate_members(self, owner: str, members: List[str]) -> List[str]:
        member_ids = list(dict.fromkeys(members))
        found = await self.users.get_users(member_ids)
        for member_id in member_ids:
            if member_id not in found:
                raise NotFoundError(f"Member {member_id} not found", field="members")

        if owner not in member_ids:
            member_ids.append(owner)
        return member_ids

    async def _validate_datasets(self, requester: str, datasets: List[str]) -> List[str]:
        dataset_ids = list(dict.fromkeys(datasets))
        for dataset_id in dataset_ids:
            await self.resolver.require_dataset(requester, dataset_id, Permission.ADMIN)
        return dataset_ids
