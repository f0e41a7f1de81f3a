"""Effective permission resolution for datasets and teams.

A user's level on a dataset is resolved in order:

1. the dataset owner is admin-equivalent and short-circuits every other check,
2. a direct ``SharedGrant`` contributes its permission,
3. every team holding the dataset contributes ``admin`` for its owner and the
   team's single ``memberPermission`` for its members.

The effective level is the highest contribution. No contribution means access is
denied.
"""

from typing import Optional

from document_store.dataset_manager import DatasetManager
from document_store.models import Dataset, Permission, Team
from document_store.team_manager import TeamManager
from exceptions import AccessDeniedError
from utils.logging import logger


class PermissionResolver:
    """Computes effective permissions and gates dataset and team operations."""

    def __init__(self, datasets: DatasetManager, teams: TeamManager) -> None:
        self.datasets = datasets
        self.teams = teams

    async def resolve_direct(self, user_id: str, dataset: Dataset) -> Optional[Permission]:
        """Level from ownership or a direct grant only."""
        if dataset.user_id == user_id:
            return Permission.ADMIN

        grant = await self.datasets.get_grant(dataset.id, user_id)
        return grant.permission if grant else None

    @staticmethod
    def resolve_team(user_id: str, team: Team) -> Optional[Permission]:
        """Level a user holds through a single team."""
        if team.owner == user_id:
            return Permission.ADMIN
        if user_id in team.members:
            return team.member_permission
        return None

    async def resolve_via_teams(self, user_id: str, dataset_id: str) -> Optional[Permission]:
        """Highest level a user holds on a dataset through the teams it is assigned to."""
        teams = await self.teams.list_teams_for_dataset(dataset_id)
        return Permission.highest(*(self.resolve_team(user_id, team) for team in teams))

    async def effective_permission(self, user_id: str, dataset: Dataset) -> Permission:
        direct = await self.resolve_direct(user_id, dataset)
        if direct is Permission.ADMIN:
            return direct

        effective = Permission.highest(direct, await self.resolve_via_teams(user_id, dataset.id))
        if effective is None:
            logger.info(f"User {user_id} has no access to dataset {dataset.id}")
            raise AccessDeniedError("Access Denied: Dataset Not Shared", field="dataset_id")
        return effective

    async def effective_dataset_permission(self, user_id: str, dataset_id: str) -> Permission:
        """Effective level of a user on a dataset. Raises NotFoundError or AccessDeniedError."""
        dataset = await self.datasets.get_dataset(dataset_id)
        return await self.effective_permission(user_id, dataset)

    async def require_dataset(self, user_id: str, dataset_id: str, required: Permission) -> Dataset:
        """Return the dataset if the user's effective level satisfies ``required``."""
        dataset = await self.datasets.get_dataset(dataset_id)
        level = await self.effective_permission(user_id, dataset)

        if not level.allows(required):
            logger.info(f"User {user_id} has {level.value} on dataset {dataset_id}, {required.value} required")
            raise AccessDeniedError("Access Denied: Insufficient Permission", field="dataset_id")
        return dataset

    async def require_team(self, user_id: str, team_id: str, required: Permission) -> Team:
        """Return the team if the user's level in it satisfies ``required``."""
        team = await self.teams.get_team(team_id)
        level = self.resolve_team(user_id, team)

        if level is None:
            raise AccessDeniedError("Access Denied: Not a team member", field="teamId")
        if not level.allows(required):
            logger.info(f"User {user_id} has {level.value} in team {team_id}, {required.value} required")
            raise AccessDeniedError("Access Denied: Insufficient Team Permission", field="teamId")
        return team
