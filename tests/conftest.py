"""Shared fixtures: in-memory repositories and a Redis stand-in with the same interface."""

from typing import Dict, List, Optional, Tuple

import pytest
from redis.exceptions import LockError

from access_control import DatasetService, PermissionResolver, SharingService, TeamService
from document_store.models import Dataset, InsightCategory, SharedGrant, Team, User
from document_store.models.base import utc_now
from exceptions import NotFoundError, PartialArtifactFailure
from workflow import WizardSessionManager, WorkflowStore


class InMemoryDatasetManager:
    """Same contract as DatasetManager, without MongoDB."""

    def __init__(self) -> None:
        self.datasets: Dict[str, Dataset] = {}
        self.grants: Dict[Tuple[str, str], SharedGrant] = {}

    def add(self, dataset: Dataset) -> Dataset:
        self.datasets[dataset.id] = dataset
        return dataset

    async def find_dataset(self, dataset_id: str) -> Optional[Dataset]:
        return self.datasets.get(dataset_id)

    async def get_dataset(self, dataset_id: str) -> Dataset:
        if dataset_id not in self.datasets:
            raise NotFoundError(f"Dataset {dataset_id} not found", field="dataset_id")
        return self.datasets[dataset_id]

    async def get_datasets(self, dataset_ids: List[str]) -> List[Dataset]:
        return [self.datasets[i] for i in dataset_ids if i in self.datasets]

    async def list_datasets(self, user_id: str, limit: int = 10, skip: int = 0) -> List[Dataset]:
        owned = sorted((d for d in self.datasets.values() if d.user_id == user_id), key=lambda d: d.created_at, reverse=True)
        return owned[skip : skip + limit]

    async def save_dataset(self, dataset: Dataset) -> Dataset:
        saved = dataset.model_copy(update={"updated_at": utc_now()})
        self.datasets[saved.id] = saved
        return saved

    async def delete_dataset(self, dataset_id: str) -> None:
        if self.datasets.pop(dataset_id, None) is None:
            raise NotFoundError(f"Dataset {dataset_id} not found", field="dataset_id")
        self.grants = {key: grant for key, grant in self.grants.items() if key[0] != dataset_id}

    async def get_grant(self, dataset_id: str, user_id: str) -> Optional[SharedGrant]:
        return self.grants.get((dataset_id, user_id))

    async def list_grants(self, dataset_id: str) -> List[SharedGrant]:
        return [grant for key, grant in self.grants.items() if key[0] == dataset_id]

    async def list_grants_for_user(self, user_id: str) -> List[SharedGrant]:
        return [grant for key, grant in self.grants.items() if key[1] == user_id]

    async def save_grant(self, grant: SharedGrant, dataset: Dataset) -> SharedGrant:
        self.grants[(grant.dataset_id, grant.user_id)] = grant
        self.datasets[dataset.id] = dataset
        return grant

    async def delete_grant(self, grant: SharedGrant, dataset: Dataset) -> None:
        if self.grants.pop((grant.dataset_id, grant.user_id), None) is None:
            raise NotFoundError("Grant not found", field="user_id")
        self.datasets[dataset.id] = dataset


class InMemoryTeamManager:
    def __init__(self) -> None:
        self.teams: Dict[str, Team] = {}

    def add(self, team: Team) -> Team:
        self.teams[team.id] = team
        return team

    async def get_team(self, team_id: str) -> Team:
        if team_id not in self.teams:
            raise NotFoundError(f"Team {team_id} not found", field="teamId")
        return self.teams[team_id]

    async def find_team_by_name(self, owner: str, name: str) -> Optional[Team]:
        return next((t for t in self.teams.values() if t.owner == owner and t.name == name), None)

    async def list_teams_for_user(self, user_id: str) -> List[Team]:
        return [t for t in self.teams.values() if t.owner == user_id or user_id in t.members]

    async def list_teams_for_dataset(self, dataset_id: str) -> List[Team]:
        return [t for t in self.teams.values() if dataset_id in t.datasets]

    async def save_team(self, team: Team) -> Team:
        self.teams[team.id] = team
        return team

    async def detach_dataset(self, dataset_id: str) -> None:
        for team_id, team in list(self.teams.items()):
            if dataset_id in team.datasets:
                self.teams[team_id] = team.model_copy(update={"datasets": [d for d in team.datasets if d != dataset_id]})


class InMemoryUserManager:
    def __init__(self, users: List[User]) -> None:
        self.users: Dict[str, User] = {user.id: user for user in users}

    async def find_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    async def get_user(self, user_id: str, field: str = "userId") -> User:
        if user_id not in self.users:
            raise NotFoundError(f"User {user_id} not found", field=field)
        return self.users[user_id]

    async def get_users(self, user_ids: List[str]) -> Dict[str, User]:
        return {i: self.users[i] for i in user_ids if i in self.users}


class FakeLock:
    def __init__(self, redis: "FakeRedis", name: str) -> None:
        self.redis = redis
        self.name = name

    async def acquire(self) -> bool:
        if self.name in self.redis.locks:
            return False
        self.redis.locks.add(self.name)
        return True

    async def release(self) -> None:
        if self.name not in self.redis.locks:
            raise LockError("Cannot release an unlocked lock")
        self.redis.locks.remove(self.name)


class FakeRedis:
    """The subset of redis.asyncio.Redis used by WorkflowStore."""

    def __init__(self) -> None:
        self.values: Dict[str, str] = {}
        self.expirations: Dict[str, int] = {}
        self.locks = set()

    async def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.values[key] = value
        self.expirations[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.values.pop(key, None) is not None)

    def lock(self, name: str, timeout: Optional[float] = None, blocking_timeout: Optional[float] = None) -> FakeLock:
        return FakeLock(self, name)


class FakeArtifactStore:
    """Records uploads. Payloads listed in ``failing`` raise PartialArtifactFailure."""

    def __init__(self) -> None:
        self.stored: List[Tuple[str, str, InsightCategory]] = []
        self.sources: List[Tuple[str, str]] = []
        self.failing = set()

    async def store_artifact(self, payload, dataset_id: str, category: InsightCategory) -> str:
        if payload in self.failing:
            raise PartialArtifactFailure(f"Failed to upload artifact {payload}", category=category.value)
        self.stored.append((payload, dataset_id, category))
        return f"https://blobs.test/insights/{dataset_id}/{category.value}/{len(self.stored)}.png"

    async def upload_source(self, content: bytes, user_id: str, filename: Optional[str], content_type: Optional[str]) -> str:
        self.sources.append((user_id, filename))
        return f"https://blobs.test/sources/{user_id}/{len(self.sources)}.csv"


def make_dataset(owner: str = "alice", name: str = "sales", **kwargs) -> Dataset:
    return Dataset(user_id=owner, name=name, dataset_url="https://blobs.test/sources/sales.csv", domain_type="ecommerce", **kwargs)


@pytest.fixture
def users() -> InMemoryUserManager:
    return InMemoryUserManager(
        [
            User(id="alice", username="Alice"),
            User(id="bob", username="Bob"),
            User(id="carol", username="Carol"),
            User(id="dave", username="Dave"),
        ]
    )


@pytest.fixture
def datasets() -> InMemoryDatasetManager:
    return InMemoryDatasetManager()


@pytest.fixture
def teams() -> InMemoryTeamManager:
    return InMemoryTeamManager()


@pytest.fixture
def resolver(datasets, teams) -> PermissionResolver:
    return PermissionResolver(datasets, teams)


@pytest.fixture
def sharing(datasets, users) -> SharingService:
    return SharingService(datasets, users)


@pytest.fixture
def dataset_service(resolver, sharing, datasets, teams) -> DatasetService:
    return DatasetService(resolver, sharing, datasets, teams)


@pytest.fixture
def team_service(teams, users, resolver) -> TeamService:
    return TeamService(teams, users, resolver)


@pytest.fixture
def redis_client() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def workflow_store(redis_client) -> WorkflowStore:
    return WorkflowStore(redis_client, ttl_seconds=600, lock_timeout_seconds=5, lock_wait_seconds=0)


@pytest.fixture
def wizard(workflow_store) -> WizardSessionManager:
    return WizardSessionManager(workflow_store, allowed_domains=["ecommerce", "HR"])


@pytest.fixture
def artifact_store() -> FakeArtifactStore:
    return FakeArtifactStore()
