"""Tests for team mutations."""

import pytest

from conftest import make_dataset
from document_store.models import Permission, Team
from exceptions import AccessDeniedError, InvalidInputError, NotFoundError


@pytest.fixture
def team(teams):
    return teams.add(Team(name="analysts", owner="alice", members=["alice", "bob"]))


@pytest.mark.asyncio
class TestCreateTeam:
    async def test_create_team_adds_owner_and_defaults_to_view(self, team_service, datasets):
        dataset = datasets.add(make_dataset(owner="alice"))

        team = await team_service.create_team("alice", "analysts", members=["bob", "bob"], datasets=[dataset.id])

        assert team.members == ["bob", "alice"]
        assert team.member_permission is Permission.VIEW
        assert team.datasets == [dataset.id]

    async def test_create_team_requires_name(self, team_service):
        with pytest.raises(InvalidInputError) as exc_info:
            await team_service.create_team("alice", "  ")
        assert exc_info.value.field == "name"

    async def test_team_name_unique_per_owner(self, team_service, team):
        with pytest.raises(InvalidInputError):
            await team_service.create_team("alice", "analysts")
        assert (await team_service.create_team("bob", "analysts")).owner == "bob"

    async def test_unknown_member(self, team_service):
        with pytest.raises(NotFoundError) as exc_info:
            await team_service.create_team("alice", "analysts", members=["ghost"])
        assert exc_info.value.field == "members"

    async def test_owner_must_administer_team_datasets(self, team_service, datasets):
        dataset = datasets.add(make_dataset(owner="bob"))

        with pytest.raises(AccessDeniedError):
            await team_service.create_team("alice", "analysts", datasets=[dataset.id])

    async def test_list_teams(self, team_service, team):
        assert [t.id for t in await team_service.list_teams("bob")] == [team.id]
        assert await team_service.list_teams("carol") == []


@pytest.mark.asyncio
class TestUpdateTeam:
    async def test_update_members_replaces_set_and_keeps_owner(self, team_service, team):
        updated = await team_service.update_members("alice", team.id, ["carol", "dave"])

        assert updated.members == ["carol", "dave", "alice"]

    async def test_update_members_requires_list(self, team_service, team):
        with pytest.raises(InvalidInputError):
            await team_service.update_members("alice", team.id, None)

    async def test_update_members_requires_team_admin(self, team_service, team):
        with pytest.raises(AccessDeniedError):
            await team_service.update_members("bob", team.id, ["carol"])

    async def test_assign_datasets(self, team_service, team, datasets):
        first = datasets.add(make_dataset(owner="alice", name="first"))
        second = datasets.add(make_dataset(owner="alice", name="second"))

        updated = await team_service.assign_datasets("alice", team.id, [first.id, second.id, first.id])

        assert updated.datasets == [first.id, second.id]

    async def test_assign_datasets_requires_dataset_admin(self, team_service, team, datasets):
        foreign = datasets.add(make_dataset(owner="carol"))

        with pytest.raises(AccessDeniedError):
            await team_service.assign_datasets("alice", team.id, [foreign.id])

    async def test_member_permission_applies_to_all_members(self, team_service, resolver, team, datasets):
        dataset = datasets.add(make_dataset(owner="alice"))
        await team_service.update_members("alice", team.id, ["bob", "carol"])
        await team_service.assign_datasets("alice", team.id, [dataset.id])

        await team_service.update_member_permission("alice", team.id, "edit")
        await team_service.update_member_permission("alice", team.id, "view")

        assert await resolver.effective_dataset_permission("bob", dataset.id) is Permission.VIEW
        assert await resolver.effective_dataset_permission("carol", dataset.id) is Permission.VIEW
        assert await resolver.effective_dataset_permission("alice", dataset.id) is Permission.ADMIN

    async def test_member_permission_validation(self, team_service, team):
        with pytest.raises(InvalidInputError):
            await team_service.update_member_permission("alice", team.id, None)
        with pytest.raises(InvalidInputError):
            await team_service.update_member_permission("alice", team.id, "owner")
