"""Tests for dataset sharing."""

import pytest

from conftest import make_dataset
from document_store.models import Permission
from exceptions import InvalidInputError, NotFoundError


@pytest.fixture
def dataset(datasets):
    return datasets.add(make_dataset(owner="alice"))


@pytest.mark.asyncio
class TestShare:
    async def test_share_creates_grant_and_username(self, sharing, datasets, resolver, dataset):
        grant = await sharing.share(dataset.id, "bob", "edit")

        assert grant.permission is Permission.EDIT
        assert (await datasets.get_dataset(dataset.id)).shared_usernames == ["Bob"]
        assert await resolver.effective_dataset_permission("bob", dataset.id) is Permission.EDIT

    async def test_reshare_updates_in_place(self, sharing, datasets, resolver, dataset):
        await sharing.share(dataset.id, "bob", Permission.VIEW)
        await sharing.share(dataset.id, "bob", Permission.ADMIN)

        grants = await sharing.list_grants(dataset.id)
        assert len(grants) == 1
        assert grants[0].permission is Permission.ADMIN
        assert (await datasets.get_dataset(dataset.id)).shared_usernames == ["Bob"]
        assert await resolver.effective_dataset_permission("bob", dataset.id) is Permission.ADMIN

    async def test_reshare_with_same_permission_is_rejected(self, sharing, dataset):
        await sharing.share(dataset.id, "bob", Permission.VIEW)

        with pytest.raises(InvalidInputError):
            await sharing.share(dataset.id, "bob", Permission.VIEW)
        assert len(await sharing.list_grants(dataset.id)) == 1

    async def test_owner_cannot_be_a_grant_target(self, sharing, dataset):
        with pytest.raises(InvalidInputError) as exc_info:
            await sharing.share(dataset.id, "alice", Permission.ADMIN)
        assert "already the owner" in exc_info.value.message
        assert await sharing.list_grants(dataset.id) == []

    async def test_unknown_user(self, sharing, dataset):
        with pytest.raises(NotFoundError) as exc_info:
            await sharing.share(dataset.id, "ghost", Permission.VIEW)
        assert exc_info.value.field == "userId"

    async def test_invalid_permission(self, sharing, dataset):
        with pytest.raises(InvalidInputError):
            await sharing.share(dataset.id, "bob", "owner")


@pytest.mark.asyncio
class TestUnshare:
    async def test_unshare_removes_grant_and_username(self, sharing, datasets, resolver, dataset):
        await sharing.share(dataset.id, "bob", Permission.EDIT)
        await sharing.share(dataset.id, "carol", Permission.VIEW)

        await sharing.unshare(dataset.id, "bob")

        assert (await datasets.get_dataset(dataset.id)).shared_usernames == ["Carol"]
        assert [g.user_id for g in await sharing.list_grants(dataset.id)] == ["carol"]
        assert await resolver.resolve_direct("bob", await datasets.get_dataset(dataset.id)) is None

    async def test_unshare_without_grant(self, sharing, dataset):
        with pytest.raises(InvalidInputError) as exc_info:
            await sharing.unshare(dataset.id, "bob")
        assert exc_info.value.message == "User does not have access to this dataset"
