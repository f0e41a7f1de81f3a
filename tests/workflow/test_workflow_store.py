"""Tests for the Redis workflow store."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from exceptions import DatabaseError, InvalidInputError
from workflow import ProcessingOptions, WorkflowContext, WorkflowStore
from workflow.models import AccessRequest, AnalysisOption


@pytest.mark.asyncio
class TestWorkflowStore:
    async def test_save_and_load(self, workflow_store, redis_client):
        context = WorkflowContext(
            workflow_id="wf-1",
            user_id="alice",
            domain_type="HR",
            processing_options=ProcessingOptions(analysis_option=AnalysisOption.CLEAN_AND_GENERATE, download_after_creating=True),
            access_requests=[AccessRequest(user_id="bob", permission="edit")],
        )

        await workflow_store.save(context)
        loaded = await workflow_store.load("alice", "wf-1")

        assert loaded == context
        assert redis_client.expirations["workflow:alice:wf-1"] == 600

    async def test_keys_are_scoped_by_user(self, workflow_store):
        await workflow_store.save(WorkflowContext(workflow_id="wf-1", user_id="alice"))

        assert await workflow_store.load("bob", "wf-1") is None

    async def test_delete(self, workflow_store):
        await workflow_store.save(WorkflowContext(workflow_id="wf-1", user_id="alice"))

        assert await workflow_store.delete("alice", "wf-1") is True
        assert await workflow_store.delete("alice", "wf-1") is False

    async def test_busy_workflow(self, workflow_store, redis_client):
        redis_client.locks.add("workflow-lock:alice:wf-1")

        with pytest.raises(InvalidInputError) as exc_info:
            async with workflow_store.locked("alice", "wf-1"):
                pass
        assert exc_info.value.field == "workflowId"

    async def test_lock_is_released(self, workflow_store, redis_client):
        async with workflow_store.locked("alice", "wf-1"):
            assert "workflow-lock:alice:wf-1" in redis_client.locks

        assert redis_client.locks == set()

    async def test_redis_errors_are_wrapped(self):
        redis_client = MagicMock()
        redis_client.get = AsyncMock(side_effect=RedisConnectionError("connection refused"))
        store = WorkflowStore(redis_client, ttl_seconds=60)

        with pytest.raises(DatabaseError):
            await store.load("alice", "wf-1")
