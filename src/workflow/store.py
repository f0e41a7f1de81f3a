"""Redis-backed storage for wizard workflows."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.asyncio import Redis
from redis.exceptions import LockError, RedisError

from exceptions import DatabaseError, InvalidInputError
from settings import settings
from utils.logging import logger
from workflow.models import WorkflowContext


class WorkflowStore:
    """Stores one JSON document per workflow under ``workflow:{user_id}:{workflow_id}``.

    Keys expire after the configured TTL, so abandoned wizards clean themselves up.
    Keying by user keeps a workflow invisible to every other user.
    """

    KEY_PREFIX: str = "workflow"
    LOCK_PREFIX: str = "workflow-lock"

    def __init__(
        self,
        redis_client: Redis,
        ttl_seconds: Optional[int] = None,
        lock_timeout_seconds: Optional[int] = None,
        lock_wait_seconds: Optional[float] = None,
    ) -> None:
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds or settings.workflow_ttl_seconds
        self.lock_timeout_seconds = lock_timeout_seconds or settings.workflow_lock_timeout_seconds
        self.lock_wait_seconds = lock_wait_seconds if lock_wait_seconds is not None else settings.workflow_lock_wait_seconds

    def _key(self, user_id: str, workflow_id: str) -> str:
        return f"{self.KEY_PREFIX}:{user_id}:{workflow_id}"

    async def load(self, user_id: str, workflow_id: str) -> Optional[WorkflowContext]:
        try:
            raw = await self.redis.get(self._key(user_id, workflow_id))
        except RedisError as e:
            raise DatabaseError(f"Failed to load workflow: {str(e)}")

        if raw is None:
            return None
        return WorkflowContext.model_validate_json(raw)

    async def save(self, context: WorkflowContext) -> None:
        try:
            await self.redis.set(
                self._key(context.user_id, context.workflow_id),
                context.model_dump_json(by_alias=True),
                ex=self.ttl_seconds,
            )
        except RedisError as e:
            raise DatabaseError(f"Failed to save workflow: {str(e)}")

    async def delete(self, user_id: str, workflow_id: str) -> bool:
        """Delete a workflow. Returns False when it did not exist."""
        try:
            return bool(await self.redis.delete(self._key(user_id, workflow_id)))
        except RedisError as e:
            raise DatabaseError(f"Failed to delete workflow: {str(e)}")

    @asynccontextmanager
    async def locked(self, user_id: str, workflow_id: str) -> AsyncIterator[None]:
        """Serialize read-modify-save cycles on one workflow across requests."""
        lock = self.redis.lock(
            f"{self.LOCK_PREFIX}:{user_id}:{workflow_id}",
            timeout=self.lock_timeout_seconds,
            blocking_timeout=self.lock_wait_seconds,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            raise DatabaseError(f"Failed to lock workflow: {str(e)}")

        if not acquired:
            logger.info(f"Workflow {workflow_id} of user {user_id} is locked by another request")
            raise InvalidInputError("Workflow is busy, retry the request", field="workflowId")

        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError as e:
                # Lock expired while the request was still running
                logger.warning(f"Failed to release lock on workflow {workflow_id}: {str(e)}")
