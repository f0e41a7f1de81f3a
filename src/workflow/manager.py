"""Stage transitions of the dataset intake wizard.

Stages may arrive in any order and may be revisited; each call overwrites what it
records. Only ``require_ready``, used right before analysis, enforces that the
mandatory subset (domain, source URL, processing options) is present.
"""

from typing import Any, Dict, List, Optional, Sequence

from document_store.models import Permission
from document_store.models.base import utc_now
from exceptions import InvalidInputError, NotFoundError
from settings import settings
from utils.logging import logger
from workflow.models import (
    AccessRequest,
    AnalysisOption,
    GrantStepResult,
    ProcessingOptions,
    WorkflowContext,
    WorkflowStage,
    new_workflow_id,
)
from workflow.store import WorkflowStore

MISSING_PREVIOUS_STEP = "Missing previous step data. Please start from the beginning."
ALREADY_GENERATING = "Insights are already being generated for this workflow"


class WizardSessionManager:
    """Records wizard choices on an explicit, per-user workflow context."""

    def __init__(self, store: WorkflowStore, allowed_domains: Optional[Sequence[str]] = None) -> None:
        self.store = store
        self.allowed_domains = list(allowed_domains) if allowed_domains is not None else list(settings.allowed_domains)

    async def select_domain(self, user_id: str, workflow_id: Optional[str], domain_type: str) -> WorkflowContext:
        """Start a workflow (or reuse one) with the chosen domain."""
        if domain_type not in self.allowed_domains:
            raise InvalidInputError(f"Invalid domain type selected: {domain_type}", field="domainType")

        return await self._update(
            user_id,
            workflow_id,
            {"domain_type": domain_type, "stage": WorkflowStage.DOMAIN_SELECTED},
        )

    async def record_upload(self, user_id: str, workflow_id: Optional[str], source_url: str) -> WorkflowContext:
        """Store the uploaded source URL. A missing domain is only caught at finalize."""
        if not source_url:
            raise InvalidInputError("Dataset URL is required", field="fileUrl")

        return await self._update(user_id, workflow_id, {"source_url": source_url, "stage": WorkflowStage.UPLOAD})

    async def record_options(
        self,
        user_id: str,
        workflow_id: Optional[str],
        analysis_option: str,
        download_after_creating: bool = False,
    ) -> WorkflowContext:
        try:
            option = AnalysisOption(analysis_option)
        except ValueError:
            valid = ", ".join(o.value for o in AnalysisOption)
            raise InvalidInputError(f"Invalid analysis option: {analysis_option}. Must be one of: {valid}", field="analysis_option")

        options = ProcessingOptions(analysis_option=option, download_after_creating=bool(download_after_creating))
        return await self._update(user_id, workflow_id, {"processing_options": options, "stage": WorkflowStage.PROCESSING})

    async def record_grants(self, user_id: str, workflow_id: Optional[str], grant_list: Any) -> GrantStepResult:
        """Validate and store the grants to apply after analysis.

        The whole list is rejected if any entry is invalid.
        """
        requests = self._parse_access_requests(grant_list)

        context = await self._update(
            user_id,
            workflow_id,
            {"access_requests": requests, "stage": WorkflowStage.ACCESS_GRANTED},
            create=False,
            require_domain=True,
        )

        result = GrantStepResult(users_count=len(requests), context=context)
        if context.source_url and context.processing_options:
            result.next_step = "/generate-insights"
            result.is_complete = True
        elif not context.source_url:
            result.next_step = "/upload"
        else:
            result.next_step = "/processing-options"
        return result

    async def require_ready(self, user_id: str, workflow_id: Optional[str]) -> WorkflowContext:
        """Return the workflow if every mandatory stage has been recorded."""
        context = await self.store.load(user_id, workflow_id) if workflow_id else None
        if context is None or not context.domain_type:
            raise InvalidInputError(MISSING_PREVIOUS_STEP, field="workflowId")
        if not context.source_url:
            raise InvalidInputError("Dataset URL is required", field="fileUrl")
        if context.processing_options is None:
            raise InvalidInputError(MISSING_PREVIOUS_STEP, field="processing_options")
        return context

    async def claim(self, user_id: str, workflow_id: Optional[str]) -> WorkflowContext:
        """Reserve a ready workflow for insight generation.

        The workflow is marked complete under its lock, so a second finalize request on
        the same workflow is rejected instead of creating another dataset. Returns the
        context as it was before the claim, to be handed back to ``release`` on failure.
        """
        if not workflow_id:
            raise InvalidInputError(MISSING_PREVIOUS_STEP, field="workflowId")

        async with self.store.locked(user_id, workflow_id):
            context = await self.require_ready(user_id, workflow_id)
            if context.stage is WorkflowStage.COMPLETE:
                raise InvalidInputError(ALREADY_GENERATING, field="workflowId")
            await self.store.save(context.model_copy(update={"stage": WorkflowStage.COMPLETE, "updated_at": utc_now()}))

        logger.info(f"Workflow {workflow_id} of user {user_id} claimed for insight generation")
        return context

    async def release(self, context: WorkflowContext) -> None:
        """Undo a claim after generation failed, restoring the recorded stage."""
        async with self.store.locked(context.user_id, context.workflow_id):
            await self.store.save(context.model_copy(update={"updated_at": utc_now()}))
        logger.info(f"Workflow {context.workflow_id} of user {context.user_id} released at stage {context.stage.value}")

    async def abandon(self, user_id: str, workflow_id: str) -> None:
        if not await self.store.delete(user_id, workflow_id):
            raise NotFoundError(f"Workflow {workflow_id} not found", field="workflowId")
        logger.info(f"Workflow {workflow_id} abandoned by user {user_id}")

    async def complete(self, user_id: str, workflow_id: str) -> None:
        await self.store.delete(user_id, workflow_id)
        logger.info(f"Workflow {workflow_id} of user {user_id} completed")

    async def _update(
        self,
        user_id: str,
        workflow_id: Optional[str],
        changes: Dict[str, Any],
        create: bool = True,
        require_domain: bool = False,
    ) -> WorkflowContext:
        workflow_id = workflow_id or new_workflow_id()

        async with self.store.locked(user_id, workflow_id):
            context = await self.store.load(user_id, workflow_id)
            if context is None:
                if not create:
                    raise InvalidInputError(MISSING_PREVIOUS_STEP, field="workflowId")
                context = WorkflowContext(workflow_id=workflow_id, user_id=user_id)
            if context.stage is WorkflowStage.COMPLETE:
                raise InvalidInputError(ALREADY_GENERATING, field="workflowId")
            if require_domain and not context.domain_type:
                raise InvalidInputError(MISSING_PREVIOUS_STEP, field="domainType")

            updated = context.model_copy(update={**changes, "updated_at": utc_now()})
            await self.store.save(updated)

        logger.info(f"Workflow {workflow_id} of user {user_id} moved to stage {updated.stage.value}")
        return updated

    @staticmethod
    def _parse_access_requests(grant_list: Any) -> List[AccessRequest]:
        if not isinstance(grant_list, list) or not grant_list:
            raise InvalidInputError("userPermissions must be provided as a non-empty array of user objects", field="userPermissions")

        requests = []
        for index, entry in enumerate(grant_list):
            if not isinstance(entry, dict) or not entry.get("userId") or not entry.get("permission"):
                raise InvalidInputError("Each user permission entry must contain userId and permission", field=f"userPermissions[{index}]")

            permission = Permission.parse(entry["permission"], field=f"userPermissions[{index}].permission")
            requests.append(AccessRequest(user_id=str(entry["userId"]), permission=permission))
        return requests
