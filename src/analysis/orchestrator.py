"""Insight generation: engine call, artifact persistence, dataset creation and grants."""

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from access_control.sharing import SharingService
from analysis.artifact_store import ArtifactStore
from analysis.classifier import classify_artifacts
from analysis.engine_client import AnalysisEngineClient
from document_store.dataset_manager import DatasetManager
from document_store.models import (
    Dataset,
    FilteredInsight,
    InsightCategory,
    InsightReference,
    Permission,
)
from document_store.models.base import new_document_id
from exceptions import InvalidInputError, PartialArtifactFailure, ServiceError
from utils.logging import logger
from workflow.manager import WizardSessionManager
from workflow.models import AccessRequest, AnalysisOption


class GrantFailure(BaseModel):
    """A requested grant that could not be applied to the new dataset."""

    user_id: str = Field(..., alias="userId")
    permission: Permission
    reason: str

    model_config = {"populate_by_name": True}


class InsightGenerationResult(BaseModel):
    dataset: Dataset
    grant_failures: List[GrantFailure] = Field(default_factory=list, alias="grantFailures")

    model_config = {"populate_by_name": True}


class AnalysisOrchestrator:
    """Final wizard stage.

    An engine failure aborts before anything is written. After the engine answers,
    single artifacts and single grants may fail without failing the request.
    """

    def __init__(
        self,
        wizard: WizardSessionManager,
        engine: AnalysisEngineClient,
        artifacts: ArtifactStore,
        datasets: DatasetManager,
        sharing: SharingService,
    ) -> None:
        self.wizard = wizard
        self.engine = engine
        self.artifacts = artifacts
        self.datasets = datasets
        self.sharing = sharing

    async def generate_insights(self, user_id: str, workflow_id: Optional[str], dataset_name: Optional[str]) -> InsightGenerationResult:
        name = (dataset_name or "").strip()
        if not name:
            raise InvalidInputError("Dataset name is required", field="dataset_name")

        context = await self.wizard.claim(user_id, workflow_id)
        option = context.processing_options.analysis_option
        logger.info(f"Generating insights for workflow {context.workflow_id} of user {user_id} ({option.value})")

        try:
            response = await self.engine.run(option, context.source_url, context.domain_type)

            dataset_id = new_document_id()
            insights: Dict[InsightCategory, List[InsightReference]] = {}
            if option is AnalysisOption.CLEAN_AND_GENERATE:
                insights = await self._persist_artifacts(dataset_id, response.images)

            dataset = await self.datasets.save_dataset(
                Dataset(
                    id=dataset_id,
                    user_id=user_id,
                    name=name,
                    dataset_url=context.source_url,
                    cleaned_dataset_url=response.cleaned_csv,
                    domain_type=context.domain_type,
                    insights=insights,
                )
            )
        except Exception:
            # No dataset exists yet, so the workflow can be finalized again
            await self.wizard.release(context)
            raise

        logger.info(f"Dataset {dataset.id} created with {sum(len(refs) for refs in insights.values())} artifacts")

        grant_failures = await self._apply_grants(dataset.id, context.access_requests)
        await self.wizard.complete(user_id, context.workflow_id)

        if len(grant_failures) < len(context.access_requests):
            # Pick up the shared usernames written by the grants
            dataset = await self.datasets.get_dataset(dataset.id)

        return InsightGenerationResult(dataset=dataset, grant_failures=grant_failures)

    async def _persist_artifacts(self, dataset_id: str, images: Sequence[Sequence[Any]]) -> Dict[InsightCategory, List[InsightReference]]:
        classification = classify_artifacts(images)
        for failure in classification.rejected:
            logger.error(f"Skipping artifact: {str(failure)}")

        insights: Dict[InsightCategory, List[InsightReference]] = {}
        for category, artifacts in classification.buckets.items():
            for artifact in artifacts:
                try:
                    url = await self.artifacts.store_artifact(artifact.payload, dataset_id, category)
                except PartialArtifactFailure as e:
                    logger.error(f"Skipping {category.value} artifact at position {artifact.position}: {str(e)}")
                    continue

                if category.is_filtered:
                    insights.setdefault(category, []).append(FilteredInsight(url=url, filter_number=artifact.filter_number))
                else:
                    insights.setdefault(category, []).append(url)

        return insights

    async def _apply_grants(self, dataset_id: str, requests: List[AccessRequest]) -> List[GrantFailure]:
        failures = []
        for request in requests:
            try:
                await self.sharing.share(dataset_id, request.user_id, request.permission)
            except ServiceError as e:
                logger.warning(f"Could not grant {request.permission.value} on dataset {dataset_id} to user {request.user_id}: {e.message}")
                failures.append(GrantFailure(user_id=request.user_id, permission=request.permission, reason=e.message))
        return failures
