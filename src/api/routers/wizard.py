"""Dataset intake wizard router."""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from analysis import AnalysisOrchestrator, ArtifactStore, InsightGenerationResult
from api.dependencies import get_artifact_store, get_orchestrator, get_wizard
from api.models import (
    ChooseDomainRequest,
    ChooseDomainResponse,
    GenerateInsightsRequest,
    GrantAccessRequest,
    GrantAccessResponse,
    ProcessingOptionsRequest,
    ProcessingOptionsResponse,
    UploadResponse,
)
from api.routers.dependencies import get_current_user_id, get_workflow_id
from api.utils.errors import internal_server_error, to_http_exception
from exceptions import InvalidInputError, ServiceError
from utils.logging import logger
from workflow import WizardSessionManager

router = APIRouter(prefix="/datasets", tags=["wizard"])


@router.post("/choose-domain", response_model=ChooseDomainResponse)
async def choose_domain(
    request: ChooseDomainRequest,
    user_id: str = Depends(get_current_user_id),
    workflow_id: Optional[str] = Depends(get_workflow_id),
    wizard: WizardSessionManager = Depends(get_wizard),
) -> ChooseDomainResponse:
    """Start a workflow by choosing the dataset's domain."""
    try:
        context = await wizard.select_domain(user_id, workflow_id, request.domain_type)
        return ChooseDomainResponse(domain_type=context.domain_type, next_step="/upload", session_id=context.workflow_id)
    except ServiceError as e:
        logger.error(f"Failed to choose domain: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error choosing domain: {str(e)}")
        raise internal_server_error()


@router.post("/upload", response_model=UploadResponse)
async def upload_dataset(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    workflow_id: Optional[str] = Depends(get_workflow_id),
    wizard: WizardSessionManager = Depends(get_wizard),
    artifacts: ArtifactStore = Depends(get_artifact_store),
) -> UploadResponse:
    """Store the source file and record its URL on the workflow."""
    try:
        content = await file.read()
        if not content:
            raise InvalidInputError("No file uploaded", field="file")

        file_url = await artifacts.upload_source(content, user_id, file.filename, file.content_type)
        context = await wizard.record_upload(user_id, workflow_id, file_url)
        return UploadResponse(file_url=file_url, next_step="/processing-options", session_id=context.workflow_id)
    except ServiceError as e:
        logger.error(f"Failed to upload dataset: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error uploading dataset: {str(e)}")
        raise internal_server_error()
    finally:
        await file.close()


@router.post("/processing-options", response_model=ProcessingOptionsResponse)
async def processing_options(
    request: ProcessingOptionsRequest,
    user_id: str = Depends(get_current_user_id),
    workflow_id: Optional[str] = Depends(get_workflow_id),
    wizard: WizardSessionManager = Depends(get_wizard),
) -> ProcessingOptionsResponse:
    try:
        context = await wizard.record_options(user_id, workflow_id, request.analysis_option, request.download_after_creating)
        return ProcessingOptionsResponse(next_step="/grant-access", session_id=context.workflow_id)
    except ServiceError as e:
        logger.error(f"Failed to record processing options: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error recording processing options: {str(e)}")
        raise internal_server_error()


@router.post("/grant-access", response_model=GrantAccessResponse, response_model_exclude_none=True)
async def grant_access(
    request: GrantAccessRequest,
    user_id: str = Depends(get_current_user_id),
    workflow_id: Optional[str] = Depends(get_workflow_id),
    wizard: WizardSessionManager = Depends(get_wizard),
) -> GrantAccessResponse:
    """Record the grants to apply once the dataset exists."""
    try:
        result = await wizard.record_grants(user_id, workflow_id, request.user_permissions)
        return GrantAccessResponse(
            access_granted=result.access_granted,
            users_count=result.users_count,
            next_step=result.next_step,
            is_complete=result.is_complete,
        )
    except ServiceError as e:
        logger.error(f"Failed to record access grants: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error recording access grants: {str(e)}")
        raise internal_server_error()


@router.post("/generate-insights", response_model=InsightGenerationResult, status_code=status.HTTP_201_CREATED)
async def generate_insights(
    request: GenerateInsightsRequest,
    user_id: str = Depends(get_current_user_id),
    workflow_id: Optional[str] = Depends(get_workflow_id),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
) -> InsightGenerationResult:
    """Run the analysis and create the dataset."""
    try:
        return await orchestrator.generate_insights(user_id, workflow_id, request.dataset_name)
    except ServiceError as e:
        logger.error(f"Failed to generate insights: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error generating insights: {str(e)}")
        raise internal_server_error()


@router.delete("/workflow", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_workflow(
    user_id: str = Depends(get_current_user_id),
    workflow_id: Optional[str] = Depends(get_workflow_id),
    wizard: WizardSessionManager = Depends(get_wizard),
) -> Response:
    if not workflow_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"message": "Workflow id is required", "field": "workflowId"})

    try:
        await wizard.abandon(user_id, workflow_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ServiceError as e:
        logger.error(f"Failed to abandon workflow: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error abandoning workflow: {str(e)}")
        raise internal_server_error()
