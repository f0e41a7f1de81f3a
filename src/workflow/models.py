"""Wizard workflow state."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from document_store.models import Permission
from document_store.models.base import utc_now


def new_workflow_id() -> str:
    return uuid4().hex


class WorkflowStage(str, Enum):
    """Last stage recorded for a workflow."""

    DOMAIN_SELECTED = "domain-selected"
    UPLOAD = "upload"
    PROCESSING = "processing"
    ACCESS_GRANTED = "access-granted"
    COMPLETE = "complete"


class AnalysisOption(str, Enum):
    CLEAN_ONLY = "clean_only"
    CLEAN_AND_GENERATE = "clean_and_generate"


class ProcessingOptions(BaseModel):
    """Processing choices. `download_after_creating` is only stored for the client to act on."""

    analysis_option: AnalysisOption
    download_after_creating: bool = Field(default=False, alias="downloadAfterCreating")

    model_config = {"populate_by_name": True}


class AccessRequest(BaseModel):
    """A grant to apply once the dataset exists."""

    user_id: str = Field(..., alias="userId")
    permission: Permission

    model_config = {"populate_by_name": True}


class WorkflowContext(BaseModel):
    """Choices accumulated by one user's wizard run, stored in Redis until completion."""

    workflow_id: str = Field(default_factory=new_workflow_id)
    user_id: str = Field(..., description="Owner of the workflow and of the dataset it produces")
    stage: Optional[WorkflowStage] = None
    domain_type: Optional[str] = None
    source_url: Optional[str] = None
    processing_options: Optional[ProcessingOptions] = None
    access_requests: List[AccessRequest] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = {"populate_by_name": True}


class GrantStepResult(BaseModel):
    access_granted: bool = True
    users_count: int
    next_step: Optional[str] = None
    is_complete: bool = False
    context: WorkflowContext
