"""API request and response models."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from document_store.models import Dataset


class ApiModel(BaseModel):
    """Accepts and emits the camelCase names used by the web client."""

    model_config = {"populate_by_name": True}


class ChooseDomainRequest(ApiModel):
    domain_type: str = Field(..., alias="domainType", description="Business domain of the dataset")


class ChooseDomainResponse(ApiModel):
    domain_type: str = Field(..., alias="domainType")
    next_step: str = Field(..., alias="nextStep")
    session_id: str = Field(..., alias="sessionId", description="Workflow identifier to send as X-Workflow-Id")


class UploadResponse(ApiModel):
    file_url: str = Field(..., alias="fileUrl")
    next_step: str = Field(..., alias="nextStep")
    session_id: str = Field(..., alias="sessionId")


class ProcessingOptionsRequest(ApiModel):
    analysis_option: Optional[str] = Field(default=None, description="clean_only or clean_and_generate")
    download_after_creating: bool = Field(default=False, alias="downloadAfterCreating")


class ProcessingOptionsResponse(ApiModel):
    next_step: str = Field(..., alias="nextStep")
    session_id: str = Field(..., alias="sessionId")


class GrantAccessRequest(ApiModel):
    # Validated by the wizard so that a bad entry rejects the whole list with a 400
    user_permissions: Any = Field(default=None, alias="userPermissions")


class GrantAccessResponse(ApiModel):
    access_granted: bool = Field(..., alias="accessGranted")
    users_count: int = Field(..., alias="usersCount")
    next_step: Optional[str] = Field(default=None, alias="nextStep")
    is_complete: bool = Field(default=False, alias="isComplete")


class GenerateInsightsRequest(ApiModel):
    dataset_name: Optional[str] = None


class DatasetListResponse(ApiModel):
    datasets: List[Dataset]
    page: int
    limit: int


class RenameDatasetRequest(ApiModel):
    dataset_name: Optional[str] = None


class ShareRequest(ApiModel):
    user_id: str = Field(..., alias="userId")
    permission: str


class UnshareRequest(ApiModel):
    user_id: str = Field(..., alias="userId")


class TeamCreateRequest(ApiModel):
    name: Optional[str] = None
    members: List[str] = Field(default_factory=list)
    datasets: List[str] = Field(default_factory=list)
    member_permission: Optional[str] = Field(default=None, alias="memberPermission")


class TeamMembersRequest(ApiModel):
    members: Optional[List[str]] = None


class TeamDatasetsRequest(ApiModel):
    datasets: Optional[List[str]] = None


class TeamPermissionRequest(ApiModel):
    member_permission: Optional[str] = Field(default=None, alias="memberPermission")
