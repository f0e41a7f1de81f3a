"""Dataset router for access-controlled dataset operations."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from access_control import DatasetService
from api.dependencies import get_dataset_service
from api.models import DatasetListResponse, RenameDatasetRequest, ShareRequest, UnshareRequest
from api.routers.dependencies import get_current_user_id
from api.utils.errors import internal_server_error, to_http_exception
from document_store.models import Dataset, SharedGrant
from exceptions import ServiceError
from utils.logging import logger

router = APIRouter(prefix="/datasets", tags=["datasets"])


@router.get("", response_model=DatasetListResponse)
async def list_datasets(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    service: DatasetService = Depends(get_dataset_service),
) -> DatasetListResponse:
    """List the datasets owned by the caller."""
    try:
        datasets = await service.list_owned(user_id, page=page, limit=limit)
        return DatasetListResponse(datasets=datasets, page=page, limit=limit)
    except ServiceError as e:
        logger.error(f"Failed to list datasets: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error listing datasets: {str(e)}")
        raise internal_server_error()


@router.get("/shared", response_model=List[Dataset])
async def list_shared_datasets(
    user_id: str = Depends(get_current_user_id),
    service: DatasetService = Depends(get_dataset_service),
) -> List[Dataset]:
    """List the datasets shared with the caller directly or through a team."""
    try:
        return await service.list_shared(user_id)
    except ServiceError as e:
        logger.error(f"Failed to list shared datasets: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error listing shared datasets: {str(e)}")
        raise internal_server_error()


@router.get("/{dataset_id}", response_model=Dataset)
async def get_dataset(
    dataset_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DatasetService = Depends(get_dataset_service),
) -> Dataset:
    try:
        return await service.get(user_id, dataset_id)
    except ServiceError as e:
        logger.error(f"Failed to get dataset {dataset_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error getting dataset {dataset_id}: {str(e)}")
        raise internal_server_error()


@router.patch("/{dataset_id}", response_model=Dataset)
async def rename_dataset(
    dataset_id: str,
    request: RenameDatasetRequest,
    user_id: str = Depends(get_current_user_id),
    service: DatasetService = Depends(get_dataset_service),
) -> Dataset:
    try:
        return await service.rename(user_id, dataset_id, request.dataset_name)
    except ServiceError as e:
        logger.error(f"Failed to rename dataset {dataset_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error renaming dataset {dataset_id}: {str(e)}")
        raise internal_server_error()


@router.delete("/{dataset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dataset(
    dataset_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DatasetService = Depends(get_dataset_service),
) -> Response:
    try:
        await service.delete(user_id, dataset_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ServiceError as e:
        logger.error(f"Failed to delete dataset {dataset_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error deleting dataset {dataset_id}: {str(e)}")
        raise internal_server_error()


@router.post("/{dataset_id}/share", response_model=SharedGrant)
async def share_dataset(
    dataset_id: str,
    request: ShareRequest,
    user_id: str = Depends(get_current_user_id),
    service: DatasetService = Depends(get_dataset_service),
) -> SharedGrant:
    """Grant or change a user's permission on a dataset."""
    try:
        return await service.share(user_id, dataset_id, request.user_id, request.permission)
    except ServiceError as e:
        logger.error(f"Failed to share dataset {dataset_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error sharing dataset {dataset_id}: {str(e)}")
        raise internal_server_error()


@router.delete("/{dataset_id}/share", status_code=status.HTTP_204_NO_CONTENT)
async def unshare_dataset(
    dataset_id: str,
    request: UnshareRequest,
    user_id: str = Depends(get_current_user_id),
    service: DatasetService = Depends(get_dataset_service),
) -> Response:
    try:
        await service.unshare(user_id, dataset_id, request.user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except ServiceError as e:
        logger.error(f"Failed to unshare dataset {dataset_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error unsharing dataset {dataset_id}: {str(e)}")
        raise internal_server_error()


@router.get("/{dataset_id}/share", response_model=List[SharedGrant])
async def list_dataset_permissions(
    dataset_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DatasetService = Depends(get_dataset_service),
) -> List[SharedGrant]:
    try:
        return await service.list_permissions(user_id, dataset_id)
    except ServiceError as e:
        logger.error(f"Failed to list permissions of dataset {dataset_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error listing permissions of dataset {dataset_id}: {str(e)}")
        raise internal_server_error()
