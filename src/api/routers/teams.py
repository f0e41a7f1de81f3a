"""Team router."""

from typing import List

from fastapi import APIRouter, Depends, status

from access_control import TeamService
from api.dependencies import get_team_service
from api.models import TeamCreateRequest, TeamDatasetsRequest, TeamMembersRequest, TeamPermissionRequest
from api.routers.dependencies import get_current_user_id
from api.utils.errors import internal_server_error, to_http_exception
from document_store.models import Team
from exceptions import ServiceError
from utils.logging import logger

router = APIRouter(prefix="/teams", tags=["teams"])


@router.post("", response_model=Team, status_code=status.HTTP_201_CREATED)
async def create_team(
    request: TeamCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: TeamService = Depends(get_team_service),
) -> Team:
    """Create a team owned by the caller."""
    try:
        return await service.create_team(user_id, request.name, request.members, request.datasets, request.member_permission)
    except ServiceError as e:
        logger.error(f"Failed to create team: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error creating team: {str(e)}")
        raise internal_server_error()


@router.get("", response_model=List[Team])
async def list_teams(
    user_id: str = Depends(get_current_user_id),
    service: TeamService = Depends(get_team_service),
) -> List[Team]:
    try:
        return await service.list_teams(user_id)
    except ServiceError as e:
        logger.error(f"Failed to list teams: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error listing teams: {str(e)}")
        raise internal_server_error()


@router.patch("/{team_id}/members", response_model=Team)
async def update_team_members(
    team_id: str,
    request: TeamMembersRequest,
    user_id: str = Depends(get_current_user_id),
    service: TeamService = Depends(get_team_service),
) -> Team:
    try:
        return await service.update_members(user_id, team_id, request.members)
    except ServiceError as e:
        logger.error(f"Failed to update members of team {team_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error updating members of team {team_id}: {str(e)}")
        raise internal_server_error()


@router.patch("/{team_id}/datasets", response_model=Team)
async def assign_team_datasets(
    team_id: str,
    request: TeamDatasetsRequest,
    user_id: str = Depends(get_current_user_id),
    service: TeamService = Depends(get_team_service),
) -> Team:
    try:
        return await service.assign_datasets(user_id, team_id, request.datasets)
    except ServiceError as e:
        logger.error(f"Failed to assign datasets to team {team_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error assigning datasets to team {team_id}: {str(e)}")
        raise internal_server_error()


@router.patch("/{team_id}/permission", response_model=Team)
async def update_team_permission(
    team_id: str,
    request: TeamPermissionRequest,
    user_id: str = Depends(get_current_user_id),
    service: TeamService = Depends(get_team_service),
) -> Team:
    try:
        return await service.update_member_permission(user_id, team_id, request.member_permission)
    except ServiceError as e:
        logger.error(f"Failed to update permission of team {team_id}: {e.message}")
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Unexpected error updating permission of team {team_id}: {str(e)}")
        raise internal_server_error()
