"""API dependencies.

Repositories and clients are created once in the application lifespan and stored on
``app.state``. Services are cheap and built per request on top of them.
"""

from fastapi import Depends, Request

from access_control import DatasetService, PermissionResolver, SharingService, TeamService
from analysis import AnalysisEngineClient, AnalysisOrchestrator, ArtifactStore
from document_store.dataset_manager import DatasetManager
from document_store.team_manager import TeamManager
from document_store.user_manager import UserManager
from workflow import WizardSessionManager, WorkflowStore


def get_dataset_manager(request: Request) -> DatasetManager:
    return request.app.state.dataset_manager


def get_team_manager(request: Request) -> TeamManager:
    return request.app.state.team_manager


def get_user_manager(request: Request) -> UserManager:
    return request.app.state.user_manager


def get_workflow_store(request: Request) -> WorkflowStore:
    return request.app.state.workflow_store


def get_engine_client(request: Request) -> AnalysisEngineClient:
    return request.app.state.engine_client


def get_artifact_store(request: Request) -> ArtifactStore:
    return request.app.state.artifact_store


def get_permission_resolver(
    datasets: DatasetManager = Depends(get_dataset_manager),
    teams: TeamManager = Depends(get_team_manager),
) -> PermissionResolver:
    return PermissionResolver(datasets, teams)


def get_sharing_service(
    datasets: DatasetManager = Depends(get_dataset_manager),
    users: UserManager = Depends(get_user_manager),
) -> SharingService:
    return SharingService(datasets, users)


def get_dataset_service(
    resolver: PermissionResolver = Depends(get_permission_resolver),
    sharing: SharingService = Depends(get_sharing_service),
    datasets: DatasetManager = Depends(get_dataset_manager),
    teams: TeamManager = Depends(get_team_manager),
) -> DatasetService:
    return DatasetService(resolver, sharing, datasets, teams)


def get_team_service(
    teams: TeamManager = Depends(get_team_manager),
    users: UserManager = Depends(get_user_manager),
    resolver: PermissionResolver = Depends(get_permission_resolver),
) -> TeamService:
    return TeamService(teams, users, resolver)


def get_wizard(store: WorkflowStore = Depends(get_workflow_store)) -> WizardSessionManager:
    return WizardSessionManager(store)


def get_orchestrator(
    wizard: WizardSessionManager = Depends(get_wizard),
    engine: AnalysisEngineClient = Depends(get_engine_client),
    artifacts: ArtifactStore = Depends(get_artifact_store),
    datasets: DatasetManager = Depends(get_dataset_manager),
    sharing: SharingService = Depends(get_sharing_service),
) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(wizard, engine, artifacts, datasets, sharing)
