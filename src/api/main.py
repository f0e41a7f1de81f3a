"""Main FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from analysis import AnalysisEngineClient, ArtifactStore
from api.routers import datasets, teams, wizard
from document_store.manager import DatabaseManager
from settings import settings
from utils.logging import logger
from workflow import WorkflowStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Repositories and clients shared by every request of this worker
    database_manager = DatabaseManager()
    redis_client = Redis.from_url(settings.redis_url, decode_responses=True)
    artifact_store = ArtifactStore()

    app.state.dataset_manager = await database_manager.setup_dataset_manager()
    app.state.team_manager = await database_manager.setup_team_manager()
    app.state.user_manager = database_manager.user_manager()
    app.state.workflow_store = WorkflowStore(redis_client)
    app.state.engine_client = AnalysisEngineClient()
    app.state.artifact_store = artifact_store
    logger.info(f"{settings.api_title} started in {settings.environment} environment")

    yield

    database_manager.close()
    await artifact_store.close()
    await redis_client.aclose()


def create_app() -> FastAPI:
    """Create FastAPI application."""
    app = FastAPI(title=settings.api_title, version=settings.api_version, description=settings.api_description, lifespan=lifespan)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allows all origins
        allow_credentials=True,
        allow_methods=["*"],  # Allows all methods
        allow_headers=["*"],  # Allows all headers
    )

    # Wizard routes first so that /datasets/workflow is not taken for a dataset id
    app.include_router(wizard.router)
    app.include_router(datasets.router)
    app.include_router(teams.router)

    return app


app = create_app()
