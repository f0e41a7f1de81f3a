"""App settings."""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from constants import (
    ALLOWED_DOMAINS,
    ANALYSIS_ENGINE_URL,
    ANALYSIS_TIMEOUT_SECONDS,
    AZURE_STORAGE_ACCOUNT,
    AZURE_STORAGE_CONTAINER,
    DATABASE_CONNECTION_STRING,
    DATABASE_NAME,
    ENVIRONMENT,
    IS_LOCAL,
    LOGGING_LEVEL,
    REDIS_URL,
    WORKFLOW_LOCK_TIMEOUT_SECONDS,
    WORKFLOW_TTL_SECONDS,
)


class Settings(BaseSettings):
    """Service settings configuration."""

    # API settings
    api_title: str = "Insightflow API"
    api_version: str = "1.0.0"
    api_description: str = "Dataset intake, analysis and access control API"
    host: str = "0.0.0.0"
    port: int = 8000
    is_local: bool = IS_LOCAL
    environment: str = ENVIRONMENT

    # Logging
    logging_level: int = LOGGING_LEVEL

    # Database settings
    database_connection_string: str = DATABASE_CONNECTION_STRING
    database_name: str = DATABASE_NAME

    # Redis settings
    redis_url: str = REDIS_URL
    workflow_ttl_seconds: int = WORKFLOW_TTL_SECONDS
    workflow_lock_timeout_seconds: int = WORKFLOW_LOCK_TIMEOUT_SECONDS
    workflow_lock_wait_seconds: float = 5.0

    # Analysis engine settings
    analysis_engine_url: str = ANALYSIS_ENGINE_URL
    analysis_timeout_seconds: float = ANALYSIS_TIMEOUT_SECONDS

    # Azure Blob Storage settings
    azure_storage_account: str = AZURE_STORAGE_ACCOUNT
    azure_storage_container: str = AZURE_STORAGE_CONTAINER

    # Wizard settings
    allowed_domains: List[str] = Field(default_factory=lambda: list(ALLOWED_DOMAINS))

    # Raw environment values are parsed in constants.py
    model_config = SettingsConfigDict(env_prefix="INSIGHTFLOW_")


settings = Settings()
