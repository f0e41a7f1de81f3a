"""Constants for the application."""

import logging
import os
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "t", "yes", "y")


def _as_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# App settings
IS_LOCAL = _as_bool(os.environ.get("IS_LOCAL", "false"))
ENVIRONMENT = os.environ.get("ENVIRONMENT", "local")
LOGGING_LEVEL = getattr(logging, os.environ.get("LOGGING_LEVEL", "INFO").upper(), logging.INFO)

# MongoDB settings
DATABASE_CONNECTION_STRING = os.environ.get("DATABASE_CONNECTION_STRING", "mongodb://localhost:27017")
DATABASE_NAME = os.environ.get("DATABASE_NAME", "insightflow")

# Redis settings (wizard workflow store)
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
WORKFLOW_TTL_SECONDS = int(os.environ.get("WORKFLOW_TTL_SECONDS", "86400"))
WORKFLOW_LOCK_TIMEOUT_SECONDS = int(os.environ.get("WORKFLOW_LOCK_TIMEOUT_SECONDS", "30"))

# Analysis engine settings
ANALYSIS_ENGINE_URL = os.environ.get("ANALYSIS_ENGINE_URL", "http://localhost:5000")
ANALYSIS_TIMEOUT_SECONDS = float(os.environ.get("ANALYSIS_TIMEOUT_SECONDS", "300"))

# Azure Blob Storage settings
AZURE_STORAGE_ACCOUNT = os.environ.get("AZURE_STORAGE_ACCOUNT", "")
AZURE_STORAGE_CONTAINER = os.environ.get("AZURE_STORAGE_CONTAINER", "insightflow")

# Wizard settings
ALLOWED_DOMAINS = _as_list(os.environ.get("ALLOWED_DOMAINS", "ecommerce,HR"))
