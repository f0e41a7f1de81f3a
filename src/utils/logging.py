"""Logging utilities for the application."""

import logging
import os
import sys

# Import OpenTelemetry components for Azure Monitor
from azure.monitor.opentelemetry import configure_azure_monitor
from opentelemetry.instrumentation.logging import LoggingInstrumentor

from settings import settings

# Create and configure application logger
logger = logging.getLogger("insightflow")

logger.setLevel(settings.logging_level)

# Process and thread IDs identify the uvicorn worker handling a request
formatter = logging.Formatter("%(asctime)s - PID:%(process)d - Thread:%(thread)d - %(name)s - %(levelname)s - %(message)s")

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(formatter)
logger.addHandler(console_handler)

# Ship logs to Application Insights when a connection string is configured
appinsights_connection_string = os.environ.get("APPLICATIONINSIGHTS_CONNECTION_STRING")
if appinsights_connection_string:
    configure_azure_monitor(
        connection_string=appinsights_connection_string,
    )

    LoggingInstrumentor().instrument(level=settings.logging_level, excluded_loggers=["azure"])  # Avoid recursive logging

# Prevent propagation to root logger to avoid duplicate logs
logger.propagate = False
