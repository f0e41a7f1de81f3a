"""Azure credential selection for the artifact store."""

import os

from azure import identity
from azure.identity import aio as identity_async

from settings import settings
from utils.logging import logger


def get_azure_credential(do_async: bool = False):
    """Get the appropriate Azure credential based on the environment.

    Local runs authenticate with a service principal taken from the environment,
    deployed runs use the (optionally user-assigned) managed identity.
    """
    module = identity_async if do_async else identity

    if settings.is_local:
        logger.info("Using Service Principal authentication for local development")
        return module.ClientSecretCredential(
            tenant_id=os.environ["AZURE_TENANT_ID"],
            client_id=os.environ["AZURE_CLIENT_ID"],
            client_secret=os.environ["AZURE_CLIENT_SECRET"],
        )

    client_id = os.environ.get("AZURE_CLIENT_ID")
    if client_id:
        logger.info(f"Using User Managed Identity authentication with client ID: {client_id}")
        return module.ManagedIdentityCredential(client_id=client_id)

    logger.info("Using User Managed Identity authentication without client ID")
    return module.ManagedIdentityCredential()
