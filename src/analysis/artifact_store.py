"""Durable storage of analysis artifacts and uploaded source files in Azure Blob Storage."""

import base64
import binascii
import os
import tempfile
from typing import Any, Optional, Tuple
from uuid import uuid4

from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from document_store.models import InsightCategory
from exceptions import PartialArtifactFailure
from settings import settings
from utils.azure_auth import get_azure_credential
from utils.logging import logger

_IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "png", "image/png"),
    (b"\xff\xd8\xff", "jpg", "image/jpeg"),
    (b"GIF8", "gif", "image/gif"),
)


def decode_payload(payload: Any) -> bytes:
    """Decode a base64 artifact payload, accepting an optional data URI prefix."""
    if not isinstance(payload, str) or not payload:
        raise PartialArtifactFailure("Artifact payload is not a base64 string")

    data = payload.split(",", 1)[1] if payload.startswith("data:") else payload
    try:
        content = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PartialArtifactFailure(f"Artifact payload could not be decoded: {str(e)}")

    if not content:
        raise PartialArtifactFailure("Artifact payload is empty")
    return content


def detect_image_type(content: bytes) -> Tuple[str, str]:
    """Return (extension, content type), defaulting to PNG."""
    for signature, extension, content_type in _IMAGE_SIGNATURES:
        if content.startswith(signature):
            return extension, content_type
    return "png", "image/png"


class ArtifactStore:
    """Uploads blobs and returns their URLs. Clients are created on first use."""

    def __init__(self, account_name: Optional[str] = None, container_name: Optional[str] = None):
        self.account_name = account_name or settings.azure_storage_account
        self.container_name = container_name or settings.azure_storage_container
        self.account_url = f"https://{self.account_name}.blob.core.windows.net"

        self._credential = None
        self._blob_service_client: Optional[BlobServiceClient] = None
        self._container_client: Optional[ContainerClient] = None

    async def _get_container_client(self) -> ContainerClient:
        if self._container_client is None:
            if self._credential is None:
                self._credential = get_azure_credential(do_async=True)
            self._blob_service_client = BlobServiceClient(account_url=self.account_url, credential=self._credential)
            self._container_client = self._blob_service_client.get_container_client(self.container_name)

            if not await self._container_client.exists():
                await self._container_client.create_container()

        return self._container_client

    async def upload_blob(self, data: Any, blob_name: str, content_type: str) -> str:
        """Upload bytes or a binary file object and return the blob URL."""
        container_client = await self._get_container_client()
        blob_client = container_client.get_blob_client(blob_name)
        await blob_client.upload_blob(data, overwrite=False, content_settings=ContentSettings(content_type=content_type))
        return blob_client.url

    async def store_artifact(self, payload: Any, dataset_id: str, category: InsightCategory) -> str:
        """Decode one artifact, stage it in a temporary file and upload it.

        Raises PartialArtifactFailure when the payload cannot be decoded or uploaded.
        The temporary file is removed on every exit path.
        """
        content = decode_payload(payload)
        extension, content_type = detect_image_type(content)
        blob_name = f"insights/{dataset_id}/{category.value}/{uuid4()}.{extension}"

        with tempfile.NamedTemporaryFile(prefix="artifact-", suffix=f".{extension}") as staged:
            staged.write(content)
            staged.flush()
            staged.seek(0)
            try:
                url = await self.upload_blob(staged, blob_name, content_type)
            except Exception as e:
                raise PartialArtifactFailure(f"Failed to upload artifact {blob_name}: {str(e)}", category=category.value)

        logger.info(f"Artifact uploaded to Azure Blob Storage: {blob_name}")
        return url

    async def upload_source(self, content: bytes, user_id: str, filename: Optional[str], content_type: Optional[str]) -> str:
        """Store an uploaded source dataset and return its URL."""
        extension = os.path.splitext(filename or "")[1].lower() or ".csv"
        blob_name = f"sources/{user_id}/{uuid4()}{extension}"
        url = await self.upload_blob(content, blob_name, content_type or "text/csv")
        logger.info(f"Source file uploaded to Azure Blob Storage: {blob_name}")
        return url

    async def close(self):
        """Close all clients and release resources."""
        if self._container_client:
            await self._container_client.close()
            self._container_client = None

        if self._blob_service_client:
            await self._blob_service_client.close()
            self._blob_service_client = None

        if self._credential is not None and hasattr(self._credential, "close"):
            await self._credential.close()
            self._credential = None
