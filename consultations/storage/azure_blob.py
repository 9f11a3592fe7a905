"""Azure Blob Storage photo store.

Each uploaded photo becomes one block blob named
``photo-<epoch millis>-<original filename>`` in a single container.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from azure.storage.blob import BlobServiceClient, ContainerClient

from consultations.executor import run_in_executor

logger = logging.getLogger(__name__)

BLOB_PREFIX = "photo"


def photo_blob_name(filename: str, now_ms: Optional[int] = None) -> str:
    """Build the blob name for an uploaded file."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{BLOB_PREFIX}-{now_ms}-{filename}"


class AzureBlobPhotoStore:
    """Uploads photo bytes to one Azure Blob container."""

    def __init__(
        self,
        connection_string: str = "",
        container_name: str = "photos",
        container_client: Optional[ContainerClient] = None,
    ) -> None:
        if container_client is None:
            if not connection_string:
                raise ValueError("An Azure Storage connection string is required.")
            service = BlobServiceClient.from_connection_string(connection_string)
            container_client = service.get_container_client(container_name)
        self._container = container_client

    async def upload_photo(self, filename: str, data: bytes) -> str:
        """Upload one file and return the blob URL."""
        blob_name = photo_blob_name(filename)
        blob_client = self._container.get_blob_client(blob_name)
        await run_in_executor(blob_client.upload_blob, data)
        logger.info("Uploaded %s (%d bytes)", blob_name, len(data))
        return blob_client.url

    async def upload_photos(self, files: Iterable[tuple[str, bytes]]) -> list[str]:
        """Upload ``(filename, bytes)`` pairs one at a time, in order.

        The first failing upload raises and the remaining files are not
        attempted. Blobs already written are left in place.
        """
        urls: list[str] = []
        for filename, data in files:
            urls.append(await self.upload_photo(filename, data))
        return urls
