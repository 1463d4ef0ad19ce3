import logging
from datetime import datetime, timezone
from typing import BinaryIO, Optional

from vault_api.adapters.storage import StorageDirectory
from vault_api.schemas import DEFAULT_CONTENT_TYPE, FileDescriptor
from vault_api.services.urls import file_url
from vault_api.utils.filenames import make_stored_name

logger = logging.getLogger(__name__)


class IngestionService:
    """Accepts one uploaded file and persists it under a fresh stored name."""

    def __init__(self, storage: StorageDirectory):
        self.storage = storage

    def ingest(
        self,
        original_name: str,
        stream: BinaryIO,
        base_url: str,
        content_type: Optional[str] = None,
    ) -> FileDescriptor:
        """
        Write ``stream`` to storage and describe the result.

        Args:
            original_name: File name as sent by the client
            stream: Payload, read to exhaustion
            base_url: Scheme and host used to build the file URL
            content_type: MIME type declared by the client

        Returns:
            FileDescriptor of the stored file
        """
        stored_name = make_stored_name(original_name)
        logger.info(f"Ingesting {original_name!r} as {stored_name}")

        size = self.storage.write(stored_name, stream)

        return FileDescriptor(
            stored_name=stored_name,
            original_name=original_name,
            size_bytes=size,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            url=file_url(base_url, stored_name),
            uploaded_at=datetime.now(timezone.utc),
        )
