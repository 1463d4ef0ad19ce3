import logging
from typing import List

from vault_api.adapters.storage import StorageDirectory
from vault_api.schemas import CatalogEntry
from vault_api.services.urls import file_url

logger = logging.getLogger(__name__)


class CatalogService:
    """Derives the file listing from the storage directory on every call; nothing is cached."""

    def __init__(self, storage: StorageDirectory):
        self.storage = storage

    def list_entries(self, base_url: str) -> List[CatalogEntry]:
        # raises DirectoryUnreadable; partial listings are never returned
        entries = [
            CatalogEntry(name=path.name, url=file_url(base_url, path.name))
            for path in self.storage.iter_files()
        ]
        logger.debug(f"Catalog of {self.storage.root} has {len(entries)} entries")
        return entries
