from fastapi import Depends, Request

from vault_api.adapters.storage import StorageDirectory
from vault_api.config.settings import Settings
from vault_api.services import CatalogService, IngestionService


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageDirectory:
    """Storage directory owned by the application; opened and closed by its lifespan."""
    return request.app.state.storage


def get_base_url(request: Request, settings: Settings = Depends(get_settings_from_app)) -> str:
    """Scheme and host used in file URLs."""
    return settings.public_base_url or str(request.base_url).rstrip("/")


def get_ingestion_service(storage: StorageDirectory = Depends(get_storage)) -> IngestionService:
    return IngestionService(storage)


def get_catalog_service(storage: StorageDirectory = Depends(get_storage)) -> CatalogService:
    return CatalogService(storage)
