import logging
from typing import Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    UploadFile,
    status
)
from fastapi.concurrency import run_in_threadpool

from vault_api.dependencies import (
    get_base_url,
    get_catalog_service,
    get_ingestion_service,
)
from vault_api.errors import MissingFile
from vault_api.schemas import (
    ErrorResponse,
    GetFilesResponse,
    UploadResponse,
)
from vault_api.services import CatalogService, IngestionService
from vault_api.utils.decorators import log_request_timing

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "No file attached to the request.",
        },
    },
)
@log_request_timing
async def upload_file(
    file: Optional[UploadFile] = File(None, description="The file to store"),
    base_url: str = Depends(get_base_url),
    ingestion: IngestionService = Depends(get_ingestion_service),
) -> UploadResponse:
    """
    Upload a single file.

    The file is stored under a new, unique name derived from its original name;
    existing files are never replaced.
    """
    if file is None or not file.filename:
        raise MissingFile()

    try:
        descriptor = await run_in_threadpool(
            ingestion.ingest,
            file.filename,
            file.file,
            base_url,
            file.content_type,
        )
    finally:
        await file.close()

    return UploadResponse(
        message="File uploaded successfully",
        file=descriptor,
        url=descriptor.url,
    )


@router.get(
    "/files",
    response_model=GetFilesResponse,
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {
            "model": ErrorResponse,
            "description": "The storage directory could not be read.",
        },
    },
)
async def list_files(
    base_url: str = Depends(get_base_url),
    catalog: CatalogService = Depends(get_catalog_service),
) -> GetFilesResponse:
    """List every stored file with the URL it can be fetched from."""
    entries = await run_in_threadpool(catalog.list_entries, base_url)
    return GetFilesResponse(files=entries)
