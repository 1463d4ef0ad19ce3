import mimetypes

from fastapi import (
    APIRouter,
    Depends,
    Path,
    status
)
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse

from vault_api.adapters.storage import StorageDirectory
from vault_api.dependencies import get_storage
from vault_api.schemas import DEFAULT_CONTENT_TYPE, ErrorResponse
from vault_api.utils.filenames import original_name_from

router = APIRouter()

@router.get(
    "/uploads/{name:path}",
    responses={
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "No stored file with that name, or the name points outside the storage directory.",
        },
        status.HTTP_200_OK: {
            "description": "The file content, byte for byte.",
            "content": {
                "application/octet-stream": {
                    "schema": {"type": "string", "format": "binary"},
                },
            },
        },
    },
)
async def get_upload(
    name: str = Path(..., description="Stored name of the file"),
    storage: StorageDirectory = Depends(get_storage),
) -> FileResponse:
    """Retrieve a stored file."""
    # raises FileNotFound for unknown names and traversal attempts
    path = await run_in_threadpool(storage.resolve, name)
    media_type = mimetypes.guess_type(path.name)[0] or DEFAULT_CONTENT_TYPE
    return FileResponse(
        path,
        media_type=media_type,
        filename=original_name_from(path.name),
        content_disposition_type="inline",
    )
