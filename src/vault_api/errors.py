"""Error types and the handlers that turn them into JSON responses."""

import logging
from typing import Optional, Union

import pydantic
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class VaultError(Exception):
    """Base class for errors that map onto an HTTP response.

    :param message: Text shown to the caller as ``error``.
    :param detail: Internal detail, only exposed in development mode.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)


class MissingFile(VaultError):
    """The upload request carried no file attachment."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "No file uploaded"


class FileNotFound(VaultError):
    """Unknown stored name, or a name that would resolve outside the storage root."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "File not found"


class UnhandledRoute(VaultError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class DirectoryUnreadable(VaultError):
    """Enumerating the storage root failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Unable to scan files"


class StoredNameCollision(VaultError):
    """A stored name already exists; existing files are never overwritten."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Unable to store file"


def _include_detail(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.is_development)


async def handle_vault_errors(request: Request, exc: VaultError) -> JSONResponse:
    """Render a :class:`VaultError` as ``{"error": ...}``."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.detail or exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}")

    content = {"error": exc.message}
    if exc.detail and _include_detail(request):
        content["message"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=content)


async def handle_pydantic_validation_errors(
    request: Request, exc: Union[pydantic.ValidationError, RequestValidationError]
) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Invalid request",
            "detail": [
                {
                    "loc": [str(part) for part in error["loc"]],
                    "msg": error["msg"],
                }
                for error in errors
            ],
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        content = {"error": "Internal server error"}
        if _include_detail(request):
            content["message"] = str(err)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
        )
