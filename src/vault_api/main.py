from contextlib import asynccontextmanager
from textwrap import dedent
import logging
import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware

from vault_api.adapters.storage import StorageDirectory
from vault_api.errors import (
    VaultError,
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
    handle_vault_errors,
)
from vault_api.logging_config import setup_logging
from vault_api.routers.files import router as files_router
from vault_api.routers.uploads import router as uploads_router
from vault_api.routers.health import router as health_router
from vault_api.routers.frontend import router as frontend_router
from vault_api.config.settings import Settings

# Set up logging
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the storage directory before serving and close it on shutdown."""
    storage: StorageDirectory = app.state.storage
    storage.open()
    try:
        yield
    finally:
        storage.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Vault API",
        summary="Store files and fetch them back",
        version="v1",
        description=dedent(
            """\
        Upload one file per request, list everything stored, and download
        any stored file from `/uploads/{name}`.

        | Endpoint | Notes |
        | --- | --- |
        | `POST /api/upload` | multipart field `file` |
        | `GET /api/files` | computed from the storage directory on every call |
        | `GET /uploads/{name}` | raw bytes |
        """
        ),
        docs_url="/docs",  # "/" belongs to the bundled client app
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.storage = StorageDirectory(settings.storage_dir)
    logger.info(f"Using storage directory {app.state.storage.root} ({settings.environment})")

    app.include_router(health_router, tags=["health"])
    app.include_router(files_router, prefix="/api", tags=["files"])
    app.include_router(uploads_router, tags=["uploads"])
    # must stay last
    app.include_router(frontend_router, tags=["frontend"])

    app.add_exception_handler(
        exc_class_or_status_code=VaultError,
        handler=handle_vault_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
