from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from vault_api.config.settings import Settings
from vault_api.dependencies import get_settings_from_app
from vault_api.errors import UnhandledRoute

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter()


def _bundled_asset(dist: Path, requested: str) -> Path:
    """A file inside the client bundle, or its index.html for client-side routes."""
    candidate = (dist / requested).resolve()
    if requested and candidate.is_relative_to(dist) and candidate.is_file():
        return candidate
    return dist / "index.html"


# Registered last: it matches anything the other routers did not
@router.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def fallback(
    request: Request,
    full_path: str,
    settings: Settings = Depends(get_settings_from_app),
):
    dist = Path(settings.client_dist_dir).resolve()
    if request.method in ("GET", "HEAD") and (dist / "index.html").is_file():
        return FileResponse(_bundled_asset(dist, full_path))
    raise UnhandledRoute()
