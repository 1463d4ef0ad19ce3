from datetime import datetime, timezone

from fastapi import APIRouter

from vault_api.schemas import HealthResponse

router = APIRouter()

@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe for monitoring."""
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc))
