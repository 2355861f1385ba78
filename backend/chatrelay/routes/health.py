"""Health check endpoint."""

from fastapi import APIRouter

from chatrelay.config import settings
from chatrelay.models import HealthResponse

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    status = "ok" if settings.upstream_configured else "degraded"
    return HealthResponse(
        status=status,
        upstream_configured=settings.upstream_configured,
    )
