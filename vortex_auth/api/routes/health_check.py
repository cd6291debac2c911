from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel

from vortex_auth.api.responses import ApiResponse

router = APIRouter()

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
    version: str


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[HealthResponse],
    response_model_exclude_none=True,
)
async def health_check():
    """Liveness probe"""
    now = datetime.now(timezone.utc).replace(microsecond=0)
    return ApiResponse(
        data=HealthResponse(
            status="healthy",
            message="Backend is running",
            timestamp=now.isoformat().replace("+00:00", "Z"),
            version=VERSION,
        )
    )
