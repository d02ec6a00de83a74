"""
Healthcheck endpoint.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_config
from api.schemas.common import HealthResponse
from greenlight import __version__
from greenlight.config import Config

router = APIRouter()


@router.get("/healthcheck", response_model=HealthResponse)
async def healthcheck(config: Config = Depends(get_config)):
    """Report availability, environment and version."""
    return {
        "status": "available",
        "environment": config.env,
        "version": __version__,
    }
