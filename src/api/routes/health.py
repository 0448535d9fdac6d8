"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from adapter.mongodb.connection import get_mongodb_client
from api.dependencies import get_config
from utils.config import AppConfig

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(config: AppConfig = Depends(get_config)):
    """Health check endpoint with MongoDB status."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {},
    }

    if get_mongodb_client(config.mongo_uri):
        health_status["services"]["mongodb"] = {
            "status": "healthy",
            "message": "Connection successful",
        }
        status_code = status.HTTP_200_OK
    else:
        health_status["services"]["mongodb"] = {
            "status": "unhealthy",
            "message": "Connection failed",
        }
        health_status["status"] = "degraded"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(content=health_status, status_code=status_code)
