"""
Health check endpoints.

/health is the liveness probe. /health/detailed also reports on the
database and the upload storage backend and answers 503 when either fails.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.storage import storage

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_database(db: Session) -> Dict[str, str]:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "message": "Database unreachable"}
    return {"status": "healthy", "message": "Database connection successful"}


def _check_storage() -> Dict[str, str]:
    backend = "s3" if settings.USE_S3 else "local"
    if not storage.is_available():
        logger.error(f"Storage health check failed for {backend} backend")
        return {"status": "unhealthy", "message": f"{backend} storage unavailable"}
    return {"status": "healthy", "message": f"{backend} storage accessible"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, Any]:
    """Liveness probe for load balancers and uptime monitors."""
    return {
        "success": True,
        "message": "API is running",
        "timestamp": _timestamp(),
    }


@router.get("/health/detailed")
def detailed_health_check(response: Response, db: Session = Depends(get_db)) -> Dict[str, Any]:
    checks = {
        "database": _check_database(db),
        "storage": _check_storage(),
    }
    healthy = all(check["status"] == "healthy" for check in checks.values())
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "success": healthy,
        "status": "healthy" if healthy else "unhealthy",
        "environment": settings.ENVIRONMENT,
        "timestamp": _timestamp(),
        "checks": checks,
    }
