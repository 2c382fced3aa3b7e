"""
Version and metadata endpoint
"""
from fastapi import APIRouter
from orgchart.core.config import settings

router = APIRouter()


@router.get("/version")
async def get_version():
    """
    Get application version and metadata

    Returns:
        Version information including service name, version, environment
        and whether audit logging and rollback are switched on
    """
    return {
        "service": "orgchart-audit-backend",
        "version": settings.VERSION or "1.0.0",
        "env": settings.APP_ENV,
        "audit_log_enabled": settings.ENABLE_AUDIT_LOG,
        "rollback_enabled": settings.ENABLE_ROLLBACK,
    }
