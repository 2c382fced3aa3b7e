"""
Central error handling for the Org Chart audit backend

Every error response shares one envelope:
{"error": true, "status_code": ..., "detail": ..., "path": ...}
Audit errors add their taxonomy "code" so the UI can react to it.
"""
import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException

from orgchart.core.config import settings
from orgchart.core.exceptions import AuditError, AuditErrorCode

logger = logging.getLogger(__name__)

AUDIT_ERROR_STATUS = {
    AuditErrorCode.FEATURE_DISABLED: status.HTTP_403_FORBIDDEN,
    AuditErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    AuditErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuditErrorCode.UNSUPPORTED_ACTION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuditErrorCode.UNSUPPORTED_TARGET_TYPE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuditErrorCode.MISSING_SNAPSHOT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuditErrorCode.STORAGE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
    AuditErrorCode.NETWORK_FAILURE: status.HTTP_502_BAD_GATEWAY,
}


def status_for_audit_error(code: AuditErrorCode) -> int:
    return AUDIT_ERROR_STATUS.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _error_response(
    request: Request,
    status_code: int,
    detail: Any,
    headers: Optional[Dict[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    content = {"error": True, "status_code": status_code, "detail": detail}
    content.update(extra)
    content["path"] = str(request.url.path)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _json_safe_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception instances (e.g. ValueError), which are not JSON serializable
    errors = []
    for e in exc.errors():
        err = dict(e)
        if isinstance(err.get("ctx"), dict):
            err["ctx"] = {
                k: (v if isinstance(v, (str, int, float, bool, type(None))) else str(v))
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    return errors


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTPException raised by endpoints and guards (400/401/404 on org chart entities)"""
    return _error_response(request, exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


async def audit_exception_handler(request: Request, exc: AuditError) -> JSONResponse:
    """
    Map an AuditError to its HTTP status

    Storage and network failures are logged; the rest are ordinary rejections.
    """
    status_code = status_for_audit_error(exc.code)
    if status_code >= 500:
        logger.error("Audit operation failed on %s: %s", request.url.path, exc.message)
    return _error_response(request, status_code, exc.message, code=exc.code.value)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Does not leak internal validation details in production."""
    if settings.APP_ENV == "prod":
        return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error: Invalid request data")
    return _error_response(
        request, status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", errors=_json_safe_errors(exc)
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Does not leak internal error details in production."""
    logger.error("Unhandled exception: %s", exc, exc_info=True)

    if settings.APP_ENV == "prod":
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc),
        traceback=traceback.format_exc() if settings.APP_ENV == "local" else None,
    )
