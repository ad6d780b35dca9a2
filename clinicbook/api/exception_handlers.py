"""
Exception handlers mapping service errors onto a single JSON error envelope.
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clinicbook.core.exceptions import ClinicBookError, ScheduleValidationError
from clinicbook.core.logger import logger

def _error_response(status_code: int, message: str, details: list | None = None, headers=None) -> JSONResponse:
    content = {"error": True, "message": message, "status_code": status_code}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)

async def clinicbook_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, ScheduleValidationError):
        details = [error.model_dump() for error in exc.errors]
        logger.warning(f"Validation error on {request.url.path}: {details}")
        return _error_response(exc.status_code, exc.message, details)
    if isinstance(exc, ClinicBookError):
        return _error_response(exc.status_code, exc.message)
    return await global_exception_handler(request, exc)

async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    http_exc = exc if isinstance(exc, HTTPException) else HTTPException(status_code=500, detail=str(exc))
    return _error_response(http_exc.status_code, http_exc.detail, headers=http_exc.headers)

async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Request bodies and parameters that do not match their schema."""
    if not isinstance(exc, RequestValidationError):
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    details = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.warning(f"Request validation error on {request.url.path}: {details}")
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", details)

async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=True,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClinicBookError, clinicbook_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
