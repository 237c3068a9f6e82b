from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import (
    MaintenanceDenied,
    MaintenancePermissionError,
    MaintenanceValidationError,
    StoreUnavailable,
)


async def maintenance_denied_handler(request: Request, exc: MaintenanceDenied):
    """Blocked operation => 503 carrying the message shown to the user"""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": exc.detail,
            "status": "maintenance",
            "until": exc.until.isoformat() if exc.until else None,
            "retry_after": settings.MAINTENANCE_RETRY_AFTER
        },
        headers={"Retry-After": str(settings.MAINTENANCE_RETRY_AFTER)}
    )


async def maintenance_permission_handler(request: Request, exc: MaintenancePermissionError):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": "The user doesn't have enough privileges"}
    )


async def maintenance_validation_handler(request: Request, exc: MaintenanceValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc)}
    )


async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    """Reads fall back to defaults; only a failed write reaches here"""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable. Please try again later."}
    )


def register_maintenance_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MaintenanceDenied, maintenance_denied_handler)
    app.add_exception_handler(MaintenancePermissionError, maintenance_permission_handler)
    app.add_exception_handler(MaintenanceValidationError, maintenance_validation_handler)
    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)
