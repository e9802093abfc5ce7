# =====================================================
# tempcontrol/main.py - Temperature Control API
# =====================================================
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
import uvicorn

from tempcontrol import config
from tempcontrol.api.alerts import alerts_router
from tempcontrol.api.forms import forms_router
from tempcontrol.api.products import products_router
from tempcontrol.api.reports import reports_router
from tempcontrol.auth.routes import auth_router
from tempcontrol.database.connection import check_database_connection
from tempcontrol.database.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConcurrencyError,
    DatabaseError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidStateError,
    ValidationError,
)
from tempcontrol.logging_config import configure_logging
from tempcontrol.models.base import utcnow
from tempcontrol.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

# =====================================================
# ERROR HANDLING
# =====================================================

# Ordine rilevante: la prima classe che combina vince
ERROR_STATUS_CODES = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateEntityError, status.HTTP_400_BAD_REQUEST),
    (InvalidStateError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConcurrencyError, status.HTTP_409_CONFLICT),
)


def _error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    body = ApiResponse.fail(message, errors)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


async def domain_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            errors = exc.errors if isinstance(exc, ValidationError) else None
            if status_code >= status.HTTP_401_UNAUTHORIZED:
                logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
            return _error_response(status_code, str(exc), errors)

    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")

# =====================================================
# APP FACTORY
# =====================================================


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Temperature Control API",
        description="Backend API for HACCP temperature control forms",
        version=config.VERSION,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DatabaseError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth_router)
    app.include_router(products_router)
    app.include_router(forms_router)
    app.include_router(alerts_router)
    app.include_router(reports_router)

    # Health check endpoint (necessario per Docker health check)
    @app.get("/health")
    def health_check():
        database_ok = check_database_connection()
        return JSONResponse(
            status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "healthy" if database_ok else "unhealthy",
                "database": "connected" if database_ok else "unavailable",
                "version": config.VERSION,
                "environment": config.ENVIRONMENT,
                "timestamp": utcnow().isoformat() + "Z",
            },
        )

    @app.get("/api/v1/status")
    def api_status():
        return {
            "api": "temperature-control",
            "status": "operational",
            "version": config.VERSION,
            "environment": config.ENVIRONMENT,
            "timestamp": utcnow().isoformat() + "Z",
            "features": [
                "temperature-forms",
                "product-ranges",
                "alert-system",
                "reports",
                "pdf-export",
            ],
        }

    logger.info("Temperature Control API %s started (%s)", config.VERSION, config.ENVIRONMENT)
    return app


app = create_app()

# Entry point per development locale
if __name__ == "__main__":
    uvicorn.run(
        "tempcontrol.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=config.ENVIRONMENT == "development",
    )
