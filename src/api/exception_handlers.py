"""
Exception handlers for converting domain exceptions to HTTP responses.

This module maps domain and backend-client exceptions to appropriate HTTP
status codes and response formats for the API layer.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.utils.logger import logger


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup exception handlers using decorators.

    Args:
        app: FastAPI application instance
    """
    # Import inside function to avoid circular imports
    from src.client import ErpAPIError, ErpAuthError, ErpNotFoundError
    from src.exceptions.domain import ConfigError, EntityNotFoundError, ValidationError

    @app.exception_handler(EntityNotFoundError)
    async def handle_entity_not_found(_: Request, exc: EntityNotFoundError) -> JSONResponse:
        """Convert EntityNotFoundError to 404 response."""
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc) if str(exc) else "Resource not found"},
        )

    @app.exception_handler(ErpNotFoundError)
    async def handle_backend_not_found(_: Request, exc: ErpNotFoundError) -> JSONResponse:
        """Convert a backend 404 to a 404 response."""
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": exc.message or "Resource not found"},
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        """Convert ValidationError to 422 response."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": str(exc) if str(exc) else "Validation failed",
                "errors": exc.errors,
            },
        )

    @app.exception_handler(ErpAuthError)
    async def handle_backend_auth(_: Request, exc: ErpAuthError) -> JSONResponse:
        """Convert a backend 401/403 to 502; the caller's own credentials are not at fault."""
        logger.error(f"ERP backend rejected credentials: {exc.status_code}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "ERP backend rejected credentials"},
        )

    @app.exception_handler(ErpAPIError)
    async def handle_backend_error(_: Request, exc: ErpAPIError) -> JSONResponse:
        """Convert any other backend failure to 502 response."""
        logger.error(f"ERP backend error: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": exc.message or "ERP backend error"},
        )

    @app.exception_handler(ConfigError)
    async def handle_config_error(_: Request, exc: ConfigError) -> JSONResponse:
        """Convert ConfigError to 500 response."""
        logger.error(f"Configuration error: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Server configuration error"},
        )
