import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import Settings, get_settings
from src.db.factory import make_database
from src.db.interfaces.base import BaseDatabase
from src.exceptions import DatabaseConnectionError
from src.logging_config import setup_logging
from src.routers import health, root, users
from src.schemas.api.envelope import envelope, utc_timestamp

logger = logging.getLogger(__name__)

NOT_FOUND_HINT = [
    "GET / - Welcome message",
    "GET /health - Health check",
]

PRODUCTION_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan for the API.

    The database handle is released on shutdown; uvicorn turns SIGINT and
    SIGTERM into a shutdown, so the process exits cleanly with code 0.
    """
    settings: Settings = app.state.settings
    database: BaseDatabase = app.state.database

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Port: {settings.port}")
    logger.info(f"Logging to: {settings.logging.file}")
    logger.info(f"Console logging: {'enabled' if settings.features.console_logging else 'disabled'}")
    logger.info(f"CORS: {'enabled' if settings.features.cors else 'disabled'}")
    logger.info(f"Metrics: {'enabled' if settings.features.metrics else 'disabled'}")

    try:
        database.startup()
    except DatabaseConnectionError as e:
        # The service still starts; the health check reports the outage
        logger.error(f"Database unavailable at startup: {e}")

    yield

    logger.info("Shutting down gracefully")
    database.teardown()


def _route_prefix(path: str) -> str:
    path = path.strip("/")
    return f"/{path}" if path else ""


def create_app(settings: Optional[Settings] = None, database: Optional[BaseDatabase] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or make_database(settings)

    app = FastAPI(
        title=settings.app_name,
        description="User management API backed by a relational database",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Middleware

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        logger.info(f"{request.method} {request.url.path} - IP: {client}")
        response = await call_next(request)
        if settings.is_production:
            response.headers["X-Powered-By"] = settings.app_name
            response.headers.update(PRODUCTION_HEADERS)
        return response

    # Exception handlers

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            logger.warning(f"404 - {request.method} {request.url.path}")
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Not Found",
                    "message": f"Cannot {request.method} {request.url.path}",
                    "timestamp": utc_timestamp(),
                    "availableEndpoints": NOT_FOUND_HINT,
                },
            )
        return envelope(exc.status_code, success=False, error=str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request body for {request.method} {request.url.path}")
        errors = "; ".join(error.get("msg", "") for error in exc.errors())
        return envelope(400, success=False, error=f"Invalid request body: {errors}")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unexpected error: {exc}")
        return envelope(500, success=False, error=str(exc))

    # Routers

    app.include_router(root.router)
    app.include_router(
        health.router,
        prefix=_route_prefix(settings.health_check_endpoint) or "/health",
    )
    app.include_router(
        users.router,
        prefix=_route_prefix(settings.api.prefix) + "/users",
    )

    return app


settings = get_settings()
setup_logging(settings)
app = create_app(settings)


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
