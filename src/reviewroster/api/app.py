"""FastAPI app factory"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.config.logging import configure_logging
from ..core.config.settings import get_config
from ..core.errors import HTTP_STATUS_CODES, ErrorCode, ReviewRosterError
from ..core.routing.selector import init_selector
from ..core.schemas.errors import ErrorResponse
from ..core.storage.database import init_db

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in sorted(set(HTTP_STATUS_CODES.values()))
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    config = get_config()
    configure_logging(config)
    db = init_db(config.get_database_url(), echo=config.db_echo)
    await db.create_tables()
    init_selector(config.random_seed)

    # Store in app state for access in routes
    app.state.db = db
    app.state.config = config

    logger.info("ReviewRoster API started")

    yield

    # Shutdown
    await db.close()
    logger.info("ReviewRoster API stopped")


async def handle_service_error(request: Request, exc: ReviewRosterError) -> JSONResponse:
    """Render a classified service error as the JSON error envelope."""
    if exc.code == ErrorCode.INTERNAL_ERROR:
        logger.error(
            "Internal error on %s %s (transient=%s)",
            request.method,
            request.url.path,
            exc.transient,
        )
    headers = {"Retry-After": "1"} if exc.transient else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report missing or malformed request fields as INVALID_INPUT."""
    fields = sorted({".".join(str(part) for part in err["loc"][1:]) for err in exc.errors()})
    error = ReviewRosterError(
        ErrorCode.INVALID_INPUT,
        f"invalid field(s): {', '.join(fields)}" if fields else None,
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app() -> FastAPI:
    """Create FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="ReviewRoster API",
        description="Pull request tracking with team-based reviewer assignment",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(ReviewRosterError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    # Register routes
    from .routes import pull_requests, teams, users, stats

    app.include_router(pull_requests.router, tags=["pull requests"], responses=ERROR_RESPONSES)
    app.include_router(teams.router, tags=["teams"], responses=ERROR_RESPONSES)
    app.include_router(users.router, tags=["users"], responses=ERROR_RESPONSES)
    app.include_router(stats.router, tags=["stats"], responses=ERROR_RESPONSES)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "service": "reviewroster"}

    return app


app = create_app()
