"""FastAPI main application module."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from ... import __version__
from ...application.services.assessment_service import SessionNotFoundError
from ...domain.exceptions import (
    GeocodingError,
    InvalidTransitionError,
    LocationUnavailableError,
    PreconditionNotMet,
    SignaturesRequiredError
)
from ...infrastructure.logging import setup_logging_from_env
from ...infrastructure.services import initialize_services, shutdown_services
from .config import get_settings
from .middleware import RequestResponseLoggingMiddleware
from .routes import assessments, health, locations


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    logger.info("Starting FSE Compliance API")
    await initialize_services()

    yield

    # Shutdown
    logger.info("Shutting down FSE Compliance API")
    await shutdown_services()


def add_exception_handlers(app: FastAPI) -> None:
    """Add custom exception handlers to the FastAPI application."""

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
        """Handle unknown sessions."""
        logger.warning(f"Session not found on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=404,
            content={
                "detail": str(exc),
                "type": "not_found"
            }
        )

    @app.exception_handler(PreconditionNotMet)
    async def precondition_handler(request: Request, exc: PreconditionNotMet):
        """Handle workflow preconditions, shown to the user as-is."""
        logger.warning(f"Precondition not met on {request.url}: {exc.message}")
        if isinstance(exc, SignaturesRequiredError):
            error_type = "signatures_required"
        elif isinstance(exc, InvalidTransitionError):
            error_type = "invalid_transition"
        else:
            error_type = "precondition_failed"
        return JSONResponse(
            status_code=409,
            content={
                "detail": exc.message,
                "type": error_type
            }
        )

    @app.exception_handler(GeocodingError)
    async def geocoding_error_handler(request: Request, exc: GeocodingError):
        """Handle failed address searches."""
        logger.warning(f"Geocoding error on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=502,
            content={
                "detail": "Location not found. Please try a different search term.",
                "type": "geocoding_error"
            }
        )

    @app.exception_handler(LocationUnavailableError)
    async def location_unavailable_handler(request: Request, exc: LocationUnavailableError):
        """Handle missing device location."""
        logger.warning(f"Location unavailable on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=503,
            content={
                "detail": "Unable to access the current location.",
                "type": "location_unavailable"
            }
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """Handle validation errors from business logic."""
        logger.warning(f"Validation error on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=400,
            content={
                "detail": str(exc),
                "type": "validation_error"
            }
        )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="FSE Compliance Assessment",
        description="API for on-site food service establishment safety and compliance audits",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    add_exception_handlers(app)

    app.add_middleware(RequestResponseLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.allowed_methods,
        allow_headers=settings.allowed_headers,
    )

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(
        assessments.router,
        prefix=f"{settings.api_prefix}/assessments",
        tags=["assessments"]
    )
    app.include_router(
        locations.router,
        prefix=f"{settings.api_prefix}/assessments",
        tags=["locations"]
    )

    return app


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    setup_logging_from_env()
    uvicorn.run(create_app(), host="0.0.0.0", port=8000, log_config=None)


# Create app instance
app = create_app()
