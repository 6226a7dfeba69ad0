import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from neo4j.exceptions import (
    DriverError,
    Neo4jError,
    ServiceUnavailable,
    SessionExpired,
)
from pydantic import ValidationError

from neoflix.db.connection import (
    DRIVER_STATE_ATTRIBUTE,
    close_driver,
    create_driver,
    get_database_uri,
    sanitize_database_uri,
)
from neoflix.exceptions import NotFoundError
from neoflix.settings import AppSettings, get_settings

from .api import favorites
from .schemas.error import ErrorType, ValidationErrorDetail
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
    to_json_response,
)
from .utils.request_context import (
    REQUEST_ID_HEADER,
    assign_request_id,
    attach_request_id,
    get_request_id,
)
from .warmup import warmup_database

settings = get_settings()

logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _validate_environment(active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration that was left unset."""
    warnings = (active_settings or get_settings()).optional_config_warnings()

    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning(f"  • {warning}")
        logger.warning("=" * 60)


def validate_environment() -> None:
    """Public wrapper so CLI tools can run the same configuration checks."""

    _validate_environment()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the Neo4j driver for the lifetime of the application."""
    validate_environment()

    active_settings = get_settings()
    uri = get_database_uri(active_settings)

    logger.info("=" * 60)
    logger.info("Neoflix API - Database Preflight Check")
    logger.info("=" * 60)
    logger.info(f"Neo4j URI: {sanitize_database_uri(uri)}")
    logger.info(f"Neo4j database: {active_settings.neo4j_database or '(server default)'}")
    logger.info("=" * 60)

    driver = create_driver(active_settings)
    setattr(app.state, DRIVER_STATE_ATTRIBUTE, driver)
    await warmup_database(driver)

    try:
        yield
    finally:
        logger.info("Shutting down Neoflix API")
        setattr(app.state, DRIVER_STATE_ATTRIBUTE, None)
        await close_driver(driver)


app = FastAPI(
    title="Neoflix API",
    version="0.1.0",
    description="REST API managing users' favorite movies stored in Neo4j.",
    lifespan=lifespan,
    redirect_slashes=False,
)


def _default_origins() -> list[str]:
    ports = list(range(3000, 3011)) + [5173]
    origins = []
    for host in ("localhost", "127.0.0.1"):
        origins.extend([f"http://{host}:{port}" for port in ports])
    return origins


def _combine_origins(*origin_groups: list[str]) -> list[str]:
    """Merge origins preserving order and removing duplicates."""
    seen: set[str] = set()
    combined: list[str] = []
    for group in origin_groups:
        for origin in group:
            normalized = origin.rstrip("/")
            if normalized and normalized not in seen:
                seen.add(normalized)
                combined.append(normalized)
    return combined


allow_origins = _combine_origins(_default_origins(), settings.cors_allow_origins)
logger.debug("Configured CORS allow_origins: %s", ", ".join(allow_origins))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Tag each request with an ID echoed in ``X-Request-ID``."""
    request_id = assign_request_id(request.headers.get(REQUEST_ID_HEADER))
    response = await call_next(request)
    return attach_request_id(response, request_id)


def _validation_details(raw_errors) -> list[ValidationErrorDetail]:
    return [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in raw_errors
    ]


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    """Translate empty write results into 404 responses."""
    logger.info(
        "Not found for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        exc.message,
    )

    error_response = build_error_response(
        error_type=ErrorType.NOT_FOUND,
        message=exc.message,
        detail="No matching User, Movie or favorite relationship was found.",
        status_code=status.HTTP_404_NOT_FOUND,
        path=str(request.url.path),
    )
    return to_json_response(error_response)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    errors = _validation_details(exc.errors())

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Request validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )
    return to_json_response(error_response)


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors raised while building responses."""
    errors = _validation_details(exc.errors())

    logger.warning(
        "Pydantic validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Data validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )
    return to_json_response(error_response)


@app.exception_handler(ServiceUnavailable)
@app.exception_handler(SessionExpired)
async def database_unavailable_exception_handler(request: Request, exc: Exception):
    """Handle an unreachable or restarting Neo4j server."""
    logger.error(
        "Neo4j unavailable for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )

    error_response = build_error_response(
        error_type=ErrorType.DATABASE_ERROR,
        message="Database connection failed",
        detail="Unable to reach the graph database. Please try again later.",
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        path=str(request.url.path),
        retry_after=5,
    )
    return to_json_response(error_response)


@app.exception_handler(Neo4jError)
@app.exception_handler(DriverError)
async def database_generic_exception_handler(request: Request, exc: Exception):
    """Handle Cypher, constraint and other driver errors."""
    logger.error(
        "Neo4j error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )

    error_response = build_error_response(
        error_type=ErrorType.DATABASE_ERROR,
        message="Database operation failed",
        detail="An error occurred while accessing the database.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
    )
    return to_json_response(error_response)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other unhandled exceptions."""
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )

    error_response = build_error_response(
        error_type=ErrorType.INTERNAL_ERROR,
        message="Internal server error",
        detail=f"An unexpected error occurred: {type(exc).__name__}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        path=str(request.url.path),
        retry_after=5,
    )
    return attach_request_id(to_json_response(error_response))


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple health endpoint for readiness checks."""
    return {"status": "ok"}


app.include_router(favorites.router, prefix="/account/favorites", tags=["favorites"])
