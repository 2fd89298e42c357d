"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from password_validator.api.exceptions import register_exception_handlers
from password_validator.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from password_validator.api.routers import health, password, rules
from password_validator.config import get_settings, validate_config
from password_validator.database import close_db, init_db
from password_validator.http_client import close_http_client, init_http_client
from password_validator.logging_config import configure_logging, get_logger
from password_validator.metrics import configure_prometheus_metrics

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    configure_logging()
    logger.info("Starting Password Validator", environment=settings.environment)

    validate_config(settings, strict=settings.is_production)
    logger.info("Configuration validated")

    await init_db()
    logger.info("Database initialized")
    await init_http_client()

    yield

    logger.info("Shutting down Password Validator")
    await close_http_client()
    logger.info("HTTP client closed")
    await close_db()
    logger.info("Database connections closed")


API_DESCRIPTION = """
# Password Validator API

Validates candidate passwords against a tenant's ordered rule set.

- **RegExp rules** are checked locally; the whole password must match.
- **Programmatic rules** are delegated to a remote policy endpoint. When the
  endpoint is unavailable a *Strong* rule fails the validation request and a
  *Soft* rule is skipped.

The tenant is taken from the `X-Okapi-Tenant` header. `X-Okapi-Url` and
`X-Okapi-Token` are forwarded to the users service and to remote rules.
"""

OPENAPI_TAGS = [
    {
        "name": "health",
        "description": "Health check endpoints for monitoring",
    },
    {
        "name": "password",
        "description": "Password validation",
    },
    {
        "name": "rules",
        "description": "Tenant rule registry - list, create, update and install defaults",
    },
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=API_DESCRIPTION,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    # Configure middleware (order matters - first added = last executed)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    configure_prometheus_metrics(app)

    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    app.include_router(password.router, prefix=settings.api_prefix, tags=["password"])
    app.include_router(rules.router, prefix=settings.api_prefix, tags=["rules"])

    register_exception_handlers(app)

    return app


# Create the app instance
app = create_app()
