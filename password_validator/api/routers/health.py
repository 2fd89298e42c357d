"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from password_validator.config import get_settings
from password_validator.database import DbSession
from password_validator.logging_config import get_logger
from password_validator.models import Rule

router = APIRouter(prefix="/health")
settings = get_settings()
logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    version: str = settings.api_version
    environment: str = settings.environment


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: str
    timestamp: str
    checks: dict[str, str]


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check - is the service running."""
    return HealthResponse(status="healthy", timestamp=_now())


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(db: DbSession) -> ReadinessResponse:
    """Ready when the rule registry table can be queried.

    The identity service and remote rule modules are per-tenant and are
    not probed here.
    """
    checks: dict[str, str] = {}
    try:
        await db.execute(select(func.count()).select_from(Rule))
        checks["rule_registry"] = "ok"
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed", error=str(e))
        checks["rule_registry"] = "unavailable"

    ready = all(value == "ok" for value in checks.values())
    return ReadinessResponse(
        status="ready" if ready else "not_ready",
        timestamp=_now(),
        checks=checks,
    )


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    """Liveness check - is the process alive."""
    return {"status": "alive", "timestamp": _now()}
