"""Password validation endpoint."""

from fastapi import APIRouter

from password_validator.api.dependencies import Engine, TenantContext
from password_validator.api.schemas.password import (
    PasswordValidateRequest,
    ValidationResultResponse,
)

router = APIRouter(prefix="/password")


@router.post("/validate", response_model=ValidationResultResponse)
async def validate_password(
    body: PasswordValidateRequest,
    context: TenantContext,
    engine: Engine,
) -> ValidationResultResponse:
    """Validate a password against the tenant's enabled rules.

    Any failure to complete the validation is answered with a generic 500;
    the cause is only logged.
    """
    verdict = await engine.validate(body.user_id, body.password, context)
    return ValidationResultResponse(result=verdict.result, messages=verdict.messages)
