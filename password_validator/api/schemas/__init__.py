"""API request and response schemas."""

from password_validator.api.schemas.password import PasswordValidateRequest, ValidationResultResponse
from password_validator.api.schemas.rule import (
    DefaultRulesResponse,
    RuleCreate,
    RuleDetail,
    RuleListResponse,
    RuleUpdate,
)

__all__ = [
    "DefaultRulesResponse",
    "PasswordValidateRequest",
    "RuleCreate",
    "RuleDetail",
    "RuleListResponse",
    "RuleUpdate",
    "ValidationResultResponse",
]
