"""ORM models for the password validator."""

from password_validator.models.base import PVBase, TenantMixin, TimestampMixin
from password_validator.models.rule import Rule, RuleState, RuleType, ValidationType

__all__ = [
    "PVBase",
    "TenantMixin",
    "TimestampMixin",
    "Rule",
    "RuleState",
    "RuleType",
    "ValidationType",
]
