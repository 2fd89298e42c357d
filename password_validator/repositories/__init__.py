"""Data access repositories."""

from password_validator.repositories.base import TenantRepository
from password_validator.repositories.rule import RuleRepository

__all__ = ["RuleRepository", "TenantRepository"]
