"""Business logic services."""

from password_validator.services.context import RequestContext
from password_validator.services.engine import ValidationEngine, ValidationVerdict
from password_validator.services.errors import (
    ConfigurationError,
    IdentityErrorKind,
    IdentityResolutionError,
    RemoteRuleError,
    RuleSourceError,
    ValidationEngineError,
)
from password_validator.services.evaluators import (
    PatternRuleEvaluator,
    ProgrammaticRuleEvaluator,
    RuleOutcome,
)
from password_validator.services.identity import (
    HttpIdentityResolver,
    IdentityResolver,
    ResolvedUser,
)
from password_validator.services.registry import RuleRegistryService
from password_validator.services.rule_source import RepositoryRuleSource, RuleSource
from password_validator.services.rules import ValidationRule

__all__ = [
    "ConfigurationError",
    "HttpIdentityResolver",
    "IdentityErrorKind",
    "IdentityResolutionError",
    "IdentityResolver",
    "PatternRuleEvaluator",
    "ProgrammaticRuleEvaluator",
    "RemoteRuleError",
    "RepositoryRuleSource",
    "RequestContext",
    "ResolvedUser",
    "RuleOutcome",
    "RuleRegistryService",
    "RuleSource",
    "RuleSourceError",
    "ValidationEngine",
    "ValidationEngineError",
    "ValidationRule",
    "ValidationVerdict",
]
