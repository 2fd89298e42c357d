"""Errors raised by the validation engine.

None of these are retried inside the engine. Any of them aborts the whole
validate call; there is no partial verdict.
"""

from enum import Enum
from typing import Optional


class ValidationEngineError(Exception):
    """Base exception for failures that abort a validate call."""

    error_code = "VALIDATION_ENGINE_ERROR"

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RuleSourceError(ValidationEngineError):
    """The tenant's rule set could not be fetched."""

    error_code = "RULE_SOURCE_ERROR"

    def __init__(self, message: str, tenant_id: Optional[str] = None):
        super().__init__(message, details={"tenant_id": tenant_id})
        self.tenant_id = tenant_id


class IdentityErrorKind(str, Enum):
    """Distinguishable identity resolution failures."""

    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    MALFORMED = "malformed"
    UNAVAILABLE = "unavailable"


class IdentityResolutionError(ValidationEngineError):
    """The user could not be resolved to exactly one record."""

    error_code = "IDENTITY_RESOLUTION_ERROR"

    def __init__(self, message: str, kind: IdentityErrorKind, user_id: Optional[str] = None):
        super().__init__(message, details={"kind": kind.value, "user_id": user_id})
        self.kind = kind
        self.user_id = user_id


class RemoteRuleError(ValidationEngineError):
    """A Strong programmatic rule could not be checked."""

    error_code = "REMOTE_RULE_ERROR"

    def __init__(self, rule_name: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        if reason is None:
            message = f"Programmatic rule {rule_name} returns status code {status_code}"
        else:
            message = f"Programmatic rule {rule_name} is not available: {reason}"
        super().__init__(
            message,
            details={"rule_name": rule_name, "status_code": status_code, "reason": reason},
        )
        self.rule_name = rule_name
        self.status_code = status_code


class ConfigurationError(ValidationEngineError):
    """A rule reached the engine in a state the registry should have rejected."""

    error_code = "RULE_CONFIGURATION_ERROR"

    def __init__(self, message: str, rule_id: Optional[str] = None):
        super().__init__(message, details={"rule_id": rule_id})
        self.rule_id = rule_id
