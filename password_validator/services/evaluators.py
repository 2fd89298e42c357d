"""Single-rule evaluators.

A RegExp rule is checked locally by whole-string match. A Programmatic rule
is delegated to a remote policy endpoint; when that endpoint cannot give an
answer the rule's validation type decides what happens:

- Strong: the whole validate call fails with RemoteRuleError.
- Soft: the rule is skipped and counts as passed.
- anything else: ConfigurationError.
"""

import re
from dataclasses import dataclass
from typing import Optional

import httpx

from password_validator.logging_config import get_logger
from password_validator.metrics import MetricsRegistry, get_metrics
from password_validator.services.context import RequestContext
from password_validator.services.errors import ConfigurationError, RemoteRuleError
from password_validator.services.rules import ValidationRule, ValidationType

logger = get_logger(__name__)

# Wire keys shared with remote policy endpoints
REQUEST_PASSWORD_KEY = "password"
REQUEST_USER_ID_KEY = "userId"
RESPONSE_RESULT_KEY = "result"
VALID_RESULT = "valid"
INVALID_RESULT = "invalid"


@dataclass(frozen=True)
class RuleOutcome:
    """Result of evaluating one rule."""

    failed: bool
    error_code: Optional[str] = None

    @classmethod
    def passed(cls) -> "RuleOutcome":
        return cls(failed=False)

    @classmethod
    def violated(cls, error_code: str) -> "RuleOutcome":
        return cls(failed=True, error_code=error_code)


class PatternRuleEvaluator:
    """Checks a password against a RegExp rule."""

    def evaluate(self, rule: ValidationRule, password: str) -> RuleOutcome:
        if not rule.expression:
            raise ConfigurationError(
                f"RegExp rule {rule.name} has no expression", rule_id=rule.rule_id
            )
        try:
            matched = re.fullmatch(rule.expression, password) is not None
        except re.error as e:
            raise ConfigurationError(
                f"RegExp rule {rule.name} has an invalid expression: {e}",
                rule_id=rule.rule_id,
            ) from e
        return RuleOutcome.passed() if matched else RuleOutcome.violated(rule.err_message_id)


class ProgrammaticRuleEvaluator:
    """Delegates a Programmatic rule to its remote policy endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout: float = 1.0,
        metrics: Optional[MetricsRegistry] = None,
    ):
        self.client = client
        self.timeout = httpx.Timeout(timeout)
        self.metrics = metrics or get_metrics()

    async def evaluate(
        self,
        rule: ValidationRule,
        password: str,
        user_id: str,
        context: RequestContext,
    ) -> RuleOutcome:
        if not rule.implementation_reference:
            raise ConfigurationError(
                f"Programmatic rule {rule.name} has no implementation reference",
                rule_id=rule.rule_id,
            )

        url = context.url_for(rule.implementation_reference)
        try:
            response = await self.client.post(
                url,
                json={REQUEST_PASSWORD_KEY: password, REQUEST_USER_ID_KEY: user_id},
                headers=context.forward_headers(),
                timeout=self.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._on_unavailable(rule, url, reason=str(e) or type(e).__name__)

        if response.status_code != httpx.codes.OK:
            return self._on_unavailable(rule, url, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError:
            return self._on_unavailable(rule, url, reason="response body is not JSON")

        result = body.get(RESPONSE_RESULT_KEY) if isinstance(body, dict) else None
        if result == INVALID_RESULT:
            self.metrics.inc_counter("remote_rule_calls", outcome="rejected")
            return RuleOutcome.violated(rule.err_message_id)
        if result == VALID_RESULT:
            self.metrics.inc_counter("remote_rule_calls", outcome="accepted")
            return RuleOutcome.passed()
        return self._on_unavailable(rule, url, reason=f"unexpected result {result!r}")

    def _on_unavailable(
        self,
        rule: ValidationRule,
        url: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> RuleOutcome:
        """Apply the rule's validation type to a check that gave no answer."""
        logger.error(
            "Remote rule module is not available",
            rule=rule.name,
            url=url,
            status_code=status_code,
            reason=reason,
            validation_type=rule.validation_type,
        )
        if rule.validation_type == ValidationType.STRONG:
            self.metrics.inc_counter("remote_rule_calls", outcome="failed")
            raise RemoteRuleError(rule.name, status_code=status_code, reason=reason)
        if rule.validation_type == ValidationType.SOFT:
            self.metrics.inc_counter("remote_rule_calls", outcome="skipped")
            return RuleOutcome.passed()
        raise ConfigurationError(
            f"No action defined for validation type {rule.validation_type!r} "
            f"of rule {rule.name} when its module is not available",
            rule_id=rule.rule_id,
        )
