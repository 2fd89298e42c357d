"""Password validation engine.

One validate call:

1. fetches the tenant's enabled rules and resolves the user concurrently,
2. sorts the rules by order number and substitutes the user name,
3. starts every Programmatic rule as its own task and checks RegExp
   rules inline while those run,
4. waits for all outcomes and reports the failed rules' error codes in
   rule order, whatever order the remote checks completed in.

Any error aborts the call; the remaining remote checks are cancelled.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Optional

from password_validator.logging_config import get_logger
from password_validator.metrics import MetricsRegistry, get_metrics
from password_validator.services.context import RequestContext
from password_validator.services.errors import ConfigurationError, ValidationEngineError
from password_validator.services.evaluators import (
    INVALID_RESULT,
    VALID_RESULT,
    PatternRuleEvaluator,
    ProgrammaticRuleEvaluator,
    RuleOutcome,
)
from password_validator.services.identity import IdentityResolver
from password_validator.services.rule_source import RuleSource
from password_validator.services.rules import RuleState, ValidationRule, prepare_rules

logger = get_logger(__name__)


@dataclass
class ValidationVerdict:
    """Pass/fail result with the error codes of the failed rules, in rule order."""

    messages: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.messages

    @property
    def result(self) -> str:
        return VALID_RESULT if self.is_valid else INVALID_RESULT

    def to_dict(self) -> dict[str, Any]:
        return {"result": self.result, "messages": list(self.messages)}


async def _cancel_all(tasks: list[asyncio.Future]) -> None:
    for task in tasks:
        if not task.done():
            task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently; on the first failure cancel the rest and re-raise."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        await _cancel_all(tasks)
        raise


class ValidationEngine:
    """Validates passwords against a tenant's rule set."""

    def __init__(
        self,
        rule_source: RuleSource,
        identity_resolver: IdentityResolver,
        programmatic_evaluator: ProgrammaticRuleEvaluator,
        pattern_evaluator: Optional[PatternRuleEvaluator] = None,
        metrics: Optional[MetricsRegistry] = None,
    ):
        self.rule_source = rule_source
        self.identity_resolver = identity_resolver
        self.programmatic_evaluator = programmatic_evaluator
        self.pattern_evaluator = pattern_evaluator or PatternRuleEvaluator()
        self.metrics = metrics or get_metrics()

    async def validate(
        self,
        user_id: str,
        password: str,
        context: RequestContext,
    ) -> ValidationVerdict:
        """Validate a password for a user of the context's tenant.

        Raises:
            RuleSourceError: If the rules could not be fetched
            IdentityResolutionError: If the user is not exactly one known user
            RemoteRuleError: If a Strong programmatic rule could not be checked
            ConfigurationError: If a rule is malformed
        """
        try:
            with self.metrics.time_histogram("validation_duration"):
                verdict = await self._validate(user_id, password, context)
        except ValidationEngineError as e:
            self.metrics.inc_counter("validation_errors", error=e.error_code)
            logger.error(
                "Password validation failed",
                tenant_id=context.tenant_id,
                user_id=user_id,
                error_code=e.error_code,
                error=e.message,
            )
            raise

        self.metrics.inc_counter("validations", result=verdict.result)
        logger.info(
            "Password validated",
            tenant_id=context.tenant_id,
            user_id=user_id,
            result=verdict.result,
            failed_rules=len(verdict.messages),
        )
        return verdict

    async def _validate(
        self,
        user_id: str,
        password: str,
        context: RequestContext,
    ) -> ValidationVerdict:
        rules, user = await gather_or_cancel(
            self.rule_source.fetch_rules(context.tenant_id),
            self.identity_resolver.resolve_user(user_id, context),
        )
        enabled = [rule for rule in rules if rule.state == RuleState.ENABLED]
        prepared = prepare_rules(enabled, user.username)
        logger.debug("Rules prepared", tenant_id=context.tenant_id, rules=len(prepared))

        outcomes = await self._evaluate(prepared, user_id, password, context)
        return ValidationVerdict(
            messages=[outcome.error_code for outcome in outcomes if outcome.failed],
        )

    async def _evaluate(
        self,
        rules: list[ValidationRule],
        user_id: str,
        password: str,
        context: RequestContext,
    ) -> list[RuleOutcome]:
        """Evaluate every rule and return the outcomes by rule position."""
        for rule in rules:
            if not (rule.is_reg_exp or rule.is_programmatic):
                raise ConfigurationError(
                    f"Unknown rule type {rule.rule_type!r} of rule {rule.name}",
                    rule_id=rule.rule_id,
                )

        outcomes: list[Optional[RuleOutcome]] = [None] * len(rules)
        remote_positions = [i for i, rule in enumerate(rules) if rule.is_programmatic]
        remote_tasks = [
            asyncio.ensure_future(
                self.programmatic_evaluator.evaluate(rules[i], password, user_id, context)
            )
            for i in remote_positions
        ]

        try:
            for position, rule in enumerate(rules):
                if rule.is_reg_exp:
                    outcomes[position] = self.pattern_evaluator.evaluate(rule, password)
            remote_outcomes = await asyncio.gather(*remote_tasks)
        except BaseException:
            await _cancel_all(remote_tasks)
            raise

        for position, outcome in zip(remote_positions, remote_outcomes):
            outcomes[position] = outcome
        return [outcome for outcome in outcomes if outcome is not None]
