"""Tenant rule registry: create, update and read validation rules."""

import re
from typing import Any, Optional, Sequence
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from password_validator.logging_config import get_logger
from password_validator.models.rule import Rule, RuleType, ValidationType
from password_validator.repositories.rule import RuleRepository
from password_validator.services.default_rules import DEFAULT_RULES
from password_validator.services.rules import substitute_user_name

logger = get_logger(__name__)

ORDER_NUMBER_ERROR = "Order number cannot be negative"
VALIDATION_TYPE_ERROR = "In case of RegExp rule Validation Type can only be Strong"
IMPLEMENTATION_REFERENCE_REQUIRED_ERROR = (
    "In case of Programmatic rule Implementation reference should be provided"
)
EXPRESSION_REQUIRED_ERROR = "In case of RegExp rule Expression should be provided"
EXPRESSION_INVALID_ERROR = "Expression is not a valid regular expression"

# Fields a caller may set; rule_id and tenant_id are owned by the registry
EDITABLE_FIELDS = (
    "name",
    "type",
    "validation_type",
    "state",
    "module_name",
    "implementation_reference",
    "expression",
    "description",
    "order_no",
    "err_message_id",
)


def validate_rule(fields: dict[str, Any]) -> Optional[str]:
    """Check a rule's fields against the registry invariants.

    Returns:
        The first violated invariant's message, or None when the rule is valid
    """
    rule_type = fields.get("type")
    if fields.get("order_no", 0) < 0:
        logger.debug("Invalid orderNo parameter")
        return ORDER_NUMBER_ERROR
    if rule_type == RuleType.REG_EXP:
        if fields.get("validation_type") != ValidationType.STRONG:
            logger.debug("Invalid validationType parameter")
            return VALIDATION_TYPE_ERROR
        expression = fields.get("expression")
        if not expression:
            return EXPRESSION_REQUIRED_ERROR
        try:
            # Compile as evaluated, with the placeholder resolved
            re.compile(substitute_user_name(expression, "user"))
        except re.error:
            logger.debug("Expression does not compile")
            return EXPRESSION_INVALID_ERROR
    elif rule_type == RuleType.PROGRAMMATIC and not fields.get("implementation_reference"):
        logger.debug("Implementation reference is not specified for type Programmatic")
        return IMPLEMENTATION_REFERENCE_REQUIRED_ERROR
    return None


class RuleRegistryService:
    """CRUD over a tenant's validation rules."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = RuleRepository(session)

    async def list_rules(
        self,
        tenant_id: str,
        state: Optional[str] = None,
        rule_type: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[Rule], int]:
        """Get a page of rules and the total matching count."""
        rules = await self.repo.list_for_tenant(
            tenant_id, state=state, rule_type=rule_type, offset=offset, limit=limit
        )
        total = await self.repo.count_for_tenant(tenant_id, state=state, rule_type=rule_type)
        return rules, total

    async def get_rule(self, tenant_id: str, rule_id: str) -> Optional[Rule]:
        return await self.repo.get_by_rule_id(tenant_id, rule_id)

    async def create_rule(self, tenant_id: str, fields: dict[str, Any]) -> Rule:
        """Create a rule with a freshly assigned rule_id.

        Raises:
            ValueError: If the rule violates a registry invariant
        """
        error = validate_rule(fields)
        if error:
            raise ValueError(error)

        rule = Rule(
            tenant_id=tenant_id,
            rule_id=str(uuid4()),
            **{key: fields[key] for key in EDITABLE_FIELDS if key in fields},
        )
        created = await self.repo.create(rule)
        logger.info("Rule created", tenant_id=tenant_id, rule_id=created.rule_id, name=created.name)
        return created

    async def update_rule(self, tenant_id: str, rule_id: str, fields: dict[str, Any]) -> Optional[Rule]:
        """Replace a rule's editable fields.

        Returns:
            The updated rule, or None if no rule has this rule_id

        Raises:
            ValueError: If the rule violates a registry invariant
        """
        error = validate_rule(fields)
        if error:
            raise ValueError(error)

        existing = await self.repo.get_by_rule_id(tenant_id, rule_id)
        if existing is None:
            logger.debug("Rule was not found in the db", tenant_id=tenant_id, rule_id=rule_id)
            return None

        for key in EDITABLE_FIELDS:
            if key in fields:
                setattr(existing, key, fields[key])
        updated = await self.repo.update(existing)
        logger.info("Rule updated", tenant_id=tenant_id, rule_id=rule_id)
        return updated

    async def load_default_rules(self, tenant_id: str) -> dict[str, int]:
        """Install the default rule set, skipping rules whose name already exists."""
        created = 0
        skipped = 0
        for fields in DEFAULT_RULES:
            if await self.repo.get_by_name(tenant_id, fields["name"]):
                skipped += 1
                continue
            await self.create_rule(tenant_id, fields)
            created += 1
        logger.info("Default rules loaded", tenant_id=tenant_id, created=created, skipped=skipped)
        return {"created": created, "skipped": skipped}
