"""Rule snapshots handed to the validation engine and their preparation."""

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable, Optional

from password_validator.models.rule import RuleState, RuleType, ValidationType

if TYPE_CHECKING:
    from password_validator.models.rule import Rule

# Reserved token in RegExp rules, replaced with the current user's name
USER_NAME_PLACEHOLDER = "<USER_NAME>"

__all__ = [
    "RuleState",
    "RuleType",
    "USER_NAME_PLACEHOLDER",
    "ValidationRule",
    "ValidationType",
    "prepare_rules",
    "sort_rules",
    "substitute_user_name",
]


@dataclass(frozen=True)
class ValidationRule:
    """Immutable view of one rule as read at the start of a validate call.

    ``rule_type`` and ``validation_type`` are kept as the stored strings so
    that values outside the known enums surface as configuration errors
    when the rule is evaluated.
    """

    rule_id: str
    name: str
    rule_type: str
    validation_type: str
    err_message_id: str
    order_no: int = 0
    state: str = RuleState.ENABLED.value
    expression: Optional[str] = None
    implementation_reference: Optional[str] = None
    module_name: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_reg_exp(self) -> bool:
        return self.rule_type == RuleType.REG_EXP

    @property
    def is_programmatic(self) -> bool:
        return self.rule_type == RuleType.PROGRAMMATIC

    @classmethod
    def from_model(cls, rule: "Rule") -> "ValidationRule":
        """Build a snapshot from a persisted rule."""
        return cls(
            rule_id=rule.rule_id,
            name=rule.name,
            rule_type=rule.type,
            validation_type=rule.validation_type,
            err_message_id=rule.err_message_id,
            order_no=rule.order_no,
            state=rule.state,
            expression=rule.expression,
            implementation_reference=rule.implementation_reference,
            module_name=rule.module_name,
            description=rule.description,
        )


def sort_rules(rules: Iterable[ValidationRule]) -> list[ValidationRule]:
    """Order rules by order_no; equal order numbers keep their fetch order."""
    return sorted(rules, key=lambda rule: rule.order_no)


def substitute_user_name(expression: str, user_name: str) -> str:
    """Replace the user name placeholder with a literal-matching user name."""
    return expression.replace(USER_NAME_PLACEHOLDER, re.escape(user_name))


def prepare_rules(rules: Iterable[ValidationRule], user_name: str) -> list[ValidationRule]:
    """Sort rules and resolve the user name placeholder in RegExp rules.

    Returns new snapshots; the input rules are left untouched.
    """
    prepared: list[ValidationRule] = []
    for rule in sort_rules(rules):
        if rule.is_reg_exp and rule.expression and USER_NAME_PLACEHOLDER in rule.expression:
            rule = replace(rule, expression=substitute_user_name(rule.expression, user_name))
        prepared.append(rule)
    return prepared
