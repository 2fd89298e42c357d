"""Password validation rule models."""

from enum import Enum
from typing import Optional

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from password_validator.models.base import PVBase


class RuleType(str, Enum):
    """How a rule is checked."""

    REG_EXP = "RegExp"
    PROGRAMMATIC = "Programmatic"


class ValidationType(str, Enum):
    """What happens when a rule's check cannot be completed."""

    STRONG = "Strong"
    SOFT = "Soft"


class RuleState(str, Enum):
    """Whether a rule takes part in validation."""

    ENABLED = "Enabled"
    DISABLED = "Disabled"


class Rule(PVBase):
    """Tenant password validation rule."""

    __tablename__ = "validation_rules"
    __table_args__ = (
        UniqueConstraint("tenant_id", "rule_id", name="uq_validation_rules_tenant_rule"),
        Index("ix_validation_rules_tenant_state", "tenant_id", "state"),
    )

    # Identity
    rule_id: Mapped[str] = mapped_column(String(36), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    module_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Classification
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    validation_type: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=ValidationType.STRONG.value
    )
    state: Mapped[str] = mapped_column(
        String(20), nullable=False, server_default=RuleState.ENABLED.value
    )
    order_no: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    # Rule logic
    expression: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    implementation_reference: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Reported to the caller when the rule fails
    err_message_id: Mapped[str] = mapped_column(String(255), nullable=False)
