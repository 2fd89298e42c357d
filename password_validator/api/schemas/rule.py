"""Pydantic schemas for validation rules."""

from typing import Optional

from pydantic import BaseModel, Field

from password_validator.models.rule import RuleState, RuleType, ValidationType


class RuleBase(BaseModel):
    """Base schema for validation rules."""

    name: str = Field(..., min_length=1, description="Unique human-readable rule name")
    type: RuleType = Field(..., description="RegExp or Programmatic")
    validation_type: ValidationType = Field(
        ValidationType.STRONG, description="Strong or Soft; RegExp rules must be Strong"
    )
    state: RuleState = Field(RuleState.ENABLED, description="Enabled or Disabled")
    module_name: Optional[str] = Field(None, description="Module that owns the rule")
    implementation_reference: Optional[str] = Field(
        None, description="Relative path of the remote check (Programmatic rules)"
    )
    expression: Optional[str] = Field(
        None, description="Regular expression the whole password must match (RegExp rules)"
    )
    description: Optional[str] = Field(None, description="Rule description")
    order_no: int = Field(0, description="Evaluation order, ascending")
    err_message_id: str = Field(..., min_length=1, description="Error code reported on failure")


class RuleCreate(RuleBase):
    """Schema for creating a rule."""


class RuleUpdate(RuleBase):
    """Schema for replacing a rule."""

    rule_id: str = Field(..., description="Identifier of the rule to update")


class RuleDetail(RuleBase):
    """Detailed view of a rule."""

    rule_id: str
    created_at: str
    updated_at: str


class RuleListResponse(BaseModel):
    """Page of rules."""

    rules: list[RuleDetail]
    total_records: int


class DefaultRulesResponse(BaseModel):
    """Outcome of loading the default rule set."""

    created: int
    skipped: int
