"""Pydantic schemas for password validation."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PasswordValidateRequest(BaseModel):
    """Password to validate and the user it belongs to."""

    model_config = ConfigDict(populate_by_name=True)

    password: str = Field(..., min_length=1, description="Candidate password")
    user_id: str = Field(..., alias="userId", min_length=1, description="User identifier")


class ValidationResultResponse(BaseModel):
    """Validation verdict."""

    result: Literal["valid", "invalid"]
    messages: list[str] = Field(default_factory=list, description="Error codes of failed rules, in rule order")
