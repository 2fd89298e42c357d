"""Tenant rule registry endpoints."""

from typing import Optional

from fastapi import APIRouter, Query, status

from password_validator.api.dependencies import TenantContext
from password_validator.api.exceptions import NotFoundError, RuleValidationError
from password_validator.api.middleware import validate_pagination
from password_validator.api.schemas.rule import (
    DefaultRulesResponse,
    RuleCreate,
    RuleDetail,
    RuleListResponse,
    RuleUpdate,
)
from password_validator.database import DbSession
from password_validator.models import Rule, RuleState, RuleType
from password_validator.services.registry import RuleRegistryService

router = APIRouter(prefix="/tenant/rules")


def _to_detail(rule: Rule) -> RuleDetail:
    return RuleDetail(
        rule_id=rule.rule_id,
        name=rule.name,
        type=rule.type,
        validation_type=rule.validation_type,
        state=rule.state,
        module_name=rule.module_name,
        implementation_reference=rule.implementation_reference,
        expression=rule.expression,
        description=rule.description,
        order_no=rule.order_no,
        err_message_id=rule.err_message_id,
        created_at=rule.created_at.isoformat(),
        updated_at=rule.updated_at.isoformat(),
    )


@router.get("", response_model=RuleListResponse)
async def list_rules(
    db: DbSession,
    context: TenantContext,
    state: Optional[RuleState] = Query(None, description="Filter by state"),
    rule_type: Optional[RuleType] = Query(None, alias="type", description="Filter by rule type"),
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1),
) -> RuleListResponse:
    """List the tenant's rules in evaluation order."""
    offset, limit = validate_pagination(offset, limit)
    service = RuleRegistryService(db)
    rules, total = await service.list_rules(
        context.tenant_id,
        state=state.value if state else None,
        rule_type=rule_type.value if rule_type else None,
        offset=offset,
        limit=limit,
    )
    return RuleListResponse(rules=[_to_detail(r) for r in rules], total_records=total)


@router.post("", response_model=RuleDetail, status_code=status.HTTP_201_CREATED)
async def create_rule(
    db: DbSession,
    context: TenantContext,
    rule: RuleCreate,
) -> RuleDetail:
    """Create a rule; its rule_id is assigned by the registry."""
    service = RuleRegistryService(db)
    try:
        created = await service.create_rule(context.tenant_id, rule.model_dump(mode="json"))
    except ValueError as e:
        raise RuleValidationError(str(e))
    await db.commit()
    return _to_detail(created)


@router.put("", response_model=RuleDetail)
async def update_rule(
    db: DbSession,
    context: TenantContext,
    rule: RuleUpdate,
) -> RuleDetail:
    """Replace an existing rule identified by its rule_id."""
    service = RuleRegistryService(db)
    try:
        updated = await service.update_rule(
            context.tenant_id,
            rule.rule_id,
            rule.model_dump(mode="json", exclude={"rule_id"}),
        )
    except ValueError as e:
        raise RuleValidationError(str(e), rule_id=rule.rule_id)
    if updated is None:
        raise NotFoundError("Rule", rule.rule_id)
    await db.commit()
    return _to_detail(updated)


@router.post("/defaults", response_model=DefaultRulesResponse)
async def load_default_rules(
    db: DbSession,
    context: TenantContext,
) -> DefaultRulesResponse:
    """Install the default rule set for the tenant."""
    service = RuleRegistryService(db)
    counts = await service.load_default_rules(context.tenant_id)
    await db.commit()
    return DefaultRulesResponse(**counts)


@router.get("/{rule_id}", response_model=RuleDetail)
async def get_rule(
    db: DbSession,
    context: TenantContext,
    rule_id: str,
) -> RuleDetail:
    """Get a single rule by its rule_id."""
    service = RuleRegistryService(db)
    rule = await service.get_rule(context.tenant_id, rule_id)
    if rule is None:
        raise NotFoundError("Rule", rule_id)
    return _to_detail(rule)
