"""FastAPI dependencies for dependency injection."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from password_validator.api.exceptions import ValidationError_
from password_validator.config import Settings, get_settings
from password_validator.database import async_session_maker
from password_validator.http_client import get_http_client
from password_validator.services.context import OKAPI_HEADER_TENANT, RequestContext
from password_validator.services.engine import ValidationEngine
from password_validator.services.evaluators import ProgrammaticRuleEvaluator
from password_validator.services.identity import HttpIdentityResolver, IdentityResolver
from password_validator.services.rule_source import RepositoryRuleSource, RuleSource


def get_request_context(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> RequestContext:
    """Build the caller's tenant context from the request headers."""
    try:
        return RequestContext.from_headers(request.headers, default_okapi_url=settings.okapi_url)
    except ValueError as e:
        raise ValidationError_(str(e), field=OKAPI_HEADER_TENANT)


def get_rule_source(settings: Settings = Depends(get_settings)) -> RuleSource:
    """Rule source reading the registry in its own session."""
    return RepositoryRuleSource(async_session_maker, limit=settings.rules_fetch_limit)


def get_identity_resolver(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> IdentityResolver:
    return HttpIdentityResolver(client, timeout=settings.lookup_timeout_seconds)


def get_validation_engine(
    rule_source: RuleSource = Depends(get_rule_source),
    identity_resolver: IdentityResolver = Depends(get_identity_resolver),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ValidationEngine:
    """Engine wired with this request's collaborators."""
    return ValidationEngine(
        rule_source=rule_source,
        identity_resolver=identity_resolver,
        programmatic_evaluator=ProgrammaticRuleEvaluator(
            client, timeout=settings.lookup_timeout_seconds
        ),
    )


TenantContext = Annotated[RequestContext, Depends(get_request_context)]
Engine = Annotated[ValidationEngine, Depends(get_validation_engine)]
