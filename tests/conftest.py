"""Pytest configuration and fixtures."""

import asyncio
import json
import os
from collections.abc import AsyncGenerator
from typing import Any, Optional

# Must be set before the application modules create their engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import password_validator.models  # noqa: F401
from password_validator.api.dependencies import get_rule_source
from password_validator.api.main import app
from password_validator.config import Settings, get_settings
from password_validator.database import Base, get_db
from password_validator.http_client import get_http_client
from password_validator.metrics import MetricsRegistry
from password_validator.services.context import RequestContext
from password_validator.services.errors import IdentityErrorKind, IdentityResolutionError
from password_validator.services.identity import IdentityResolver, ResolvedUser
from password_validator.services.rule_source import RepositoryRuleSource, RuleSource
from password_validator.services.rules import ValidationRule

# Test database URL (use in-memory SQLite for unit tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_TENANT = "diku"
TEST_OKAPI_URL = "http://okapi.test"
TEST_USER_ID = "8f1a2b3c-0000-4000-8000-000000000001"
TEST_USER_NAME = "admin"


def get_test_settings() -> Settings:
    """Override settings for testing."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        okapi_url=TEST_OKAPI_URL,
        environment="test",
        log_level="WARNING",
    )


def users_payload(*usernames: str, total: Optional[int] = None) -> dict[str, Any]:
    """A users query response holding one record per username."""
    users = [{"id": TEST_USER_ID, "username": name} for name in usernames]
    return {"users": users, "totalRecords": len(users) if total is None else total}


class FakeGateway:
    """Stands in for the gateway behind X-Okapi-Url.

    Serves the users endpoint and any number of remote rule paths. Each
    remote path can answer with a status and body, after an optional delay,
    or raise a transport error.
    """

    def __init__(self, users: Optional[Any] = None):
        self.users = users_payload(TEST_USER_NAME) if users is None else users
        self.users_status = 200
        self.routes: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.completed: list[str] = []
        self.cancelled: list[str] = []

    def add_rule(
        self,
        path: str,
        result: Optional[str] = "valid",
        status: int = 200,
        body: Optional[Any] = None,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ) -> None:
        if body is None and result is not None:
            body = {"result": result}
        self.routes[path] = {"status": status, "body": body, "delay": delay, "error": error}

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/users":
            return httpx.Response(self.users_status, json=self.users)

        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, text="Not found")
        try:
            if route["delay"]:
                await asyncio.sleep(route["delay"])
        except asyncio.CancelledError:
            self.cancelled.append(path)
            raise
        if route["error"] is not None:
            raise route["error"]
        self.completed.append(path)
        body = route["body"]
        if isinstance(body, str):
            return httpx.Response(route["status"], text=body)
        return httpx.Response(route["status"], json=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def json_sent_to(self, path: str) -> dict[str, Any]:
        return json.loads(self.requests_to(path)[-1].content)


class InMemoryRuleSource(RuleSource):
    """Rule source over a fixed list of snapshots."""

    def __init__(self, rules: list[ValidationRule], delay: float = 0.0, error: Optional[Exception] = None):
        self.rules = rules
        self.delay = delay
        self.error = error
        self.calls: list[str] = []
        self.cancelled = False

    async def fetch_rules(self, tenant_id: str) -> list[ValidationRule]:
        self.calls.append(tenant_id)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return list(self.rules)


class StaticIdentityResolver(IdentityResolver):
    """Resolves every user id to the same user name."""

    def __init__(self, username: str = TEST_USER_NAME, error_kind: Optional[IdentityErrorKind] = None):
        self.username = username
        self.error_kind = error_kind

    async def resolve_user(self, user_id: str, context: RequestContext) -> ResolvedUser:
        if self.error_kind is not None:
            raise IdentityResolutionError("lookup failed", kind=self.error_kind, user_id=user_id)
        return ResolvedUser(id=user_id, username=self.username)


def reg_exp_rule(name: str, expression: str, order_no: int = 0, **overrides: Any) -> ValidationRule:
    fields = {
        "rule_id": f"{name}-id",
        "name": name,
        "rule_type": "RegExp",
        "validation_type": "Strong",
        "err_message_id": f"{name}.invalid",
        "order_no": order_no,
        "expression": expression,
    }
    fields.update(overrides)
    return ValidationRule(**fields)


def programmatic_rule(
    name: str,
    path: str,
    order_no: int = 0,
    validation_type: str = "Strong",
    **overrides: Any,
) -> ValidationRule:
    fields = {
        "rule_id": f"{name}-id",
        "name": name,
        "rule_type": "Programmatic",
        "validation_type": validation_type,
        "err_message_id": f"{name}.invalid",
        "order_no": order_no,
        "implementation_reference": path,
    }
    fields.update(overrides)
    return ValidationRule(**fields)


@pytest.fixture
def request_context() -> RequestContext:
    return RequestContext(tenant_id=TEST_TENANT, okapi_url=TEST_OKAPI_URL, token="test-token")


@pytest.fixture
def metrics() -> MetricsRegistry:
    """Fresh metrics registry per test."""
    return MetricsRegistry(prefix="test")


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest_asyncio.fixture(scope="function")
async def gateway_client(gateway: FakeGateway) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with gateway.client() as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def test_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(
    test_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    gateway_client: httpx.AsyncClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client talking to the fake gateway."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_session

    def override_get_rule_source() -> RuleSource:
        return RepositoryRuleSource(session_factory)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = get_test_settings
    app.dependency_overrides[get_http_client] = lambda: gateway_client
    app.dependency_overrides[get_rule_source] = override_get_rule_source

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-Okapi-Tenant": TEST_TENANT},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
