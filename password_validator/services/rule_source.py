"""Read-only access to a tenant's enabled rule set."""

from abc import ABC, abstractmethod

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from password_validator.logging_config import get_logger
from password_validator.models.rule import RuleState
from password_validator.repositories.rule import RuleRepository
from password_validator.services.errors import RuleSourceError
from password_validator.services.rules import ValidationRule

logger = get_logger(__name__)


class RuleSource(ABC):
    """Supplies the enabled rules of a tenant, in fetch order."""

    @abstractmethod
    async def fetch_rules(self, tenant_id: str) -> list[ValidationRule]:
        """Fetch a snapshot of the tenant's enabled rules or raise RuleSourceError."""
        ...


class RepositoryRuleSource(RuleSource):
    """Reads rules from the registry database in a session of its own."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], limit: int = 500):
        self.session_factory = session_factory
        self.limit = limit

    async def fetch_rules(self, tenant_id: str) -> list[ValidationRule]:
        try:
            async with self.session_factory() as session:
                repo = RuleRepository(session)
                rules = await repo.list_for_tenant(
                    tenant_id,
                    state=RuleState.ENABLED.value,
                    limit=self.limit,
                )
                return [ValidationRule.from_model(rule) for rule in rules]
        except SQLAlchemyError as e:
            logger.error("Error while querying the db to get all tenant rules", tenant_id=tenant_id, exc_info=True)
            raise RuleSourceError(f"Failed to fetch rules for tenant {tenant_id}: {e}", tenant_id=tenant_id) from e
