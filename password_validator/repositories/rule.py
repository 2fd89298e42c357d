"""Repository for validation rule data access."""

from typing import Optional, Sequence

from sqlalchemy import func, select

from password_validator.models.rule import Rule
from password_validator.repositories.base import TenantRepository


class RuleRepository(TenantRepository[Rule]):
    """Repository for tenant rule operations."""

    model_class = Rule

    async def list_for_tenant(
        self,
        tenant_id: str,
        state: Optional[str] = None,
        rule_type: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Sequence[Rule]:
        """Get a tenant's rules with optional filters, in evaluation order."""
        stmt = self._for_tenant(select(Rule), tenant_id, state=state, type=rule_type)
        stmt = (
            stmt.order_by(Rule.order_no, Rule.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def count_for_tenant(
        self,
        tenant_id: str,
        state: Optional[str] = None,
        rule_type: Optional[str] = None,
    ) -> int:
        """Count a tenant's rules with optional filters."""
        stmt = self._for_tenant(
            select(func.count()).select_from(Rule), tenant_id, state=state, type=rule_type
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_by_rule_id(self, tenant_id: str, rule_id: str) -> Optional[Rule]:
        """Get rule by its public rule_id."""
        stmt = self._for_tenant(select(Rule), tenant_id, rule_id=rule_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, tenant_id: str, name: str) -> Optional[Rule]:
        """Get the first rule with the given name."""
        stmt = self._for_tenant(select(Rule), tenant_id, name=name).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()
