"""Base repository for tenant-partitioned tables."""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from password_validator.models.base import PVBase

ModelT = TypeVar("ModelT", bound=PVBase)


class TenantRepository(Generic[ModelT]):
    """Data access that never crosses a tenant boundary."""

    model_class: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    def _for_tenant(self, stmt: Select, tenant_id: str, **filters: Any) -> Select:
        """Restrict a statement to one tenant and the given column values.

        Filters whose value is None are ignored.
        """
        stmt = stmt.where(self.model_class.tenant_id == tenant_id)
        for column, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model_class, column) == value)
        return stmt

    async def create(self, entity: ModelT) -> ModelT:
        """Insert an entity and load its database defaults."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, entity: ModelT) -> ModelT:
        """Flush pending changes on an entity."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity
