"""Declarative base and shared columns for tenant-owned records."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from password_validator.database import Base


class TimestampMixin:
    """Creation and last-modification times, set by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class TenantMixin:
    """Every registry record belongs to exactly one tenant."""

    # Allocated in insertion order; breaks ties between equal sort keys
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)


class PVBase(Base, TenantMixin, TimestampMixin):
    """Base class for tenant-owned tables."""

    __abstract__ = True
