"""
Module: envelope_kernel.db.base
Responsibility: Declarative base for the reference budget schema: UUID keys
    stored as strings, integer minor-unit money, and row timestamps.
Architecture position: Kernel > DB.  Imported by every model; imports
    nothing from the kernel.

Invariants enforced:
    - Primary keys are uuid4 values persisted as 36-character strings, so
      the same schema runs on SQLite and PostgreSQL.
    - ``int`` columns map to BigInteger: balances and amounts are minor
      units and never floats.
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUID <-> String(36). Accepts UUIDs or their string form on write."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    type_annotation_map: ClassVar[dict] = {
        UUID: UUIDString(),
        int: BigInteger,
        datetime: DateTime(timezone=True),
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """Adds ``created_at`` / ``updated_at`` maintained by the database."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )
