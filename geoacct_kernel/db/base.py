"""
Declarative base for the geoacct schema.

All tables (chart of accounts, cash-flow categories, projects and their
costs and billings, the transaction ledger, the fixed-asset register) share
three conventions set here:

* a ``uuid4`` primary key, stored as ``CHAR(36)``-style text so SQLite test
  databases and PostgreSQL hold identical values;
* ``Decimal`` columns map to ``Numeric(38, 9)``, which is wide enough for
  rupiah-denominated project values and never round-trips through float;
* ``created_at`` / ``updated_at`` maintained by the database clock.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """UUIDs as 36-character text. Foreign keys to ``id`` columns use this too."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    type_annotation_map: ClassVar[dict] = {
        UUID: UUIDString(),
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
    }

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)


def _db_timestamp(**kwargs) -> Mapped[datetime]:
    return mapped_column(server_default=func.now(), nullable=False, **kwargs)


class TrackedBase(Base):
    """Base for persisted records that carry row timestamps."""

    __abstract__ = True

    created_at: Mapped[datetime] = _db_timestamp()
    updated_at: Mapped[datetime] = _db_timestamp(onupdate=func.now())
