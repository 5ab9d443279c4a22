"""Database plumbing: declarative base, column types, engine and sessions."""

from geoacct_kernel.db.base import Base, TrackedBase, UUIDString
from geoacct_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from geoacct_kernel.db.types import Money, round_money, round_percent

__all__ = [
    "Base",
    "TrackedBase",
    "UUIDString",
    "Money",
    "round_money",
    "round_percent",
    "create_tables",
    "drop_tables",
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "reset_engine",
    "session_scope",
]
