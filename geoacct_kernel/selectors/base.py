"""
Selectors: the read side of the ledger store.

A selector runs queries on a session it is handed and returns frozen
snapshots from :mod:`geoacct_kernel.domain.dtos`, never ORM rows, so
engines and posting builders cannot write through what they read. The
session and its transaction belong to the caller (normally
:class:`~geoacct_kernel.services.ledger_store.SqlLedgerStore`).
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from geoacct_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    def __init__(self, session: Session):
        self.session = session
