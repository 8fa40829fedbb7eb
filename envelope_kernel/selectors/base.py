"""
Module: envelope_kernel.selectors.base
Responsibility: Common base for the read-only selectors behind the SQL
    budget sources (accounts, budgets, allocations, transactions).
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain/ DTOs.  MUST NOT import from engines, services, or config.

Invariants enforced:
    - Read-only: selectors never add, delete, flush or commit.
    - Selectors return frozen snapshot DTOs or plain ints, never ORM rows.
    - The caller owns the session and its lifetime.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from envelope_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """Wraps a caller-owned Session for read-only queries over one model."""

    def __init__(self, session: Session):
        self.session = session

    def scalar_int(self, query: Select) -> int:
        """Run a single-value aggregate; SQL NULL comes back as 0."""
        value = self.session.execute(query).scalar_one()
        return int(value) if value is not None else 0
