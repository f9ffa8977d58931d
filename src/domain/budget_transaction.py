"""Budget Transaction Domain Entity

Immutable append-only ledger entry. Exactly one entry exists per source
event (the idempotency key), and tenant_id always equals the budget's tenant.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import (
    ForeignKeyConstraint,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from src.domain.base import BaseModel, IdType, TimestampType, utcnow
from src.domain.budget import Budget


class TransactionType(str, Enum):
    """Budget transaction types"""
    DEDUCTION = "deduction"    # Completed service delivery
    ADJUSTMENT = "adjustment"  # Administrative increase of spend
    REFUND = "refund"          # Signed negative entry, the only way spend decreases


class BudgetTransaction(BaseModel, table=True):
    """
    Budget Transaction - immutable ledger entry

    Domain Rules:
    - Write-once: the ORM rejects updates and deletes
    - (tenant_id, source_event_id) is unique (re-processing cannot double-book)
    - (budget_id, tenant_id) references (budgets.id, budgets.tenant_id), so the
      denormalized tenant can never drift from the budget's tenant
    - amount is signed; only refunds are negative
    """

    __tablename__ = "budget_transactions"
    __table_args__ = (
        UniqueConstraint("tenant_id", "source_event_id", name="uq_budget_transactions_source_event"),
        ForeignKeyConstraint(
            ["budget_id", "tenant_id"],
            ["budgets.id", "budgets.tenant_id"],
            name="fk_budget_transactions_budget_same_tenant",
        ),
        Index("ix_budget_transactions_budget_created", "budget_id", "created_at"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    tenant_id: int = Field(sa_column=Column(IdType, nullable=False, index=True))

    budget_id: int = Field(sa_column=Column(IdType, nullable=False))

    source_event_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Idempotency key, e.g. the completed shift id"
    )

    transaction_type: TransactionType = Field(description="deduction, adjustment or refund")

    amount: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
        description="Signed amount (2 decimal places)"
    )

    hours: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(6, 2), nullable=True))

    rate: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(10, 2), nullable=True))

    multiplier: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(4, 2), nullable=True))

    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_by: Optional[int] = Field(default=None, sa_column=Column(IdType, nullable=True))

    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)

    @classmethod
    def for_budget(cls, budget: Budget, **fields) -> "BudgetTransaction":
        """Build an entry whose tenant is copied from the budget, never from the caller"""
        fields.pop("tenant_id", None)
        return cls(tenant_id=budget.tenant_id, budget_id=budget.id, **fields)
