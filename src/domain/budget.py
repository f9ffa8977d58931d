"""Budget Domain Entity

Funding allowance for one client in one funding category. current_spent is
derived: it always equals the sum of the budget's BudgetTransactions.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    ForeignKeyConstraint,
    Numeric,
    UniqueConstraint,
)
from src.domain.base import BaseModel, IdType, TimestampType, utcnow


class BudgetCategory(str, Enum):
    """NDIS funding categories"""
    SIL = "SIL"
    COMMUNITY_ACCESS = "CommunityAccess"
    CAPACITY_BUILDING = "CapacityBuilding"


class OverspendPolicy(str, Enum):
    """What the deduction engine does when a charge exceeds the allocation"""
    FLAG = "flag"    # record it and set is_over_allocated
    BLOCK = "block"  # reject with OVER_ALLOCATION, nothing written


class Budget(BaseModel, table=True):
    """
    Budget - per (tenant, client, category) funding allowance

    Domain Rules:
    - One budget per (tenant_id, client_id, category)
    - current_spent == sum(amount) of its transactions, at all times
    - current_spent only decreases through a refund transaction
    - Spending past total_allocation is flagged (is_over_allocated), never clamped
    - Mutated only by the deduction engine or an administrative adjustment
    """

    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("tenant_id", "client_id", "category", name="uq_budgets_client_category"),
        # Target of the composite (budget_id, tenant_id) key on budget_transactions
        UniqueConstraint("id", "tenant_id", name="uq_budgets_id_tenant"),
        ForeignKeyConstraint(
            ["client_id", "tenant_id"],
            ["clients.id", "clients.tenant_id"],
            name="fk_budgets_client_same_tenant",
        ),
        CheckConstraint("total_allocation >= 0", name="total_allocation_non_negative"),
        CheckConstraint("current_spent >= 0", name="current_spent_non_negative"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    tenant_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("tenants.id"), nullable=False, index=True),
    )

    client_id: int = Field(sa_column=Column(IdType, nullable=False, index=True))

    category: BudgetCategory = Field(description="Funding category")

    total_allocation: Decimal = Field(
        sa_column=Column(Numeric(14, 2), nullable=False),
        description="Total funding allocated (2 decimal places)"
    )

    current_spent: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(14, 2), nullable=False, default=Decimal("0.00")),
        description="Sum of all transactions against this budget"
    )

    is_over_allocated: bool = Field(default=False)

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)

    updated_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)

    @property
    def remaining(self) -> Decimal:
        return Decimal(self.total_allocation) - Decimal(self.current_spent)

    def would_exceed(self, amount: Decimal) -> bool:
        return Decimal(self.current_spent) + amount > Decimal(self.total_allocation)
