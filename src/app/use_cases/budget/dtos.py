"""Data Transfer Objects for Budget Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from src.domain.budget import BudgetCategory
from src.domain.pricing import ShiftType, StaffRatio


class RecordDeductionCommandDTO(BaseModel):
    """
    Command DTO for charging a completed shift against a client budget

    Used as input to RecordDeduction use case. Either rate or shift_type must
    be given; shift_type resolves the tenant's service rate.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "client_id": 42,
                "category": "SIL",
                "source_event_id": "shift-1",
                "hours": "2.00",
                "rate": "37.75",
                "staff_ratio": "1:1",
            }
        }
    )

    tenant_id: Optional[int] = Field(
        default=None,
        description="Target tenant; defaults to the caller's tenant"
    )

    client_id: int = Field(..., description="Client whose budget is charged")

    category: BudgetCategory = Field(..., description="Funding category of the budget")

    source_event_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Idempotency key, typically the completed shift id"
    )

    hours: Decimal = Field(..., gt=0, le=24, description="Hours worked, in (0, 24]")

    rate: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Hourly rate; resolved from service rates when omitted"
    )

    shift_type: Optional[ShiftType] = Field(
        default=None,
        description="Shift type used to look up the service rate"
    )

    staff_ratio: StaffRatio = Field(
        default=StaffRatio.ONE_TO_ONE,
        description="Staffing ratio; shared support is discounted"
    )

    description: Optional[str] = Field(default=None, max_length=1000)


class RecordAdjustmentCommandDTO(BaseModel):
    """
    Command DTO for an administrative adjustment or refund

    Adjustments carry a positive amount, refunds a negative one.
    """

    tenant_id: Optional[int] = Field(default=None)

    budget_id: int = Field(..., description="Budget to adjust")

    source_event_id: str = Field(..., min_length=1, max_length=255)

    amount: Decimal = Field(..., description="Signed amount; negative for refunds")

    description: Optional[str] = Field(default=None, max_length=1000)


class BudgetTransactionResponseDTO(BaseModel):
    """Response DTO for a recorded ledger entry with the budget's new state"""

    transaction_id: int
    tenant_id: int
    budget_id: int
    source_event_id: str
    transaction_type: str
    amount: Decimal
    hours: Optional[Decimal] = None
    rate: Optional[Decimal] = None
    multiplier: Optional[Decimal] = None
    current_spent: Decimal = Field(..., description="Budget spend after this entry")
    total_allocation: Decimal
    remaining: Decimal
    is_over_allocated: bool
    warning: Optional[str] = Field(
        default=None,
        description="Set when the entry pushed the budget over its allocation"
    )
    created_at: datetime


class TransactionDTO(BaseModel):
    """Ledger entry as listed under a budget"""

    id: int
    source_event_id: str
    transaction_type: str
    amount: Decimal
    hours: Optional[Decimal] = None
    rate: Optional[Decimal] = None
    multiplier: Optional[Decimal] = None
    description: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime


class ListTransactionsResponseDTO(BaseModel):
    budget_id: int
    tenant_id: int
    total: int
    limit: int
    offset: int
    transactions: List[TransactionDTO]


class LedgerDiscrepancyDTO(BaseModel):
    """A budget whose spend does not equal its transaction sum"""

    tenant_id: int
    budget_id: int
    current_spent: Decimal
    calculated_spent: Decimal
    discrepancy: Decimal


class LedgerAuditResultDTO(BaseModel):
    total_budgets_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    audit_time: datetime
    execution_time_ms: int
