"""Request schemas for Budget API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from src.domain.budget import BudgetCategory
from src.domain.pricing import ShiftType, StaffRatio


class DeductionRequestSchema(BaseModel):
    """
    Request schema for recording a shift deduction

    Used for POST /budgets/deductions endpoint.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "client_id": 42,
                "category": "SIL",
                "source_event_id": "shift-1",
                "hours": "2.00",
                "rate": "37.75",
            }
        }
    )

    tenant_id: Optional[int] = Field(default=None, description="Defaults to the caller's tenant")
    client_id: int = Field(..., description="Client whose budget is charged")
    category: BudgetCategory = Field(..., description="SIL, CommunityAccess or CapacityBuilding")
    source_event_id: str = Field(..., min_length=1, max_length=255, description="Completed shift id")
    hours: Decimal = Field(..., description="Hours worked, in (0, 24]")
    rate: Optional[Decimal] = Field(default=None, description="Hourly rate (> 0)")
    shift_type: Optional[ShiftType] = Field(default=None, description="Resolves the service rate when rate is omitted")
    staff_ratio: StaffRatio = Field(default=StaffRatio.ONE_TO_ONE)
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("hours")
    @classmethod
    def validate_hours(cls, v):
        if v <= 0 or v > 24:
            raise ValueError("hours must be greater than 0 and at most 24")
        return v

    @field_validator("rate")
    @classmethod
    def validate_rate(cls, v):
        if v is not None and v <= 0:
            raise ValueError("rate must be greater than 0")
        return v

    @model_validator(mode="after")
    def require_rate_source(self):
        if self.rate is None and self.shift_type is None:
            raise ValueError("either rate or shift_type is required")
        return self


class AdjustmentRequestSchema(BaseModel):
    """
    Request schema for an administrative adjustment (amount > 0) or refund (amount < 0)

    Used for POST /budgets/{budget_id}/adjustments endpoint.
    """

    tenant_id: Optional[int] = Field(default=None)
    source_event_id: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., description="Signed amount; negative for refunds")
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if v == 0:
            raise ValueError("amount must not be zero")
        return v
