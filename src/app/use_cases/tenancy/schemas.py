"""Per-kind write schemas for the tenant-scoped write path

Create schemas list every writable column; update schemas make them all
optional. tenant_id, id and ledger-derived fields are never accepted.
"""

from decimal import Decimal
from typing import Dict, Literal, Optional, Type
from pydantic import BaseModel, ConfigDict, Field
from src.domain.budget import BudgetCategory
from src.domain.pricing import ShiftType, StaffRatio
from src.domain.role import EmploymentType


class WriteSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ClientCreate(WriteSchema):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    ndis_number: str = Field(..., min_length=1, max_length=50)
    is_active: bool = True


class ClientUpdate(WriteSchema):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    ndis_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    is_active: Optional[bool] = None


class BudgetCreate(WriteSchema):
    client_id: int
    category: BudgetCategory
    total_allocation: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)
    is_active: bool = True


class BudgetUpdate(WriteSchema):
    total_allocation: Optional[Decimal] = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    is_active: Optional[bool] = None


class PayScaleCreate(WriteSchema):
    level: int = Field(..., ge=1, le=8)
    pay_point: int = Field(..., ge=1, le=4)
    employment_type: EmploymentType
    hourly_rate: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class PayScaleUpdate(WriteSchema):
    hourly_rate: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


class TaxBracketCreate(WriteSchema):
    tax_year: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    min_income: Decimal = Field(..., ge=0)
    max_income: Decimal = Field(..., gt=0)
    rate: Decimal = Field(..., ge=0, le=1)
    base_tax: Decimal = Field(default=Decimal("0"), ge=0)
    is_active: bool = True


class TaxBracketUpdate(WriteSchema):
    max_income: Optional[Decimal] = Field(default=None, gt=0)
    rate: Optional[Decimal] = Field(default=None, ge=0, le=1)
    base_tax: Optional[Decimal] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class HourAllocationCreate(WriteSchema):
    staff_id: int
    max_hours: int = Field(..., gt=0, le=168)
    allocation_period: Literal["weekly", "fortnightly", "monthly"] = "weekly"
    is_active: bool = True


class HourAllocationUpdate(WriteSchema):
    max_hours: Optional[int] = Field(default=None, gt=0, le=168)
    is_active: Optional[bool] = None


class ServiceRateCreate(WriteSchema):
    shift_type: ShiftType
    staff_ratio: StaffRatio
    rate: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class ServiceRateUpdate(WriteSchema):
    rate: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


CREATE_SCHEMAS: Dict[str, Type[WriteSchema]] = {
    "client": ClientCreate,
    "budget": BudgetCreate,
    "pay_scale": PayScaleCreate,
    "tax_bracket": TaxBracketCreate,
    "hour_allocation": HourAllocationCreate,
    "service_rate": ServiceRateCreate,
}

UPDATE_SCHEMAS: Dict[str, Type[WriteSchema]] = {
    "client": ClientUpdate,
    "budget": BudgetUpdate,
    "pay_scale": PayScaleUpdate,
    "tax_bracket": TaxBracketUpdate,
    "hour_allocation": HourAllocationUpdate,
    "service_rate": ServiceRateUpdate,
}
