"""Tenant configuration baseline entities

Every tenant owns its own copy of pay scales, tax brackets, hour allocations
and service rates. Each table carries a per-tenant natural key so the
provisioning engine can fill gaps without creating duplicates.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, Numeric, String, UniqueConstraint
from src.domain.base import BaseModel, IdType, TimestampType, utcnow
from src.domain.role import EmploymentType
from src.domain.pricing import ShiftType, StaffRatio


class PayScale(BaseModel, table=True):
    """ScHADS award hourly rate for (level, pay point, employment type)"""

    __tablename__ = "pay_scales"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "level", "pay_point", "employment_type",
            name="uq_pay_scales_tenant_key",
        ),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )
    tenant_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("tenants.id"), nullable=False, index=True),
    )
    level: int = Field(ge=1, le=8)
    pay_point: int = Field(ge=1, le=4)
    employment_type: EmploymentType
    hourly_rate: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)


class TaxBracket(BaseModel, table=True):
    """Income tax bracket: tax = base_tax + (income - min_income) x rate"""

    __tablename__ = "tax_brackets"
    __table_args__ = (
        UniqueConstraint("tenant_id", "tax_year", "min_income", name="uq_tax_brackets_tenant_key"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )
    tenant_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("tenants.id"), nullable=False, index=True),
    )
    tax_year: str = Field(sa_column=Column(String(9), nullable=False))
    min_income: Decimal = Field(sa_column=Column(Numeric(14, 2), nullable=False))
    max_income: Decimal = Field(sa_column=Column(Numeric(14, 2), nullable=False))
    rate: Decimal = Field(sa_column=Column(Numeric(6, 4), nullable=False))
    base_tax: Decimal = Field(sa_column=Column(Numeric(14, 2), nullable=False))
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)


class HourAllocation(BaseModel, table=True):
    """Maximum rostered hours per period for one staff member"""

    __tablename__ = "hour_allocations"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "staff_id", "allocation_period",
            name="uq_hour_allocations_tenant_key",
        ),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )
    tenant_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("tenants.id"), nullable=False, index=True),
    )
    staff_id: int = Field(sa_column=Column(IdType, ForeignKey("users.id"), nullable=False))
    max_hours: int = Field(gt=0)
    allocation_period: str = Field(default="weekly", sa_column=Column(String(20), nullable=False))
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)


class ServiceRate(BaseModel, table=True):
    """Hourly NDIS rate for a shift type at a staffing ratio"""

    __tablename__ = "service_rates"
    __table_args__ = (
        UniqueConstraint("tenant_id", "shift_type", "staff_ratio", name="uq_service_rates_tenant_key"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )
    tenant_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("tenants.id"), nullable=False, index=True),
    )
    shift_type: ShiftType
    staff_ratio: StaffRatio
    rate: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)
