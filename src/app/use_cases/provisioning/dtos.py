"""Data Transfer Objects for provisioning and reconciliation"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class ReconciliationState(str, Enum):
    UNCHECKED = "UNCHECKED"
    CHECKING = "CHECKING"
    CONSISTENT = "CONSISTENT"
    REPAIRED = "REPAIRED"
    FAILED = "FAILED"


class TenantReconciliationDTO(BaseModel):
    """Outcome of reconciling one tenant"""

    tenant_id: int
    state: ReconciliationState
    categories: List[str] = Field(default_factory=list, description="Categories repaired")
    rows_created: int = 0
    reason: Optional[str] = Field(default=None, description="Failure reason when FAILED")


class SweepResultDTO(BaseModel):
    """Outcome of one reconciliation sweep across all tenants"""

    tenants_checked: int
    consistent: int
    repaired: int
    failed: int
    results: List[TenantReconciliationDTO]
    sweep_time: datetime
    execution_time_ms: int


class ProvisionTenantCommandDTO(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Organization name")
    admin_username: str = Field(..., min_length=3, max_length=150)
    admin_full_name: str = Field(..., min_length=1, max_length=255)


class ProvisionTenantResponseDTO(BaseModel):
    tenant_id: int
    tenant_name: str
    admin_user_id: int
    categories: List[str]
    rows_created: int
