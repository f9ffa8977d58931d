"""Data Transfer Objects for tenancy use cases"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List
from pydantic import BaseModel, Field


class WriteAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DEACTIVATE = "deactivate"


class ScopedRecordDTO(BaseModel):
    kind: str = Field(..., description="Entity kind, e.g. 'client'")
    id: int = Field(..., description="Row id")
    tenant_id: int = Field(..., description="Owning tenant")
    data: Dict[str, Any] = Field(..., description="Row columns, JSON-encoded")


class ScopedListDTO(BaseModel):
    kind: str
    tenant_id: int
    items: List[ScopedRecordDTO]
    limit: int
    offset: int


class TenantContextDTO(BaseModel):
    tenant_id: int
    user_id: int
    role: str
    capability: str


def to_record_dto(kind: str, entity) -> ScopedRecordDTO:
    return ScopedRecordDTO(
        kind=kind,
        id=entity.id,
        tenant_id=entity.tenant_id,
        data=entity.model_dump(mode="json"),
    )


class TenantBillingSummaryDTO(BaseModel):
    tenant_id: int
    tenant_name: str
    budget_count: int
    total_allocation: Decimal
    current_spent: Decimal
