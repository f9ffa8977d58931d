"""Tenant-Scoped Repository Interface

The only data path for tenant-owned entity kinds. Every method takes the
tenant explicitly and no method can be called without one, except
billing_summary, which demands the cross-tenant capability instead.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type
from src.domain.activity_log import ActivityLog
from src.domain.base import BaseModel
from src.domain.budget import Budget
from src.domain.budget_transaction import BudgetTransaction
from src.domain.client import Client
from src.domain.tenant_config import HourAllocation, PayScale, ServiceRate, TaxBracket
from src.domain.tenant_context import TenantContext


@dataclass(frozen=True)
class EntityKind:
    name: str
    model: Type[BaseModel]
    writable: bool = True


ENTITY_KINDS: Dict[str, EntityKind] = {
    kind.name: kind
    for kind in (
        EntityKind("client", Client),
        EntityKind("budget", Budget),
        EntityKind("budget_transaction", BudgetTransaction, writable=False),
        EntityKind("activity_log", ActivityLog, writable=False),
        EntityKind("pay_scale", PayScale),
        EntityKind("tax_bracket", TaxBracket),
        EntityKind("hour_allocation", HourAllocation),
        EntityKind("service_rate", ServiceRate),
    )
}

# Never accepted from callers on the generic write path
PROTECTED_FIELDS = frozenset({"id", "tenant_id", "current_spent", "is_over_allocated"})


class TenantScopedRepository(ABC):
    """
    Repository interface for tenant-owned rows

    Domain Rules:
    - Reads always carry a tenant_id predicate
    - Writes re-check the stored tenant_id of the target row before applying
    - A row of another tenant is indistinguishable from a missing row (None)
    """

    @abstractmethod
    async def list(
        self,
        tenant_id: int,
        kind: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[BaseModel]:
        pass

    @abstractmethod
    async def get(self, tenant_id: int, kind: str, entity_id: int) -> Optional[BaseModel]:
        pass

    @abstractmethod
    async def create(self, tenant_id: int, kind: str, values: Dict[str, Any]) -> BaseModel:
        """
        Insert a row owned by tenant_id

        Args:
            tenant_id: Owning tenant (the only source of the row's tenant_id)
            kind: Entity kind name
            values: Column values, without protected fields
        """
        pass

    @abstractmethod
    async def update(
        self, tenant_id: int, kind: str, entity_id: int, values: Dict[str, Any]
    ) -> Optional[BaseModel]:
        """
        Update a row if, and only if, it belongs to tenant_id

        Returns:
            The updated row, or None when missing or owned by another tenant
        """
        pass

    @abstractmethod
    async def deactivate(self, tenant_id: int, kind: str, entity_id: int) -> Optional[BaseModel]:
        """Soft delete: sets is_active to False under the same ownership check as update"""
        pass

    @abstractmethod
    async def billing_summary(self, context: TenantContext) -> List[Dict[str, Any]]:
        """
        Per-tenant budget totals across every tenant

        Raises:
            CrossTenantAccessDenied: If the context lacks CROSS_TENANT_READ
        """
        pass
