"""Provisioning and reconciliation use cases"""
from .provisioning_engine import ProvisioningEngine, ProvisioningPlan, CATEGORIES
from .reconcile_tenant import ReconcileTenant, ReconcileAllTenants
from .provision_tenant import ProvisionTenant
from .dtos import (
    ReconciliationState,
    TenantReconciliationDTO,
    SweepResultDTO,
    ProvisionTenantCommandDTO,
    ProvisionTenantResponseDTO,
)

__all__ = [
    "ProvisioningEngine",
    "ProvisioningPlan",
    "CATEGORIES",
    "ReconcileTenant",
    "ReconcileAllTenants",
    "ProvisionTenant",
    "ReconciliationState",
    "TenantReconciliationDTO",
    "SweepResultDTO",
    "ProvisionTenantCommandDTO",
    "ProvisionTenantResponseDTO",
]
