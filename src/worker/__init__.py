"""Background workers"""
from .tenant_reconciler import TenantReconcilerWorker

__all__ = ["TenantReconcilerWorker"]
