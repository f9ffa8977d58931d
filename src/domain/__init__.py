from .base import BaseModel, IdType, TimestampType, utcnow
from .role import Role, Capability, EmploymentType
from .tenant import Tenant
from .user import User
from .client import Client
from .budget import Budget, BudgetCategory, OverspendPolicy
from .budget_transaction import BudgetTransaction, TransactionType
from .activity_log import ActivityLog
from .tenant_config import PayScale, TaxBracket, HourAllocation, ServiceRate
from .tenant_context import TenantContext
from .pricing import ShiftType, StaffRatio, calculate_deduction
from .immutability import register_immutability_listeners

__all__ = [
    "BaseModel",
    "IdType",
    "TimestampType",
    "utcnow",
    "Role",
    "Capability",
    "EmploymentType",
    "Tenant",
    "User",
    "Client",
    "Budget",
    "BudgetCategory",
    "OverspendPolicy",
    "BudgetTransaction",
    "TransactionType",
    "ActivityLog",
    "PayScale",
    "TaxBracket",
    "HourAllocation",
    "ServiceRate",
    "TenantContext",
    "ShiftType",
    "StaffRatio",
    "calculate_deduction",
    "register_immutability_listeners",
]
