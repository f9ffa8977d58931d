"""Error codes and domain exceptions

Use cases report failures as ``libs.result.Error`` values carrying one of the
codes below. The exceptions are reserved for invariant breaches that must
never be reachable through a normal code path.
"""


class ErrorCode:
    UNAUTHENTICATED = "UNAUTHENTICATED"
    NO_TENANT_CONTEXT = "NO_TENANT_CONTEXT"
    TENANT_BOUNDARY_VIOLATION = "TENANT_BOUNDARY_VIOLATION"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND_OR_FORBIDDEN = "NOT_FOUND_OR_FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BUDGET_NOT_FOUND = "BUDGET_NOT_FOUND"
    RATE_NOT_FOUND = "RATE_NOT_FOUND"
    ALREADY_RECORDED = "ALREADY_RECORDED"
    OVER_ALLOCATION = "OVER_ALLOCATION"
    LOCK_TIMEOUT = "LOCK_TIMEOUT"
    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"


class CrossTenantAccessDenied(PermissionError):
    """Raised when a tenant-scoped caller reaches a cross-tenant query"""

    def __init__(self, user_id: int, role: str):
        super().__init__(f"User {user_id} with role {role} cannot read across tenants")
        self.user_id = user_id
        self.role = role


class ImmutableRecordError(RuntimeError):
    """Raised when a write-once row is updated or deleted through the ORM"""

    def __init__(self, entity_type: str, entity_id):
        super().__init__(f"{entity_type} {entity_id} is immutable")
        self.entity_type = entity_type
        self.entity_id = entity_id


class LockTimeoutError(RuntimeError):
    """Raised by repositories when a row lock could not be acquired in time"""


class DuplicateSourceEventError(RuntimeError):
    """Raised when a second ledger entry is inserted for an already-recorded source event"""

    def __init__(self, tenant_id: int, source_event_id: str):
        super().__init__(f"Source event {source_event_id} already recorded for tenant {tenant_id}")
        self.tenant_id = tenant_id
        self.source_event_id = source_event_id
