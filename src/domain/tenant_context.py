"""Tenant context: the request-scoped answer to "who is acting, for which tenant" """

from dataclasses import dataclass
from src.domain.role import Capability, Role


@dataclass(frozen=True)
class TenantContext:
    """
    Resolved identity of the caller

    Built once per request from the authenticated user row. Immutable so no
    downstream layer can re-point it at another tenant.
    """

    tenant_id: int
    user_id: int
    role: Role

    @property
    def capability(self) -> Capability:
        return self.role.capability

    @property
    def can_read_across_tenants(self) -> bool:
        return self.capability == Capability.CROSS_TENANT_READ

    def effective_tenant(self, requested_tenant_id=None) -> int:
        """
        Tenant a request operates on

        Cross-tenant callers may name another tenant; everyone else is pinned
        to their own regardless of what they ask for.
        """
        if requested_tenant_id is not None and self.can_read_across_tenants:
            return int(requested_tenant_id)
        return self.tenant_id
