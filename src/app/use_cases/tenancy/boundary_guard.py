"""Boundary Guard

Checks the tenant_id a mutating request names against the caller's context.
Read responses are never inspected; the scoped repository is what keeps
reads inside the tenant.
"""

import logging
from typing import Any, Dict, Optional
from libs.result import Result, Return, Error
from src.domain.errors import ErrorCode
from src.domain.tenant_context import TenantContext

security_logger = logging.getLogger("security.audit")


class BoundaryGuard:
    """
    Business Rules:
    1. A payload tenant_id different from the context tenant is a violation,
       unless the caller holds CROSS_TENANT_READ
    2. A create payload without tenant_id receives the context tenant
    3. Violations are audited and never reach storage
    """

    def check(
        self,
        context: TenantContext,
        payload: Optional[Dict[str, Any]],
        creating: bool = False,
        path: Optional[str] = None,
    ) -> Result[Dict[str, Any]]:
        """
        Args:
            context: Resolved tenant context of the caller
            payload: Decoded request body (may be empty)
            creating: True for create requests, which get tenant_id injected
            path: Request path, for the audit record only

        Returns:
            Result with the payload to proceed with
        """
        guarded = dict(payload or {})
        requested = guarded.get("tenant_id")

        if requested is None:
            if creating:
                guarded["tenant_id"] = context.tenant_id
            return Return.ok(guarded)

        try:
            requested = int(requested)
        except (TypeError, ValueError):
            return Return.err(
                Error(code=ErrorCode.VALIDATION_ERROR, message="tenant_id must be an integer")
            )

        if requested != context.tenant_id and not context.can_read_across_tenants:
            security_logger.warning(
                f"TENANT_BOUNDARY_VIOLATION user_id={context.user_id} "
                f"context_tenant={context.tenant_id} requested_tenant={requested} "
                f"role={context.role.value} path={path or '-'}"
            )
            return Return.err(
                Error(
                    code=ErrorCode.TENANT_BOUNDARY_VIOLATION,
                    message="Request targets a tenant outside the caller's context",
                )
            )

        guarded["tenant_id"] = requested
        return Return.ok(guarded)
