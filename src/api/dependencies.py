"""Request-scoped tenancy dependencies

get_tenant_context resolves who is calling; enforce_tenant_boundary checks
the body of every mutating request against that context before a route runs.
"""

import json
from typing import Any, Dict, Optional
from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession
from libs.result import Error
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.api.error import ClientError, client_error_for
from src.app.use_cases.tenancy.boundary_guard import BoundaryGuard
from src.app.use_cases.tenancy.resolve_context import ResolveTenantContext
from src.depends import get_session
from src.domain.errors import ErrorCode
from src.domain.tenant_context import TenantContext

MUTATING_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

bearer_scheme = HTTPBearer(auto_error=False)


async def get_tenant_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> TenantContext:
    """
    Resolve the TenantContext of the current request

    Raises:
        ClientError 401: UNAUTHENTICATED or NO_TENANT_CONTEXT
    """
    token = credentials.credentials if credentials else None
    result = await ResolveTenantContext(SqlAlchemyUserRepository(session)).execute(token)
    # End the lookup transaction; the route opens its own
    await session.rollback()
    if result.is_err():
        raise client_error_for(result.error)
    return result.value


async def read_json_body(request: Request) -> Dict[str, Any]:
    body = await request.body()
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError:
        raise ClientError(
            Error(code=ErrorCode.VALIDATION_ERROR, message="Request body must be valid JSON"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    if not isinstance(payload, dict):
        raise ClientError(
            Error(code=ErrorCode.VALIDATION_ERROR, message="Request body must be a JSON object"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return payload


async def enforce_tenant_boundary(
    request: Request,
    context: TenantContext = Depends(get_tenant_context),
) -> Dict[str, Any]:
    """
    Boundary guard for mutating requests

    Returns:
        The request body with tenant_id checked (and injected on POST)

    Raises:
        ClientError 403: TENANT_BOUNDARY_VIOLATION
    """
    if request.method not in MUTATING_METHODS:
        return {}

    payload = await read_json_body(request)
    result = BoundaryGuard().check(
        context,
        payload,
        creating=request.method == "POST",
        path=request.url.path,
    )
    if result.is_err():
        raise client_error_for(result.error)
    return result.value


def require_cross_tenant(context: TenantContext = Depends(get_tenant_context)) -> TenantContext:
    if not context.can_read_across_tenants:
        raise ClientError(
            Error(code=ErrorCode.FORBIDDEN, message="Cross-tenant capability required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return context
