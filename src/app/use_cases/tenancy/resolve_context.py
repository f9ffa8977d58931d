"""ResolveTenantContext Use Case

Turns a bearer session token into the TenantContext every later layer relies
on. Performs no writes.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.user_repository import UserRepository
from src.app.services.session_tokens import InvalidSessionToken, decode_token
from src.domain.errors import ErrorCode
from src.domain.tenant_context import TenantContext

logger = logging.getLogger(__name__)


class ResolveTenantContext:
    """
    Use Case: Resolve the tenant context of a request

    Business Rules:
    1. Missing, malformed or expired tokens are UNAUTHENTICATED
    2. Unknown or inactive users are UNAUTHENTICATED
    3. A user row without a tenant is NO_TENANT_CONTEXT
    4. Tenant and role always come from the user row, never from the token
    """

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def execute(self, token: Optional[str]) -> Result[TenantContext]:
        if not token:
            return Return.err(
                Error(code=ErrorCode.UNAUTHENTICATED, message="Missing session token")
            )

        try:
            user_id = decode_token(token)
        except InvalidSessionToken as e:
            return Return.err(
                Error(code=ErrorCode.UNAUTHENTICATED, message="Invalid session token", reason=str(e))
            )

        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            logger.info(f"Session token names unknown or inactive user {user_id}")
            return Return.err(
                Error(code=ErrorCode.UNAUTHENTICATED, message="User not found or inactive")
            )

        if user.tenant_id is None:
            return Return.err(
                Error(
                    code=ErrorCode.NO_TENANT_CONTEXT,
                    message=f"User {user.id} is not assigned to a tenant",
                )
            )

        return Return.ok(TenantContext(tenant_id=user.tenant_id, user_id=user.id, role=user.role))
