"""Tenancy API Routes"""

from fastapi import APIRouter, Depends
from src.api.dependencies import get_tenant_context
from src.app.use_cases.tenancy.dtos import TenantContextDTO
from src.domain.tenant_context import TenantContext

router = APIRouter(prefix="/tenancy", tags=["Tenancy"])


@router.get("/context", response_model=TenantContextDTO)
async def get_context(context: TenantContext = Depends(get_tenant_context)):
    """
    Return the caller's resolved tenant context.

    **Returns:**
    - 200: tenant_id, user_id, role and capability
    - 401: UNAUTHENTICATED or NO_TENANT_CONTEXT
    """
    return TenantContextDTO(
        tenant_id=context.tenant_id,
        user_id=context.user_id,
        role=context.role.value,
        capability=context.capability.value,
    )
