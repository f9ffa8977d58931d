"""Request schemas for the admin API"""

from pydantic import BaseModel, Field


class ProvisionTenantRequestSchema(BaseModel):
    """Used for POST /admin/tenants"""

    name: str = Field(..., min_length=1, max_length=255)
    admin_username: str = Field(..., min_length=3, max_length=150)
    admin_full_name: str = Field(..., min_length=1, max_length=255)
