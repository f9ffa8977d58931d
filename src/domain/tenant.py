"""Tenant Domain Entity

Identity of an isolated customer organization. Every other entity carries a
tenant_id referencing this table.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, IdType, TimestampType, utcnow


class Tenant(BaseModel, table=True):
    """
    Tenant - unit of data partitioning

    Domain Rules:
    - id is immutable and never reused
    - Tenants are never merged or deleted; deactivation flips is_active
    """

    __tablename__ = "tenants"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Display name of the organization"
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)
