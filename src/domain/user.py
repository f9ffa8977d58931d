"""User Domain Entity"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, String
from src.domain.base import BaseModel, IdType, TimestampType, utcnow
from src.domain.role import Role, EmploymentType


class User(BaseModel, table=True):
    """
    User - staff member or operator bound to exactly one tenant

    Domain Rules:
    - tenant_id is set at creation and never mutated
    - role is drawn from the closed Role set
    """

    __tablename__ = "users"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    tenant_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("tenants.id"), nullable=False, index=True),
    )

    username: str = Field(
        sa_column=Column(String(150), nullable=False, unique=True),
    )

    full_name: str = Field(sa_column=Column(String(255), nullable=False))

    role: Role = Field(default=Role.SUPPORT_WORKER)

    employment_type: EmploymentType = Field(default=EmploymentType.CASUAL)

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)
