"""Provisioning Engine

Detects which baseline rows a tenant lacks and creates them. Planning is
read-only; applying inserts the planned rows and one ActivityLog row per
category, leaving commit to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.app.repositories.tenant_config_repository import TenantConfigRepository
from src.app.repositories.user_repository import UserRepository
from src.domain.activity_log import ActivityLog
from src.domain.budget import Budget
from src.domain.tenant_config import HourAllocation, PayScale, ServiceRate, TaxBracket
from . import baseline

logger = logging.getLogger(__name__)

CATEGORIES = ("pay_scales", "tax_brackets", "hour_allocations", "service_rates", "budgets")


@dataclass
class ProvisioningPlan:
    tenant_id: int
    missing: Dict[str, List] = field(default_factory=dict)

    @property
    def categories(self) -> List[str]:
        return [category for category in CATEGORIES if self.missing.get(category)]

    @property
    def is_empty(self) -> bool:
        return not self.categories

    @property
    def row_count(self) -> int:
        return sum(len(rows) for rows in self.missing.values())


class ProvisioningEngine:
    """
    Business Rules:
    1. Only missing rows are created; existing rows are never touched
    2. Natural keys come from the baseline, so a second plan after apply is empty
    3. Every repaired category is recorded as a system ActivityLog entry
    """

    def __init__(
        self,
        config_repo: TenantConfigRepository,
        user_repo: UserRepository,
        activity_repo: ActivityLogRepository,
        default_budget_allocations: Optional[dict] = None,
    ):
        self.config_repo = config_repo
        self.user_repo = user_repo
        self.activity_repo = activity_repo
        self.budget_allocations = baseline.budget_allocations(default_budget_allocations)

    async def plan(self, tenant_id: int) -> ProvisioningPlan:
        """Read-only gap detection across all baseline categories"""
        plan = ProvisioningPlan(tenant_id=tenant_id)
        plan.missing["pay_scales"] = await self._missing_pay_scales(tenant_id)
        plan.missing["tax_brackets"] = await self._missing_tax_brackets(tenant_id)
        plan.missing["hour_allocations"] = await self._missing_hour_allocations(tenant_id)
        plan.missing["service_rates"] = await self._missing_service_rates(tenant_id)
        plan.missing["budgets"] = await self._missing_budgets(tenant_id)
        return plan

    async def apply(self, plan: ProvisioningPlan) -> List[str]:
        """
        Insert every planned row and log each repaired category

        Returns:
            Categories that received rows
        """
        applied = []
        for category in plan.categories:
            rows = plan.missing[category]
            created = await self.config_repo.add_all(rows)
            await self.activity_repo.create(
                ActivityLog(
                    tenant_id=plan.tenant_id,
                    user_id=None,
                    action="provisioning.repair",
                    resource_type=category,
                    description=f"Created {created} missing {category} rows",
                )
            )
            logger.info(f"Tenant {plan.tenant_id}: created {created} {category} rows")
            applied.append(category)
        return applied

    async def _missing_pay_scales(self, tenant_id: int) -> List[PayScale]:
        existing = await self.config_repo.pay_scale_keys(tenant_id)
        return [
            PayScale(
                tenant_id=tenant_id,
                level=level,
                pay_point=pay_point,
                employment_type=employment_type,
                hourly_rate=rate,
            )
            for (level, pay_point, employment_type), rate in baseline.pay_scale_rates().items()
            if (level, pay_point, employment_type) not in existing
        ]

    async def _missing_tax_brackets(self, tenant_id: int) -> List[TaxBracket]:
        existing = await self.config_repo.tax_bracket_keys(tenant_id, baseline.TAX_YEAR)
        return [
            TaxBracket(
                tenant_id=tenant_id,
                tax_year=baseline.TAX_YEAR,
                min_income=min_income,
                max_income=max_income,
                rate=rate,
                base_tax=base_tax,
            )
            for min_income, max_income, rate, base_tax in baseline.TAX_BRACKETS
            if min_income not in existing
        ]

    async def _missing_hour_allocations(self, tenant_id: int) -> List[HourAllocation]:
        staff = await self.user_repo.list_active_staff(tenant_id)
        existing = await self.config_repo.hour_allocation_staff_ids(tenant_id, baseline.ALLOCATION_PERIOD)
        return [
            HourAllocation(
                tenant_id=tenant_id,
                staff_id=member.id,
                max_hours=member.role.weekly_hours,
                allocation_period=baseline.ALLOCATION_PERIOD,
            )
            for member in staff
            if member.id not in existing
        ]

    async def _missing_service_rates(self, tenant_id: int) -> List[ServiceRate]:
        existing = await self.config_repo.service_rate_keys(tenant_id)
        return [
            ServiceRate(tenant_id=tenant_id, shift_type=shift_type, staff_ratio=staff_ratio, rate=rate)
            for (shift_type, staff_ratio), rate in baseline.SERVICE_RATES.items()
            if (shift_type, staff_ratio) not in existing
        ]

    async def _missing_budgets(self, tenant_id: int) -> List[Budget]:
        clients = await self.config_repo.clients_without_budget(tenant_id)
        return [
            Budget(
                tenant_id=tenant_id,
                client_id=client.id,
                category=category,
                total_allocation=amount,
            )
            for client in clients
            for category, amount in self.budget_allocations.items()
        ]
