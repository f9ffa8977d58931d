"""Baseline configuration every tenant must own

ScHADS pay scales, Australian income tax brackets, standard NDIS service
rates, weekly staff hour allocations and default client budgets.
"""

from decimal import Decimal
from typing import Dict, List
from src.domain.budget import BudgetCategory
from src.domain.pricing import ShiftType, StaffRatio, to_money
from src.domain.role import EmploymentType

# ScHADS hourly base rates, level -> pay points 1..4
SCHADS_BASE_RATES: Dict[int, List[Decimal]] = {
    1: [Decimal("24.98"), Decimal("25.98"), Decimal("26.98"), Decimal("27.98")],
    2: [Decimal("28.45"), Decimal("29.45"), Decimal("30.45"), Decimal("31.45")],
    3: [Decimal("32.89"), Decimal("33.89"), Decimal("34.89"), Decimal("35.89")],
    4: [Decimal("37.45"), Decimal("38.45"), Decimal("39.45"), Decimal("40.45")],
}

EMPLOYMENT_LOADINGS: Dict[EmploymentType, Decimal] = {
    EmploymentType.FULLTIME: Decimal("1.00"),
    EmploymentType.PARTTIME: Decimal("1.00"),
    EmploymentType.CASUAL: Decimal("1.25"),
}

TAX_YEAR = "2024-25"

# (min_income, max_income, rate, base_tax)
TAX_BRACKETS = [
    (Decimal("0"), Decimal("18200"), Decimal("0"), Decimal("0")),
    (Decimal("18201"), Decimal("45000"), Decimal("0.19"), Decimal("0")),
    (Decimal("45001"), Decimal("120000"), Decimal("0.325"), Decimal("5092")),
    (Decimal("120001"), Decimal("180000"), Decimal("0.37"), Decimal("29467")),
    (Decimal("180001"), Decimal("999999999"), Decimal("0.45"), Decimal("51667")),
]

SERVICE_RATES: Dict[tuple, Decimal] = {
    (ShiftType.AM, StaffRatio.ONE_TO_ONE): Decimal("40.00"),
    (ShiftType.PM, StaffRatio.ONE_TO_ONE): Decimal("60.00"),
    (ShiftType.ACTIVE_NIGHT, StaffRatio.ONE_TO_ONE): Decimal("80.00"),
    (ShiftType.SLEEPOVER, StaffRatio.ONE_TO_ONE): Decimal("100.00"),
    (ShiftType.AM, StaffRatio.ONE_TO_TWO): Decimal("25.00"),
    (ShiftType.PM, StaffRatio.ONE_TO_TWO): Decimal("35.00"),
    (ShiftType.ACTIVE_NIGHT, StaffRatio.ONE_TO_TWO): Decimal("45.00"),
    (ShiftType.SLEEPOVER, StaffRatio.ONE_TO_TWO): Decimal("55.00"),
}

ALLOCATION_PERIOD = "weekly"

DEFAULT_BUDGET_ALLOCATIONS: Dict[BudgetCategory, Decimal] = {
    BudgetCategory.SIL: Decimal("50000.00"),
    BudgetCategory.COMMUNITY_ACCESS: Decimal("25000.00"),
    BudgetCategory.CAPACITY_BUILDING: Decimal("15000.00"),
}


def pay_scale_rates() -> Dict[tuple, Decimal]:
    """(level, pay_point, employment_type) -> hourly rate, casual loading applied"""
    rates = {}
    for level, base_rates in SCHADS_BASE_RATES.items():
        for pay_point, base_rate in enumerate(base_rates, start=1):
            for employment_type, loading in EMPLOYMENT_LOADINGS.items():
                rates[(level, pay_point, employment_type)] = to_money(base_rate * loading)
    return rates


def budget_allocations(overrides=None) -> Dict[BudgetCategory, Decimal]:
    """Default budget set, optionally replaced by a {category: amount} mapping from config"""
    if not overrides:
        return dict(DEFAULT_BUDGET_ALLOCATIONS)
    return {BudgetCategory(category): to_money(amount) for category, amount in overrides.items()}
