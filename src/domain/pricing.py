"""Deduction pricing

amount = hours x rate x ratio multiplier, quantized to cents with banker's
rounding. Currency never passes through float.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from enum import Enum
from typing import Optional

CENT = Decimal("0.01")

MAX_SHIFT_HOURS = Decimal("24")


class ShiftType(str, Enum):
    AM = "AM"
    PM = "PM"
    ACTIVE_NIGHT = "ActiveNight"
    SLEEPOVER = "Sleepover"


class StaffRatio(str, Enum):
    ONE_TO_ONE = "1:1"
    ONE_TO_TWO = "1:2"
    ONE_TO_THREE = "1:3"
    ONE_TO_FOUR = "1:4"


# Shared support costs less per participant
RATIO_MULTIPLIERS = {
    StaffRatio.ONE_TO_ONE: Decimal("1.0"),
    StaffRatio.ONE_TO_TWO: Decimal("0.6"),
    StaffRatio.ONE_TO_THREE: Decimal("0.4"),
    StaffRatio.ONE_TO_FOUR: Decimal("0.3"),
}


def to_money(value) -> Decimal:
    """Quantize any numeric input to cents using ROUND_HALF_EVEN"""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def ratio_multiplier(staff_ratio: Optional[StaffRatio]) -> Decimal:
    if staff_ratio is None:
        return RATIO_MULTIPLIERS[StaffRatio.ONE_TO_ONE]
    return RATIO_MULTIPLIERS[StaffRatio(staff_ratio)]


def calculate_deduction(
    hours: Decimal,
    rate: Decimal,
    staff_ratio: Optional[StaffRatio] = None,
) -> Decimal:
    """
    Compute the amount charged against a budget for one completed shift

    Args:
        hours: Hours worked, in (0, 24]
        rate: Hourly rate, > 0
        staff_ratio: Staffing ratio; defaults to 1:1

    Returns:
        Amount quantized to 0.01 with ROUND_HALF_EVEN

    Raises:
        ValueError: hours or rate out of range
    """
    hours = Decimal(str(hours)) if isinstance(hours, float) else Decimal(hours)
    rate = Decimal(str(rate)) if isinstance(rate, float) else Decimal(rate)

    if hours <= 0 or hours > MAX_SHIFT_HOURS:
        raise ValueError(f"hours must be in (0, {MAX_SHIFT_HOURS}], got {hours}")
    if rate <= 0:
        raise ValueError(f"rate must be greater than 0, got {rate}")

    return to_money(hours * rate * ratio_multiplier(staff_ratio))
