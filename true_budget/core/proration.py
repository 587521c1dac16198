"""
Recurring cost proration.

Converts recurring expenses into the amount attributable to a date
interval.

Proration Policy:
1. daily, weekly, biweekly and monthly count whole cycles, rounding up
   (a 6-day window still incurs a full weekly charge)
2. yearly is charged only when the window is longer than 365 days
3. custom cadences are prorated continuously at a daily rate
"""

import math
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from true_budget.storage.models import (
    CustomUnit,
    Frequency,
    PaycheckFrequency,
    RecurringExpense,
)

ZERO = Decimal("0")

# Approximate unit lengths in days
UNIT_DAYS = {
    CustomUnit.DAYS: 1,
    CustomUnit.WEEKS: 7,
    CustomUnit.MONTHS: 30,
    CustomUnit.YEARS: 365,
}

# Days per billing cycle for the whole-cycle frequencies
CYCLE_DAYS = {
    Frequency.WEEKLY: 7,
    Frequency.BIWEEKLY: 14,
    Frequency.MONTHLY: 30,
}

# (multiplier, divisor) converting a per-unit rate into a per-paycheck amount
PER_PAYCHECK_CONVERSIONS = {
    PaycheckFrequency.WEEKLY: {
        CustomUnit.DAYS: (Decimal("7"), Decimal("1")),
        CustomUnit.WEEKS: (Decimal("1"), Decimal("1")),
        CustomUnit.MONTHS: (Decimal("1"), Decimal("4.333")),
        CustomUnit.YEARS: (Decimal("1"), Decimal("52")),
    },
    PaycheckFrequency.BIWEEKLY: {
        CustomUnit.DAYS: (Decimal("14"), Decimal("1")),
        CustomUnit.WEEKS: (Decimal("2"), Decimal("1")),
        CustomUnit.MONTHS: (Decimal("1"), Decimal("2.167")),
        CustomUnit.YEARS: (Decimal("1"), Decimal("26")),
    },
    PaycheckFrequency.MONTHLY: {
        CustomUnit.DAYS: (Decimal("30"), Decimal("1")),
        CustomUnit.WEEKS: (Decimal("4.333"), Decimal("1")),
        CustomUnit.MONTHS: (Decimal("1"), Decimal("1")),
        CustomUnit.YEARS: (Decimal("1"), Decimal("12")),
    },
}

_ONE_DAY = timedelta(days=1)


def period_days(start: datetime, end: datetime) -> int:
    """Length of [start, end] in days, rounded up."""
    return math.ceil((end - start) / _ONE_DAY)


def unit_days(unit: CustomUnit) -> int:
    """Approximate day length of a custom unit."""
    return UNIT_DAYS[unit]


def has_custom_interval(item) -> bool:
    """True when both halves of the custom cadence are set."""
    return bool(item.custom_number) and item.custom_unit is not None


def calculate_period_cost(expense: RecurringExpense, start: datetime, end: datetime) -> Decimal:
    """Calculate the cost of a recurring expense over [start, end].

    Args:
        expense: The recurring expense
        start: Interval start
        end: Interval end

    Returns:
        Cost attributable to the interval; 0 for inactive expenses and
        for expenses starting after the interval
    """
    if not expense.is_active or expense.start_date > end:
        return ZERO

    days = period_days(start, end)
    frequency = expense.frequency

    if frequency == Frequency.DAILY:
        return expense.amount * days
    if frequency in CYCLE_DAYS:
        return expense.amount * math.ceil(days / CYCLE_DAYS[frequency])
    if frequency == Frequency.YEARLY:
        return expense.amount if days > 365 else ZERO
    if frequency == Frequency.CUSTOM:
        if not has_custom_interval(expense):
            return ZERO
        rate_per_unit = expense.amount / Decimal(expense.custom_number)
        return rate_per_unit * Decimal(days) / Decimal(unit_days(expense.custom_unit))
    return ZERO


def calculate_recurring_for_period(
    recurring: Iterable[RecurringExpense],
    start: datetime,
    end: datetime,
) -> Decimal:
    """Sum the prorated cost of every recurring expense over [start, end]."""
    total = ZERO
    for expense in recurring:
        total += calculate_period_cost(expense, start, end)
    return total


def per_paycheck_amount(
    amount: Decimal,
    custom_number: Optional[int],
    custom_unit: Optional[CustomUnit],
    paycheck_frequency: PaycheckFrequency,
) -> Optional[Decimal]:
    """Express a custom cadence ("amount per N units") per paycheck.

    Returns None when the custom pair is incomplete or the paycheck
    frequency has no conversion table (semimonthly).
    """
    if not custom_number or custom_unit is None:
        return None
    conversions = PER_PAYCHECK_CONVERSIONS.get(paycheck_frequency)
    if conversions is None:
        return None
    multiplier, divisor = conversions[custom_unit]
    rate_per_unit = amount / Decimal(custom_number)
    return rate_per_unit * multiplier / divisor


def _format_currency(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def describe_cadence(item, paycheck_frequency: PaycheckFrequency) -> str:
    """Human readable cadence of a recurring expense or goal.

    Fixed cadences read "$50.00/weekly". Custom cadences are converted to
    the paycheck frequency when possible ("$12.00/biweekly"), otherwise
    shown as declared ("$600.00/10 months").
    """
    amount = item.target_amount if hasattr(item, "target_amount") else item.amount
    if item.frequency != Frequency.CUSTOM:
        return f"{_format_currency(amount)}/{item.frequency.value}"

    unit_label = item.custom_unit.value if item.custom_unit is not None else "custom"
    converted = per_paycheck_amount(amount, item.custom_number, item.custom_unit, paycheck_frequency)
    if converted is None:
        return f"{_format_currency(amount)}/{item.custom_number or 0} {unit_label}"
    return f"{_format_currency(converted)}/{paycheck_frequency.value}"
