"""
Input validation and record construction.

The budget engine trusts its inputs; everything that creates records
goes through these builders first.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union
from uuid import uuid4

from .contributions import contribution_name
from true_budget.storage.models import (
    CustomUnit,
    Frequency,
    Goal,
    OneTimeExpense,
    Paycheck,
    PaycheckFrequency,
    RecurringExpense,
)

DEFAULT_EXPENSE_NAME = "Misc."

AmountInput = Union[str, int, float, Decimal]


def new_id() -> str:
    return uuid4().hex


def parse_amount(value: AmountInput, message: str = "Please enter a valid amount") -> Decimal:
    """Parse a strictly positive monetary amount.

    Raises:
        ValueError: If value is not a number greater than zero
    """
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(message)
    if not amount.is_finite() or amount <= 0:
        raise ValueError(message)
    return amount


def parse_date(value: Union[str, datetime]) -> datetime:
    """Parse an ISO 8601 date or datetime ("2024-03-01" or "2024-03-01T09:30").

    Stored dates are naive local time, so input carrying a UTC offset is
    converted to local time and the offset dropped.
    """
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def _parse_custom_interval(
    frequency: Frequency,
    custom_number: Optional[Union[str, int]],
    custom_unit: Optional[CustomUnit],
):
    """Return the (number, unit) pair to store for frequency."""
    if frequency != Frequency.CUSTOM:
        return None, None
    try:
        number = int(custom_number)
    except (TypeError, ValueError):
        raise ValueError("Please enter a valid custom number")
    if number <= 0:
        raise ValueError("Please enter a valid custom number")
    if custom_unit is None:
        raise ValueError("Please choose a custom unit")
    return number, custom_unit


def build_paycheck(
    amount: AmountInput,
    date: Union[str, datetime],
    frequency: PaycheckFrequency,
    name: Optional[str] = None,
) -> Paycheck:
    return Paycheck(
        id=new_id(),
        amount=parse_amount(amount),
        date=parse_date(date),
        frequency=frequency,
        name=name or None,
    )


def build_one_time_expense(
    amount: AmountInput,
    category: str,
    name: Optional[str] = None,
    date: Optional[Union[str, datetime]] = None,
) -> OneTimeExpense:
    if not category:
        raise ValueError("Please enter amount and category")
    return OneTimeExpense(
        id=new_id(),
        name=name or DEFAULT_EXPENSE_NAME,
        amount=parse_amount(amount),
        date=parse_date(date) if date is not None else datetime.now(),
        category=category,
    )


def build_recurring_expense(
    amount: AmountInput,
    category: str,
    frequency: Frequency,
    start_date: Union[str, datetime],
    name: Optional[str] = None,
    custom_number: Optional[Union[str, int]] = None,
    custom_unit: Optional[CustomUnit] = None,
) -> RecurringExpense:
    """Validate form input and build an active recurring expense.

    Raises:
        ValueError: If the amount, category or custom cadence is invalid
    """
    if not category:
        raise ValueError("Please enter amount and category")
    parsed_amount = parse_amount(amount)
    number, unit = _parse_custom_interval(frequency, custom_number, custom_unit)
    return RecurringExpense(
        id=new_id(),
        name=name or DEFAULT_EXPENSE_NAME,
        amount=parsed_amount,
        frequency=frequency,
        start_date=parse_date(start_date),
        category=category,
        is_active=True,
        custom_number=number,
        custom_unit=unit,
    )


def build_goal(
    name: str,
    target_amount: AmountInput,
    frequency: Frequency,
    category: str,
    custom_number: Optional[Union[str, int]] = None,
    custom_unit: Optional[CustomUnit] = None,
    start_date: Optional[Union[str, datetime]] = None,
) -> Goal:
    """Validate form input and build an active goal.

    Raises:
        ValueError: If the name is blank, or the target or custom cadence
            is invalid
    """
    if not name or not name.strip():
        raise ValueError("Please fill in all required fields")
    target = parse_amount(target_amount, "Please enter a valid target amount")
    number, unit = _parse_custom_interval(frequency, custom_number, custom_unit)
    return Goal(
        id=new_id(),
        name=name.strip(),
        target_amount=target,
        frequency=frequency,
        start_date=parse_date(start_date) if start_date is not None else datetime.now(),
        category=category,
        is_active=True,
        custom_number=number,
        custom_unit=unit,
    )


def build_goal_contribution(goal: Goal, amount: AmountInput, now: datetime) -> OneTimeExpense:
    """Record a contribution to goal as a one-time expense named after it."""
    return OneTimeExpense(
        id=new_id(),
        name=contribution_name(goal),
        amount=parse_amount(amount),
        date=now,
        category=goal.category,
    )
