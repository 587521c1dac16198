"""
One-time spending aggregation and expense list windows.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Sequence

from .period import PAY_PERIOD_DAYS, end_of_day, latest_paycheck
from true_budget.storage.models import OneTimeExpense, Paycheck


class ExpenseWindow(Enum):
    """Time windows offered by the expense list."""
    PAYCHECK = "paycheck"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    ALL = "all"


def expenses_in_period(
    expenses: Iterable[OneTimeExpense],
    start: datetime,
    end: datetime,
) -> List[OneTimeExpense]:
    """Expenses dated within [start, end], both bounds included."""
    return [e for e in expenses if start <= e.date <= end]


def calculate_spent_in_period(
    expenses: Iterable[OneTimeExpense],
    start: datetime,
    end: datetime,
) -> Decimal:
    """Sum every one-time expense dated within [start, end]."""
    total = Decimal("0")
    for expense in expenses_in_period(expenses, start, end):
        total += expense.amount
    return total


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def filter_expenses(
    expenses: Sequence[OneTimeExpense],
    paychecks: Sequence[Paycheck],
    window: ExpenseWindow,
    now: datetime,
) -> List[OneTimeExpense]:
    """Select the expenses shown for a window, newest first.

    The paycheck window starts at the most recent paycheck, future ones
    included. A paycheck with an unknown frequency yields a zero-length
    window. Weeks run Sunday through Saturday.

    Args:
        expenses: All one-time expenses
        paychecks: All paychecks
        window: Which window to show
        now: Current moment

    Returns:
        Matching expenses sorted by date, newest first
    """
    selected = list(expenses)

    if window == ExpenseWindow.PAYCHECK:
        anchor = latest_paycheck(paychecks)
        if anchor is not None:
            days = PAY_PERIOD_DAYS.get(anchor.frequency, 0)
            selected = expenses_in_period(expenses, anchor.date, anchor.date + timedelta(days=days))
    elif window == ExpenseWindow.MONTH:
        month_start = _start_of_day(now.replace(day=1))
        next_month = (month_start + timedelta(days=32)).replace(day=1)
        month_end = end_of_day(next_month - timedelta(days=1))
        selected = expenses_in_period(expenses, month_start, month_end)
    elif window == ExpenseWindow.WEEK:
        # weekday() counts from Monday; shift so weeks start on Sunday
        week_start = _start_of_day(now - timedelta(days=(now.weekday() + 1) % 7))
        week_end = end_of_day(week_start + timedelta(days=6))
        selected = expenses_in_period(expenses, week_start, week_end)
    elif window == ExpenseWindow.DAY:
        today = _start_of_day(now)
        tomorrow = today + timedelta(days=1)
        selected = [e for e in expenses if today <= e.date < tomorrow]

    return sorted(selected, key=lambda e: e.date, reverse=True)
