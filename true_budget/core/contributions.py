"""
Goal contributions and progress.

Contributions are one-time expenses linked to a goal by name rather than
by id. The matching rule sits behind ContributionMatcher so a stricter
link can replace it without touching the aggregators.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from .proration import ZERO, has_custom_interval, unit_days
from .spending import expenses_in_period
from true_budget.storage.models import Goal, OneTimeExpense, RecurringExpense

GOAL_PREFIX = "Goal: "


class ContributionMatcher(Protocol):
    """Decides whether an expense is a contribution to a goal."""

    def matches(self, expense: OneTimeExpense, goal: Goal) -> bool:
        ...


class GoalNameMatcher:
    """Case-sensitive substring link between expense and goal names.

    An expense contributes to a goal when its name contains
    "Goal: <goal name>", or when the goal's name contains the expense's
    name with the first "Goal: " removed.
    """

    def matches(self, expense: OneTimeExpense, goal: Goal) -> bool:
        if f"{GOAL_PREFIX}{goal.name}" in expense.name:
            return True
        return expense.name.replace(GOAL_PREFIX, "", 1) in goal.name


DEFAULT_MATCHER = GoalNameMatcher()


def contribution_name(goal: Goal) -> str:
    """Name given to a new contribution toward goal."""
    return f"{GOAL_PREFIX}{goal.name}"


def is_goal_contribution(
    expense: OneTimeExpense,
    goals: Iterable[Goal],
    matcher: ContributionMatcher = DEFAULT_MATCHER,
) -> bool:
    """True when expense contributes to at least one of goals."""
    return any(matcher.matches(expense, goal) for goal in goals)


def calculate_goals_spent_in_period(
    expenses: Iterable[OneTimeExpense],
    goals: Sequence[Goal],
    start: datetime,
    end: datetime,
    matcher: ContributionMatcher = DEFAULT_MATCHER,
) -> Decimal:
    """Sum goal contributions dated within [start, end], bounds included.

    Args:
        expenses: All one-time expenses
        goals: All goals, active or not
        start: Interval start
        end: Interval end
        matcher: Contribution matching rule

    Returns:
        Total amount contributed to any goal in the interval
    """
    contributions = [e for e in expenses if is_goal_contribution(e, goals, matcher)]
    total = ZERO
    for expense in expenses_in_period(contributions, start, end):
        total += expense.amount
    return total


def related_expenses(name: str, expenses: Iterable[OneTimeExpense]) -> List[OneTimeExpense]:
    """Expenses whose names and the given name contain one another, ignoring case.

    This is the looser rule used when showing a single goal or custom
    recurring expense, not the rule used for period totals.
    """
    needle = name.lower()
    return [
        e for e in expenses
        if needle in e.name.lower() or e.name.lower() in needle
    ]


def total_contributed(expenses: Iterable[OneTimeExpense]) -> Decimal:
    total = ZERO
    for expense in expenses:
        total += expense.amount
    return total


def progress_percentage(total: Decimal, target: Decimal) -> Decimal:
    """Share of target reached, as a percentage capped at 100."""
    if target <= 0:
        return ZERO
    return min(total / target * 100, Decimal("100"))


def next_due_date(
    item: Union[Goal, RecurringExpense],
    related: Sequence[OneTimeExpense],
) -> Optional[datetime]:
    """Date of the next contribution or payment for a custom cadence.

    Counts one full cadence from the latest related expense, or from the
    item's start date when nothing has been recorded yet.
    """
    if not has_custom_interval(item):
        return None
    step = timedelta(days=item.custom_number * unit_days(item.custom_unit))
    if related:
        last = max(related, key=lambda e: e.date)
        return last.date + step
    return item.start_date + step


@dataclass(frozen=True)
class GoalProgress:
    """Progress of a goal or custom recurring expense toward its amount."""
    related: List[OneTimeExpense]
    total: Decimal
    target: Decimal
    percentage: Decimal
    next_due: Optional[datetime]


def goal_progress(goal: Goal, expenses: Iterable[OneTimeExpense]) -> GoalProgress:
    """Progress of goal, built from every expense related to it by name."""
    related = related_expenses(goal.name, expenses)
    total = total_contributed(related)
    return GoalProgress(
        related=related,
        total=total,
        target=goal.target_amount,
        percentage=progress_percentage(total, goal.target_amount),
        next_due=next_due_date(goal, related),
    )


def recurring_progress(expense: RecurringExpense, expenses: Iterable[OneTimeExpense]) -> GoalProgress:
    """Payments recorded against a custom recurring expense."""
    related = related_expenses(expense.name, expenses)
    total = total_contributed(related)
    return GoalProgress(
        related=related,
        total=total,
        target=expense.amount,
        percentage=progress_percentage(total, expense.amount),
        next_due=next_due_date(expense, related),
    )
