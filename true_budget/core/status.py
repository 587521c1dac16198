"""
Budget status for the current pay period.

Combines period resolution, recurring proration, goal contributions and
one-time spending into a single BudgetPeriod.

Known quirks kept for parity with existing budgets:
1. paycheck_frequency comes from the latest paycheck overall, future ones
   included, while the period itself ignores future paychecks
2. goal contributions are counted in both goals_total and spent
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Sequence

from .contributions import DEFAULT_MATCHER, ContributionMatcher, calculate_goals_spent_in_period
from .period import get_current_paycheck_period, latest_paycheck
from .proration import calculate_recurring_for_period
from .spending import calculate_spent_in_period, expenses_in_period
from true_budget.storage.models import (
    Goal,
    OneTimeExpense,
    Paycheck,
    PaycheckFrequency,
    RecurringExpense,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class BudgetPeriod:
    """Computed budget figures for the current pay period.

    The totals and the display lists use different filters: expenses are
    limited to the period, recurring expenses and goals are every active
    one regardless of dates.
    """
    start_date: datetime
    end_date: datetime
    total_budget: Decimal
    spent: Decimal
    recurring_total: Decimal
    goals_total: Decimal
    remaining: Decimal
    expenses: List[OneTimeExpense]
    recurring_expenses: List[RecurringExpense]
    goals: List[Goal]
    paycheck_frequency: PaycheckFrequency


def get_budget_status(
    paychecks: Sequence[Paycheck],
    recurring: Sequence[RecurringExpense],
    expenses: Sequence[OneTimeExpense],
    goals: Sequence[Goal],
    clock: Clock = datetime.now,
    matcher: ContributionMatcher = DEFAULT_MATCHER,
) -> Optional[BudgetPeriod]:
    """Compute the budget status of the current pay period.

    Args:
        paychecks: All paychecks
        recurring: All recurring expenses, active or not
        expenses: All one-time expenses, goal contributions included
        goals: All goals, active or not
        clock: Returns the current moment
        matcher: Goal contribution matching rule

    Returns:
        BudgetPeriod, or None when no paycheck is dated today or earlier
    """
    period = get_current_paycheck_period(paychecks, clock())
    if period is None:
        return None

    paycheck_frequency = latest_paycheck(paychecks).frequency

    recurring_total = calculate_recurring_for_period(recurring, period.start, period.end)
    goals_total = calculate_goals_spent_in_period(expenses, goals, period.start, period.end, matcher)
    spent = calculate_spent_in_period(expenses, period.start, period.end)
    remaining = period.amount - recurring_total - goals_total - spent

    logger.debug(
        "Budget %s: recurring=%s goals=%s spent=%s remaining=%s",
        period.amount, recurring_total, goals_total, spent, remaining,
    )

    return BudgetPeriod(
        start_date=period.start,
        end_date=period.end,
        total_budget=period.amount,
        spent=spent,
        recurring_total=recurring_total,
        goals_total=goals_total,
        remaining=remaining,
        expenses=expenses_in_period(expenses, period.start, period.end),
        recurring_expenses=[r for r in recurring if r.is_active],
        goals=[g for g in goals if g.is_active],
        paycheck_frequency=paycheck_frequency,
    )
