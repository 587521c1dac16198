"""
Pay period resolution.

Picks the active pay period from the most recent paycheck that is not
dated in the future.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from true_budget.storage.models import Paycheck, PaycheckFrequency

logger = logging.getLogger(__name__)

# Period lengths in days. Semimonthly and monthly are approximations.
PAY_PERIOD_DAYS = {
    PaycheckFrequency.WEEKLY: 7,
    PaycheckFrequency.BIWEEKLY: 14,
    PaycheckFrequency.SEMIMONTHLY: 15,
    PaycheckFrequency.MONTHLY: 30,
}
DEFAULT_PERIOD_DAYS = 14


@dataclass(frozen=True)
class PayPeriod:
    """The interval funded by one paycheck."""
    start: datetime
    end: datetime
    amount: Decimal


def end_of_day(moment: datetime) -> datetime:
    """Return the last representable instant of moment's calendar day."""
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def latest_paycheck(paychecks: Sequence[Paycheck]) -> Optional[Paycheck]:
    """Return the paycheck with the greatest date, first one wins on ties."""
    if not paychecks:
        return None
    return max(paychecks, key=lambda p: p.date)


def period_length(frequency: PaycheckFrequency) -> timedelta:
    """Fixed period length for a paycheck frequency (14 days if unknown)."""
    return timedelta(days=PAY_PERIOD_DAYS.get(frequency, DEFAULT_PERIOD_DAYS))


def get_current_paycheck_period(
    paychecks: Sequence[Paycheck],
    now: datetime,
) -> Optional[PayPeriod]:
    """Resolve the current pay period.

    Paychecks dated after the end of ``now``'s day are ignored. The most
    recent remaining paycheck anchors the period.

    Args:
        paychecks: All known paychecks, in any order
        now: Current moment

    Returns:
        PayPeriod starting at the anchor's date, or None when no paycheck
        is dated today or earlier
    """
    cutoff = end_of_day(now)
    eligible = [p for p in paychecks if p.date <= cutoff]
    anchor = latest_paycheck(eligible)
    if anchor is None:
        logger.debug("No eligible paycheck among %d on or before %s", len(paychecks), cutoff)
        return None

    start = anchor.date
    end = start + period_length(anchor.frequency)
    logger.debug("Resolved pay period %s -> %s from paycheck %s", start, end, anchor.id)
    return PayPeriod(start=start, end=end, amount=anchor.amount)
