"""
Unit tests for recurring cost proration.

Tests the whole-cycle, yearly and custom proration rules.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from true_budget.core.proration import (
    calculate_period_cost,
    calculate_recurring_for_period,
    describe_cadence,
    per_paycheck_amount,
    period_days,
)
from true_budget.storage.models import (
    CustomUnit,
    Frequency,
    Goal,
    PaycheckFrequency,
    RecurringExpense,
)

START = datetime(2024, 3, 1)


def make_expense(
    frequency,
    amount="70",
    start_date=datetime(2024, 1, 1),
    is_active=True,
    custom_number=None,
    custom_unit=None,
) -> RecurringExpense:
    return RecurringExpense(
        id="r1",
        name="Test",
        amount=Decimal(amount),
        frequency=frequency,
        start_date=start_date,
        category="Utilities",
        is_active=is_active,
        custom_number=custom_number,
        custom_unit=custom_unit,
    )


def days_after(days, hours=0):
    return START + timedelta(days=days, hours=hours)


class TestPeriodDays:
    """Test interval length rounding."""

    def test_whole_days(self):
        assert period_days(START, days_after(14)) == 14

    def test_partial_day_rounds_up(self):
        assert period_days(START, days_after(2, hours=1)) == 3

    def test_empty_interval(self):
        assert period_days(START, START) == 0


class TestWholeCycleFrequencies:
    """Test daily, weekly, biweekly and monthly proration."""

    def test_weekly_ten_days_charges_two_weeks(self):
        cost = calculate_period_cost(make_expense(Frequency.WEEKLY), START, days_after(10))
        assert cost == Decimal("140")

    def test_weekly_six_days_charges_full_week(self):
        cost = calculate_period_cost(make_expense(Frequency.WEEKLY), START, days_after(6))
        assert cost == Decimal("70")

    def test_daily(self):
        expense = make_expense(Frequency.DAILY, amount="5")
        assert calculate_period_cost(expense, START, days_after(2, hours=1)) == Decimal("15")

    def test_biweekly(self):
        expense = make_expense(Frequency.BIWEEKLY, amount="100")
        assert calculate_period_cost(expense, START, days_after(14)) == Decimal("100")
        assert calculate_period_cost(expense, START, days_after(15)) == Decimal("200")

    def test_monthly(self):
        expense = make_expense(Frequency.MONTHLY, amount="1400")
        assert calculate_period_cost(expense, START, days_after(14)) == Decimal("1400")
        assert calculate_period_cost(expense, START, days_after(30)) == Decimal("1400")
        assert calculate_period_cost(expense, START, days_after(31)) == Decimal("2800")


class TestYearly:
    """Test the yearly cutoff."""

    def test_charged_after_full_year(self):
        expense = make_expense(Frequency.YEARLY, amount="1200")
        assert calculate_period_cost(expense, START, days_after(400)) == Decimal("1200")

    def test_not_charged_within_year(self):
        expense = make_expense(Frequency.YEARLY, amount="1200")
        assert calculate_period_cost(expense, START, days_after(300)) == Decimal("0")

    def test_exactly_365_days_not_charged(self):
        expense = make_expense(Frequency.YEARLY, amount="1200")
        assert calculate_period_cost(expense, START, days_after(365)) == Decimal("0")


class TestCustom:
    """Test continuous custom proration."""

    def test_months(self):
        expense = make_expense(Frequency.CUSTOM, amount="600", custom_number=10, custom_unit=CustomUnit.MONTHS)
        assert calculate_period_cost(expense, START, days_after(30)) == Decimal("60")

    def test_weeks_prorated_continuously(self):
        expense = make_expense(Frequency.CUSTOM, amount="70", custom_number=1, custom_unit=CustomUnit.WEEKS)
        assert calculate_period_cost(expense, START, days_after(14)) == Decimal("140")
        assert calculate_period_cost(expense, START, days_after(3)) == Decimal("30")

    def test_days(self):
        expense = make_expense(Frequency.CUSTOM, amount="30", custom_number=3, custom_unit=CustomUnit.DAYS)
        assert calculate_period_cost(expense, START, days_after(14)) == Decimal("140")

    def test_years(self):
        expense = make_expense(Frequency.CUSTOM, amount="730", custom_number=1, custom_unit=CustomUnit.YEARS)
        assert calculate_period_cost(expense, START, days_after(5)) == Decimal("10")

    @pytest.mark.parametrize("number,unit", [
        (None, CustomUnit.MONTHS),
        (0, CustomUnit.MONTHS),
        (3, None),
        (None, None),
    ])
    def test_incomplete_custom_interval_costs_nothing(self, number, unit):
        expense = make_expense(Frequency.CUSTOM, amount="600", custom_number=number, custom_unit=unit)
        assert calculate_period_cost(expense, START, days_after(30)) == Decimal("0")


class TestEligibility:
    """Test inactive and not-yet-started expenses."""

    def test_inactive_costs_nothing(self):
        expense = make_expense(Frequency.DAILY, is_active=False)
        assert calculate_period_cost(expense, START, days_after(10)) == Decimal("0")

    def test_starting_after_interval_costs_nothing(self):
        expense = make_expense(Frequency.DAILY, start_date=days_after(11))
        assert calculate_period_cost(expense, START, days_after(10)) == Decimal("0")

    def test_starting_on_interval_end_is_charged(self):
        expense = make_expense(Frequency.WEEKLY, start_date=days_after(10))
        assert calculate_period_cost(expense, START, days_after(10)) == Decimal("140")

    def test_starting_mid_interval_is_charged_in_full(self):
        expense = make_expense(Frequency.WEEKLY, start_date=days_after(5))
        assert calculate_period_cost(expense, START, days_after(14)) == Decimal("140")

    def test_unknown_frequency_costs_nothing(self):
        expense = make_expense("fortnightly")
        assert calculate_period_cost(expense, START, days_after(14)) == Decimal("0")


class TestRecurringForPeriod:
    """Test summing recurring costs."""

    def test_sums_all_expenses(self):
        expenses = [
            make_expense(Frequency.WEEKLY, amount="70"),
            make_expense(Frequency.MONTHLY, amount="1000"),
            make_expense(Frequency.DAILY, amount="3", is_active=False),
        ]
        assert calculate_recurring_for_period(expenses, START, days_after(14)) == Decimal("1140")

    def test_empty(self):
        assert calculate_recurring_for_period([], START, days_after(14)) == Decimal("0")


class TestPerPaycheckAmount:
    """Test converting custom cadences to the paycheck cadence."""

    def test_monthly_paycheck_months(self):
        amount = per_paycheck_amount(Decimal("600"), 10, CustomUnit.MONTHS, PaycheckFrequency.MONTHLY)
        assert amount == Decimal("60")

    def test_biweekly_paycheck_days(self):
        amount = per_paycheck_amount(Decimal("10"), 1, CustomUnit.DAYS, PaycheckFrequency.BIWEEKLY)
        assert amount == Decimal("140")

    def test_weekly_paycheck_years(self):
        amount = per_paycheck_amount(Decimal("520"), 1, CustomUnit.YEARS, PaycheckFrequency.WEEKLY)
        assert amount == Decimal("10")

    def test_semimonthly_has_no_conversion(self):
        assert per_paycheck_amount(Decimal("600"), 10, CustomUnit.MONTHS, PaycheckFrequency.SEMIMONTHLY) is None

    def test_incomplete_interval(self):
        assert per_paycheck_amount(Decimal("600"), None, CustomUnit.MONTHS, PaycheckFrequency.MONTHLY) is None


class TestDescribeCadence:
    """Test display strings for recurring expenses and goals."""

    def test_fixed_frequency(self):
        expense = make_expense(Frequency.WEEKLY, amount="50")
        assert describe_cadence(expense, PaycheckFrequency.BIWEEKLY) == "$50.00/weekly"

    def test_custom_converted(self):
        expense = make_expense(Frequency.CUSTOM, amount="600", custom_number=10, custom_unit=CustomUnit.MONTHS)
        assert describe_cadence(expense, PaycheckFrequency.MONTHLY) == "$60.00/monthly"

    def test_custom_without_conversion(self):
        expense = make_expense(Frequency.CUSTOM, amount="600", custom_number=10, custom_unit=CustomUnit.MONTHS)
        assert describe_cadence(expense, PaycheckFrequency.SEMIMONTHLY) == "$600.00/10 months"

    def test_goal_uses_target_amount(self):
        goal = Goal(
            id="g1",
            name="Vacation",
            target_amount=Decimal("1500"),
            frequency=Frequency.MONTHLY,
            start_date=START,
            category="Vacation",
        )
        assert describe_cadence(goal, PaycheckFrequency.BIWEEKLY) == "$1,500.00/monthly"
