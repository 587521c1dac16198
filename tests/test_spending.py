"""
Unit tests for one-time spending.

Tests the period spend total and the expense list windows.
"""

from datetime import datetime
from decimal import Decimal

from true_budget.core.spending import (
    ExpenseWindow,
    calculate_spent_in_period,
    expenses_in_period,
    filter_expenses,
)
from true_budget.storage.models import OneTimeExpense, Paycheck, PaycheckFrequency

# A Wednesday
NOW = datetime(2024, 3, 13, 15, 0)


def make_expense(id, date, amount="10") -> OneTimeExpense:
    return OneTimeExpense(id=id, name=f"Expense {id}", amount=Decimal(amount), date=date, category="Food")


def ids(expenses):
    return [e.id for e in expenses]


class TestSpentInPeriod:
    """Test calculate_spent_in_period."""

    def test_sums_expenses_in_range(self):
        expenses = [
            make_expense("a", datetime(2024, 3, 2), "12.50"),
            make_expense("b", datetime(2024, 3, 9), "7.25"),
            make_expense("c", datetime(2024, 4, 1), "100"),
        ]
        total = calculate_spent_in_period(expenses, datetime(2024, 3, 1), datetime(2024, 3, 15))
        assert total == Decimal("19.75")

    def test_bounds_included(self):
        start, end = datetime(2024, 3, 1), datetime(2024, 3, 15)
        expenses = [make_expense("a", start, "1"), make_expense("b", end, "2")]
        assert calculate_spent_in_period(expenses, start, end) == Decimal("3")

    def test_no_expenses(self):
        assert calculate_spent_in_period([], datetime(2024, 3, 1), datetime(2024, 3, 15)) == Decimal("0")

    def test_expenses_in_period_keeps_order(self):
        expenses = [make_expense("b", datetime(2024, 3, 9)), make_expense("a", datetime(2024, 3, 2))]
        assert ids(expenses_in_period(expenses, datetime(2024, 3, 1), datetime(2024, 3, 15))) == ["b", "a"]


class TestFilterExpenses:
    """Test the expense list windows."""

    def setup_method(self):
        self.expenses = [
            make_expense("feb", datetime(2024, 2, 28, 10, 0)),
            make_expense("month_start", datetime(2024, 3, 1, 0, 0)),
            make_expense("sat_before", datetime(2024, 3, 9, 23, 0)),
            make_expense("sunday", datetime(2024, 3, 10, 0, 0)),
            make_expense("today", datetime(2024, 3, 13, 8, 0)),
            make_expense("saturday", datetime(2024, 3, 16, 23, 59)),
            make_expense("month_end", datetime(2024, 3, 31, 23, 59)),
            make_expense("april", datetime(2024, 4, 1, 0, 0)),
        ]

    def test_all_sorted_newest_first(self):
        result = filter_expenses(self.expenses, [], ExpenseWindow.ALL, NOW)
        assert ids(result) == [
            "april", "month_end", "saturday", "today", "sunday", "sat_before", "month_start", "feb",
        ]

    def test_day(self):
        result = filter_expenses(self.expenses, [], ExpenseWindow.DAY, NOW)
        assert ids(result) == ["today"]

    def test_week_runs_sunday_to_saturday(self):
        result = filter_expenses(self.expenses, [], ExpenseWindow.WEEK, NOW)
        assert ids(result) == ["saturday", "today", "sunday"]

    def test_week_starting_today_on_sunday(self):
        sunday = datetime(2024, 3, 10, 9, 0)
        result = filter_expenses(self.expenses, [], ExpenseWindow.WEEK, sunday)
        assert ids(result) == ["saturday", "today", "sunday"]

    def test_month(self):
        result = filter_expenses(self.expenses, [], ExpenseWindow.MONTH, NOW)
        assert ids(result) == ["month_end", "saturday", "today", "sunday", "sat_before", "month_start"]

    def test_month_in_december(self):
        expenses = [
            make_expense("dec", datetime(2024, 12, 31, 12, 0)),
            make_expense("jan", datetime(2025, 1, 1, 0, 0)),
        ]
        result = filter_expenses(expenses, [], ExpenseWindow.MONTH, datetime(2024, 12, 5))
        assert ids(result) == ["dec"]

    def test_paycheck_window(self):
        paychecks = [
            Paycheck("p1", Decimal("1000"), datetime(2024, 2, 20), PaycheckFrequency.BIWEEKLY),
            Paycheck("p2", Decimal("1000"), datetime(2024, 3, 9), PaycheckFrequency.WEEKLY),
        ]
        result = filter_expenses(self.expenses, paychecks, ExpenseWindow.PAYCHECK, NOW)
        assert ids(result) == ["today", "sunday", "sat_before"]

    def test_paycheck_window_uses_future_paychecks(self):
        paychecks = [
            Paycheck("p1", Decimal("1000"), datetime(2024, 3, 1), PaycheckFrequency.MONTHLY),
            Paycheck("p2", Decimal("1000"), datetime(2024, 3, 31), PaycheckFrequency.WEEKLY),
        ]
        result = filter_expenses(self.expenses, paychecks, ExpenseWindow.PAYCHECK, NOW)
        assert ids(result) == ["april", "month_end"]

    def test_paycheck_window_without_paychecks_shows_all(self):
        result = filter_expenses(self.expenses, [], ExpenseWindow.PAYCHECK, NOW)
        assert len(result) == len(self.expenses)
