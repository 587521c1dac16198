# true_budget/demo/seed_demo_data.py

from datetime import datetime, timedelta
from decimal import Decimal

from true_budget.storage.models import (
    CustomUnit,
    Frequency,
    Goal,
    OneTimeExpense,
    Paycheck,
    PaycheckFrequency,
    RecurringExpense,
)
from true_budget.storage.repository import BudgetRepository, initialize_schema


def seed(db_path: str = "true_budget.db") -> None:
    """Fill db_path with a small, realistic budget."""
    initialize_schema(db_path)
    repository = BudgetRepository(db_path)
    today = datetime.now().replace(hour=9, minute=0, second=0, microsecond=0)
    payday = today - timedelta(days=3)

    repository.save_paychecks([
        Paycheck("demo-pay-1", Decimal("2100.00"), payday - timedelta(days=14), PaycheckFrequency.BIWEEKLY),
        Paycheck("demo-pay-2", Decimal("2100.00"), payday, PaycheckFrequency.BIWEEKLY, "Salary"),
    ])
    repository.save_recurring_expenses([
        RecurringExpense("demo-rent", "Rent", Decimal("1400.00"), Frequency.MONTHLY,
                         payday - timedelta(days=90), "Utilities"),
        RecurringExpense("demo-gym", "Gym", Decimal("12.50"), Frequency.WEEKLY,
                         payday - timedelta(days=60), "Entertainment"),
        RecurringExpense("demo-car", "Car insurance", Decimal("600.00"), Frequency.CUSTOM,
                         payday - timedelta(days=30), "Transportation",
                         custom_number=6, custom_unit=CustomUnit.MONTHS),
    ])
    repository.save_goals([
        Goal("demo-goal-1", "Vacation", Decimal("1500.00"), Frequency.MONTHLY,
             payday - timedelta(days=30), "Vacation"),
    ])
    repository.save_one_time_expenses([
        OneTimeExpense("demo-exp-1", "Groceries", Decimal("84.20"), payday + timedelta(days=1), "Food"),
        OneTimeExpense("demo-exp-2", "Goal: Vacation", Decimal("100.00"), payday + timedelta(days=2), "Vacation"),
    ])


if __name__ == "__main__":
    seed()
    print("Demo budget data inserted")
