"""
Data models for storage layer.

Defines the budget records that are persisted and fed to the engine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class PaycheckFrequency(Enum):
    """How often a paycheck arrives."""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"


class Frequency(Enum):
    """Cadence of a recurring expense or a savings goal."""
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class CustomUnit(Enum):
    """Unit of a custom cadence ("amount per N units")."""
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


@dataclass(frozen=True)
class Paycheck:
    """A single paycheck. Its date anchors a pay period."""
    id: str
    amount: Decimal
    date: datetime
    frequency: PaycheckFrequency
    name: Optional[str] = None


@dataclass(frozen=True)
class RecurringExpense:
    """A cost that repeats on a fixed or custom cadence.

    custom_number and custom_unit are both set when frequency is CUSTOM
    and both None otherwise.
    """
    id: str
    name: str
    amount: Decimal
    frequency: Frequency
    start_date: datetime
    category: str
    is_active: bool = True
    custom_number: Optional[int] = None
    custom_unit: Optional[CustomUnit] = None


@dataclass(frozen=True)
class Goal:
    """A savings target.

    Contributions are OneTimeExpense records named "Goal: <goal name>".
    """
    id: str
    name: str
    target_amount: Decimal
    frequency: Frequency
    start_date: datetime
    category: str
    is_active: bool = True
    custom_number: Optional[int] = None
    custom_unit: Optional[CustomUnit] = None


@dataclass(frozen=True)
class OneTimeExpense:
    """A single purchase, or a goal contribution when its name matches a goal."""
    id: str
    name: str
    amount: Decimal
    date: datetime
    category: str


DEFAULT_CATEGORIES = ["Food", "Transportation", "Entertainment", "Utilities", "Other"]

DEFAULT_GOAL_CATEGORIES = [
    "Emergency Fund",
    "Vacation",
    "Car Purchase",
    "Home Down Payment",
    "Investments",
    "Education",
    "Retirement",
    "Other",
]


@dataclass(frozen=True)
class AppSettings:
    """User preferences. Not consumed by the budget engine."""
    default_paycheck_frequency: PaycheckFrequency = PaycheckFrequency.BIWEEKLY
    categories: List[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    goal_categories: List[str] = field(default_factory=lambda: list(DEFAULT_GOAL_CATEGORIES))
