"""
Repository pattern for data access.

Stores each collection as one JSON document in a SQLite key-value table.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Type

from .db import DEFAULT_DB_PATH, get_connection
from .models import AppSettings, Goal, OneTimeExpense, Paycheck, RecurringExpense
from .serialization import from_record, to_record

logger = logging.getLogger(__name__)

# Storage keys
PAYCHECKS_KEY = "paychecks"
RECURRING_EXPENSES_KEY = "recurringExpenses"
ONETIME_EXPENSES_KEY = "onetimeExpenses"
GOALS_KEY = "goals"
SETTINGS_KEY = "settings"


class StorageError(ValueError):
    """Raised when a stored document cannot be decoded."""


@dataclass(frozen=True)
class BudgetSnapshot:
    """Every collection the budget engine reads, loaded together."""
    paychecks: List[Paycheck]
    recurring_expenses: List[RecurringExpense]
    one_time_expenses: List[OneTimeExpense]
    goals: List[Goal]


def initialize_schema(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the kv_store table if it doesn't exist.

    Args:
        db_path: Path to SQLite database file
    """
    conn = get_connection(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        conn.commit()
    finally:
        conn.close()


class BudgetRepository:
    """Repository for loading and saving budget collections.

    Each key holds the whole collection; saving replaces it.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize the repository with a database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def _read(self, key: str) -> Optional[Any]:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored value for '{key}' is not valid JSON: {e}")

    def _write(self, key: str, payload: Any) -> None:
        conn = get_connection(self.db_path)
        try:
            conn.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (key, json.dumps(payload), datetime.now().isoformat()))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def load(self, key: str, model: Type) -> List[Any]:
        """Load the collection stored under key.

        Args:
            key: Storage key
            model: Model class of the stored items

        Returns:
            The stored items, or an empty list when nothing is stored

        Raises:
            StorageError: If the stored document is malformed
        """
        payload = self._read(key)
        if payload is None:
            logger.debug("No data stored under '%s'", key)
            return []
        if not isinstance(payload, list):
            raise StorageError(f"Stored value for '{key}' must be a list")
        try:
            items = [from_record(model, record) for record in payload]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Invalid {model.__name__} record under '{key}': {e}")
        logger.debug("Loaded %d item(s) from '%s'", len(items), key)
        return items

    def save(self, key: str, items: List[Any]) -> None:
        """Replace the collection stored under key."""
        self._write(key, [to_record(item) for item in items])
        logger.debug("Saved %d item(s) to '%s'", len(items), key)

    def load_paychecks(self) -> List[Paycheck]:
        return self.load(PAYCHECKS_KEY, Paycheck)

    def save_paychecks(self, paychecks: List[Paycheck]) -> None:
        self.save(PAYCHECKS_KEY, paychecks)

    def load_recurring_expenses(self) -> List[RecurringExpense]:
        return self.load(RECURRING_EXPENSES_KEY, RecurringExpense)

    def save_recurring_expenses(self, expenses: List[RecurringExpense]) -> None:
        self.save(RECURRING_EXPENSES_KEY, expenses)

    def load_one_time_expenses(self) -> List[OneTimeExpense]:
        return self.load(ONETIME_EXPENSES_KEY, OneTimeExpense)

    def save_one_time_expenses(self, expenses: List[OneTimeExpense]) -> None:
        self.save(ONETIME_EXPENSES_KEY, expenses)

    def load_goals(self) -> List[Goal]:
        return self.load(GOALS_KEY, Goal)

    def save_goals(self, goals: List[Goal]) -> None:
        self.save(GOALS_KEY, goals)

    def load_settings(self) -> AppSettings:
        """Load settings, falling back to the defaults when none are stored."""
        payload = self._read(SETTINGS_KEY)
        if payload is None:
            return AppSettings()
        try:
            return from_record(AppSettings, payload)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Invalid settings record: {e}")

    def has_settings(self) -> bool:
        return self._read(SETTINGS_KEY) is not None

    def save_settings(self, settings: AppSettings) -> None:
        self._write(SETTINGS_KEY, to_record(settings))

    def load_snapshot(self) -> BudgetSnapshot:
        """Load the four collections consumed by the budget engine."""
        return BudgetSnapshot(
            paychecks=self.load_paychecks(),
            recurring_expenses=self.load_recurring_expenses(),
            one_time_expenses=self.load_one_time_expenses(),
            goals=self.load_goals(),
        )


# Global repository instance
_default_repository: Optional[BudgetRepository] = None


def get_repository(db_path: str = DEFAULT_DB_PATH) -> BudgetRepository:
    """Get a repository instance.

    Returns the shared instance, creating it on first use or when a
    different database path is requested.

    Args:
        db_path: Path to SQLite database file

    Returns:
        An instance of BudgetRepository
    """
    global _default_repository
    if _default_repository is None or _default_repository.db_path != db_path:
        _default_repository = BudgetRepository(db_path)
    return _default_repository
