"""
Record serialization for the key-value store.

Datetimes are stored as naive ISO 8601 strings and amounts as decimal
strings so that values read back compare equal to the values written.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Type

from .models import (
    DEFAULT_GOAL_CATEGORIES,
    AppSettings,
    CustomUnit,
    Frequency,
    Goal,
    OneTimeExpense,
    Paycheck,
    PaycheckFrequency,
    RecurringExpense,
)

Record = Dict[str, Any]


def _custom_unit(value: Optional[str]) -> Optional[CustomUnit]:
    return CustomUnit(value) if value is not None else None


def _paycheck_to_record(p: Paycheck) -> Record:
    return {
        "id": p.id,
        "amount": str(p.amount),
        "date": p.date.isoformat(),
        "frequency": p.frequency.value,
        "name": p.name,
    }


def _paycheck_from_record(r: Record) -> Paycheck:
    return Paycheck(
        id=r["id"],
        amount=Decimal(r["amount"]),
        date=datetime.fromisoformat(r["date"]),
        frequency=PaycheckFrequency(r["frequency"]),
        name=r.get("name"),
    )


def _recurring_to_record(e: RecurringExpense) -> Record:
    return {
        "id": e.id,
        "name": e.name,
        "amount": str(e.amount),
        "frequency": e.frequency.value,
        "customNumber": e.custom_number,
        "customUnit": e.custom_unit.value if e.custom_unit else None,
        "startDate": e.start_date.isoformat(),
        "category": e.category,
        "isActive": e.is_active,
    }


def _recurring_from_record(r: Record) -> RecurringExpense:
    return RecurringExpense(
        id=r["id"],
        name=r["name"],
        amount=Decimal(r["amount"]),
        frequency=Frequency(r["frequency"]),
        start_date=datetime.fromisoformat(r["startDate"]),
        category=r["category"],
        is_active=r["isActive"],
        custom_number=r.get("customNumber"),
        custom_unit=_custom_unit(r.get("customUnit")),
    )


def _goal_to_record(g: Goal) -> Record:
    return {
        "id": g.id,
        "name": g.name,
        "targetAmount": str(g.target_amount),
        "frequency": g.frequency.value,
        "customNumber": g.custom_number,
        "customUnit": g.custom_unit.value if g.custom_unit else None,
        "startDate": g.start_date.isoformat(),
        "category": g.category,
        "isActive": g.is_active,
    }


def _goal_from_record(r: Record) -> Goal:
    return Goal(
        id=r["id"],
        name=r["name"],
        target_amount=Decimal(r["targetAmount"]),
        frequency=Frequency(r["frequency"]),
        start_date=datetime.fromisoformat(r["startDate"]),
        category=r["category"],
        is_active=r["isActive"],
        custom_number=r.get("customNumber"),
        custom_unit=_custom_unit(r.get("customUnit")),
    )


def _expense_to_record(e: OneTimeExpense) -> Record:
    return {
        "id": e.id,
        "name": e.name,
        "amount": str(e.amount),
        "date": e.date.isoformat(),
        "category": e.category,
    }


def _expense_from_record(r: Record) -> OneTimeExpense:
    return OneTimeExpense(
        id=r["id"],
        name=r["name"],
        amount=Decimal(r["amount"]),
        date=datetime.fromisoformat(r["date"]),
        category=r["category"],
    )


def _settings_to_record(s: AppSettings) -> Record:
    return {
        "defaultPaycheckFrequency": s.default_paycheck_frequency.value,
        "categories": list(s.categories),
        "goalCategories": list(s.goal_categories),
    }


def _settings_from_record(r: Record) -> AppSettings:
    return AppSettings(
        default_paycheck_frequency=PaycheckFrequency(r["defaultPaycheckFrequency"]),
        categories=list(r["categories"]),
        goal_categories=list(r.get("goalCategories", DEFAULT_GOAL_CATEGORIES)),
    )


_ENCODERS: Dict[type, Callable[[Any], Record]] = {
    Paycheck: _paycheck_to_record,
    RecurringExpense: _recurring_to_record,
    Goal: _goal_to_record,
    OneTimeExpense: _expense_to_record,
    AppSettings: _settings_to_record,
}

_DECODERS: Dict[type, Callable[[Record], Any]] = {
    Paycheck: _paycheck_from_record,
    RecurringExpense: _recurring_from_record,
    Goal: _goal_from_record,
    OneTimeExpense: _expense_from_record,
    AppSettings: _settings_from_record,
}


def to_record(obj: Any) -> Record:
    """Convert a model instance into a JSON-compatible dict.

    Raises:
        TypeError: If obj is not a known model
    """
    encoder = _ENCODERS.get(type(obj))
    if encoder is None:
        raise TypeError(f"Cannot serialize {type(obj).__name__}")
    return encoder(obj)


def from_record(model: Type, record: Record) -> Any:
    """Rebuild a model instance of type model from its dict form.

    Raises:
        TypeError: If model is not a known model
        KeyError, ValueError: If the record is missing fields or holds
            invalid values
    """
    decoder = _DECODERS.get(model)
    if decoder is None:
        raise TypeError(f"Cannot deserialize {model.__name__}")
    return decoder(record)
