"""Expense model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from tenancy_ledger.models.enums import ExpenseCategory


@dataclass
class Expense:
    """Landlord expense, optionally scoped to one property."""

    expense_id: str
    landlord_id: str
    category: ExpenseCategory
    amount: Decimal
    spent_on: date
    description: str = ""
    property_id: str | None = None
    created_at: datetime | None = None
