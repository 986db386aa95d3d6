"""Landlord expenses, used only for profit reporting."""

import logging
from datetime import date
from typing import Any

from tenancy_ledger.exceptions import ReferentialIntegrityError
from tenancy_ledger.ledger.activity import ActivityRecorder
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.ledger.validation import to_amount, to_date, to_enum
from tenancy_ledger.models import Expense, ExpenseCategory, Landlord, Property, new_id, now
from tenancy_ledger.months import month_key_of, validate_month_key

logger = logging.getLogger(__name__)


class ExpenseBook:
    def __init__(self, repo: Repository, activity: ActivityRecorder, currency: str = "BDT") -> None:
        self.repo = repo
        self.activity = activity
        self.currency = currency

    def add_expense(
        self,
        landlord_id: str,
        category: ExpenseCategory | str,
        amount: Any,
        description: str = "",
        spent_on: date | str | None = None,
        property_id: str | None = None,
    ) -> Expense:
        kind = to_enum(ExpenseCategory, category, "category")
        value = to_amount(amount, "amount")
        day = to_date(spent_on, "spent_on") or date.today()
        self.repo.load(Landlord, landlord_id)
        if property_id:
            prop = self.repo.get(Property, property_id)
            if prop is None or prop.record.landlord_id != landlord_id:
                raise ReferentialIntegrityError(f"Property {property_id} not found for landlord {landlord_id}")

        expense = Expense(
            expense_id=new_id(),
            landlord_id=landlord_id,
            category=kind,
            amount=value,
            spent_on=day,
            description=description or "",
            property_id=property_id,
            created_at=now(),
        )
        self.repo.commit([self.repo.put(expense)])

        logger.info(
            "Expense %s: %s %s", expense.expense_id, kind.value, value,
            extra={"landlord_id": landlord_id, "event_type": "expense.added"},
        )
        self.activity.record(
            "expense",
            landlord_id,
            f"{value} {self.currency} {kind.value}",
            event_type="expense.added",
            subject=expense.expense_id,
            data={"category": kind.value, "amount": str(value), "spent_on": day.isoformat()},
            landlord_id=landlord_id,
        )
        return expense

    def delete_expense(self, expense_id: str) -> Expense:
        loaded = self.repo.load(Expense, expense_id)
        expense = loaded.record
        self.repo.commit([self.repo.delete(expense, loaded.version)])

        logger.info(
            "Deleted expense %s", expense_id,
            extra={"landlord_id": expense.landlord_id, "event_type": "expense.deleted"},
        )
        self.activity.record(
            "expense_delete",
            expense.landlord_id,
            f"Expense {expense_id} deleted",
            event_type="expense.deleted",
            subject=expense_id,
            landlord_id=expense.landlord_id,
        )
        return expense

    def expenses_of(self, landlord_id: str, month_key: str | None = None) -> list[Expense]:
        expenses = self.repo.find(Expense, landlord_id=landlord_id)
        if month_key is not None:
            validate_month_key(month_key)
            expenses = [e for e in expenses if month_key_of(e.spent_on) == month_key]
        return expenses
