"""Tests for agreements and expenses."""

from datetime import date
from decimal import Decimal

import pytest

from tenancy_ledger.exceptions import InvalidEntityStateError, ReferentialIntegrityError, ValidationError
from tenancy_ledger.ledger import Ledger
from tenancy_ledger.models import AgreementStatus, ExpenseCategory, Landlord, Tenant


class TestAgreements:
    def test_snapshot_of_tenancy(self, ledger: Ledger, landlord: Landlord, assigned_tenant: Tenant, unit) -> None:
        agreement = ledger.create_agreement(assigned_tenant.tenant_id, terms="Two months notice")

        assert agreement.unit_no == "1A"
        assert agreement.property_id == unit.property_id
        assert agreement.rent == Decimal("5000")
        assert agreement.advance == Decimal("10000")
        assert agreement.start_date == date(2024, 1, 1)
        assert agreement.duration_months == 12
        assert agreement.conditions == "No pets"
        assert agreement.status is AgreementStatus.ACTIVE
        assert ledger.agreements_of(landlord.landlord_id) == [agreement]

    def test_snapshot_not_updated_by_rent_change(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        agreement = ledger.create_agreement(assigned_tenant.tenant_id)
        ledger.change_rent(assigned_tenant.tenant_id, 6000, "increase")

        stored = ledger.agreements_of(assigned_tenant.landlord_id, assigned_tenant.tenant_id)[0]

        assert stored.rent == Decimal("5000")
        assert stored.agreement_id == agreement.agreement_id

    def test_explicit_conditions_and_start(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        agreement = ledger.create_agreement(
            assigned_tenant.tenant_id, start_date="2024-02-01", duration_months=6, conditions=""
        )

        assert agreement.start_date == date(2024, 2, 1)
        assert agreement.duration_months == 6
        assert agreement.conditions == ""

    def test_requires_assigned_tenant(self, ledger: Ledger, tenant: Tenant) -> None:
        with pytest.raises(InvalidEntityStateError):
            ledger.create_agreement(tenant.tenant_id)

    def test_rejects_zero_duration(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        with pytest.raises(ValidationError):
            ledger.create_agreement(assigned_tenant.tenant_id, duration_months=0)

    def test_end_is_idempotent(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        agreement = ledger.create_agreement(assigned_tenant.tenant_id)

        ended = ledger.end_agreement(agreement.agreement_id)
        again = ledger.end_agreement(agreement.agreement_id)

        assert ended.status is AgreementStatus.ENDED
        assert again.ended_at == ended.ended_at


class TestExpenses:
    def test_add_and_list_by_month(self, ledger: Ledger, landlord: Landlord, building) -> None:
        prop, _ = building
        ledger.add_expense(landlord.landlord_id, "repair", 1200, "Pump", "2024-05-03", prop.property_id)
        ledger.add_expense(landlord.landlord_id, ExpenseCategory.TAX, "800", spent_on=date(2024, 4, 30))

        may = ledger.expenses_of(landlord.landlord_id, "2024-05")

        assert [e.category for e in may] == [ExpenseCategory.REPAIR]
        assert may[0].property_id == prop.property_id
        assert len(ledger.expenses_of(landlord.landlord_id)) == 2

    def test_rejects_foreign_property(self, ledger: Ledger, landlord: Landlord) -> None:
        ledger.register_landlord("ll-002", "Other", "01999000000")
        prop, _ = ledger.add_property("ll-002", "Theirs", "Road 9", 1, 1)

        with pytest.raises(ReferentialIntegrityError):
            ledger.add_expense(landlord.landlord_id, "repair", 100, property_id=prop.property_id)

    @pytest.mark.parametrize("amount", [0, -1])
    def test_rejects_non_positive(self, ledger: Ledger, landlord: Landlord, amount: int) -> None:
        with pytest.raises(ValidationError):
            ledger.add_expense(landlord.landlord_id, "repair", amount)

    def test_rejects_unknown_category(self, ledger: Ledger, landlord: Landlord) -> None:
        with pytest.raises(ValidationError, match="category"):
            ledger.add_expense(landlord.landlord_id, "bribe", 100)

    def test_delete(self, ledger: Ledger, landlord: Landlord) -> None:
        expense = ledger.add_expense(landlord.landlord_id, "cleaning", 300)

        ledger.delete_expense(expense.expense_id)

        assert ledger.expenses_of(landlord.landlord_id) == []
