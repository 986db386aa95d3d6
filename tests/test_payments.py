"""Tests for recording and correcting payments."""

from decimal import Decimal

import pytest

from tenancy_ledger.config import BillingConfig, LedgerConfig, RetryConfig
from tenancy_ledger.exceptions import EntityNotFoundError, ValidationError
from tenancy_ledger.ledger import Ledger
from tenancy_ledger.models import PaymentMethod, PaymentStatus, PaymentType, Tenant


class TestRecordPayment:
    def test_record(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        payment = ledger.record_payment(
            assigned_tenant.tenant_id, "2500.50", "BKash", month_key, note="first half", recorded_by="ll-001"
        )

        assert payment.amount == Decimal("2500.50")
        assert payment.method is PaymentMethod.BKASH
        assert payment.status is PaymentStatus.PAID
        assert payment.payment_type is PaymentType.RENT
        assert payment.landlord_id == assigned_tenant.landlord_id
        assert payment.paid_at is not None
        assert ledger.payments_of_tenant(assigned_tenant.tenant_id) == [payment]

    def test_legacy_untyped_payment(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        payment = ledger.record_payment(assigned_tenant.tenant_id, 5000, "cash", month_key, payment_type=None)

        assert payment.payment_type is None
        assert ledger.rent_paid(assigned_tenant.tenant_id, month_key) == Decimal("5000")

    @pytest.mark.parametrize("amount", [0, -5, "abc", None, True, "NaN", "Infinity"])
    def test_rejects_bad_amounts(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str, amount) -> None:
        with pytest.raises(ValidationError):
            ledger.record_payment(assigned_tenant.tenant_id, amount, "cash", month_key)

        assert ledger.payments_of_tenant(assigned_tenant.tenant_id) == []

    def test_rejects_unknown_method(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        with pytest.raises(ValidationError, match="bkash, nagad, rocket, bank, cash"):
            ledger.record_payment(assigned_tenant.tenant_id, 100, "paypal", month_key)

    def test_rejects_bad_month(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        with pytest.raises(ValidationError):
            ledger.record_payment(assigned_tenant.tenant_id, 100, "cash", "May 2024")

    def test_unknown_tenant(self, ledger: Ledger, month_key: str) -> None:
        with pytest.raises(EntityNotFoundError):
            ledger.record_payment("t-404", 100, "cash", month_key)

    def test_overpayment_accepted(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        ledger.record_payment(assigned_tenant.tenant_id, 8000, "bank", month_key)

        assert ledger.rent_paid(assigned_tenant.tenant_id, month_key) == Decimal("8000")


class TestEditAndDelete:
    def test_edit_amount_and_note(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        payment = ledger.record_payment(assigned_tenant.tenant_id, 2000, "cash", month_key)

        edited = ledger.edit_payment(payment.payment_id, amount=2500, note="corrected")

        assert edited.amount == Decimal("2500")
        assert edited.note == "corrected"
        assert edited.updated_at is not None
        assert ledger.rent_paid(assigned_tenant.tenant_id, month_key) == Decimal("2500")

    def test_edit_note_only(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        payment = ledger.record_payment(assigned_tenant.tenant_id, 2000, "cash", month_key)

        edited = ledger.edit_payment(payment.payment_id, note="receipt #12")

        assert edited.amount == Decimal("2000")

    def test_edit_requires_change(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        payment = ledger.record_payment(assigned_tenant.tenant_id, 2000, "cash", month_key)

        with pytest.raises(ValidationError, match="Nothing to edit"):
            ledger.edit_payment(payment.payment_id)

    def test_edit_rejects_zero(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        payment = ledger.record_payment(assigned_tenant.tenant_id, 2000, "cash", month_key)

        with pytest.raises(ValidationError):
            ledger.edit_payment(payment.payment_id, amount=0)

    def test_delete(self, ledger: Ledger, assigned_tenant: Tenant, month_key: str) -> None:
        payment = ledger.record_payment(assigned_tenant.tenant_id, 2000, "cash", month_key)

        ledger.delete_payment(payment.payment_id)

        assert ledger.payments_of_tenant(assigned_tenant.tenant_id) == []
        with pytest.raises(EntityNotFoundError):
            ledger.delete_payment(payment.payment_id)


class TestPaymentQueries:
    def test_newest_month_first(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        for key in ("2024-01", "2024-03", "2024-02"):
            ledger.record_payment(assigned_tenant.tenant_id, 5000, "cash", key)

        months = [p.month_key for p in ledger.payments_of_tenant(assigned_tenant.tenant_id)]

        assert months == ["2024-03", "2024-02", "2024-01"]

    def test_payments_for_month_scoped_to_landlord(self, ledger: Ledger, landlord, assigned_tenant: Tenant, month_key: str) -> None:
        ledger.register_landlord("ll-002", "Other", "01999000000")
        stranger = ledger.add_manual_tenant("ll-002", "Stranger")
        ledger.record_payment(stranger.tenant_id, 100, "cash", month_key)
        mine = ledger.record_payment(assigned_tenant.tenant_id, 5000, "cash", month_key)

        assert ledger.payments_for_month(landlord.landlord_id, month_key) == [mine]


class TestActivityCurrency:
    @pytest.fixture
    def config(self) -> LedgerConfig:
        return LedgerConfig(
            retry=RetryConfig(attempts=3, min_wait=0, max_wait=0),
            billing=BillingConfig(currency="USD"),
        )

    def test_payment_details_use_configured_currency(
        self, ledger: Ledger, assigned_tenant: Tenant, month_key: str
    ) -> None:
        payment = ledger.record_payment(assigned_tenant.tenant_id, 5000, "cash", month_key)
        ledger.edit_payment(payment.payment_id, amount=4500)
        ledger.delete_payment(payment.payment_id)

        details = [e.detail for e in ledger.recent_activity(3)]

        assert details[2] == "5000 USD via cash"
        assert details[1] == f"Payment {payment.payment_id}: 5000 → 4500 USD"
        assert details[0].startswith(f"Payment {payment.payment_id} (4500 USD, {month_key})")

    def test_expense_detail_uses_configured_currency(self, ledger: Ledger, landlord) -> None:
        ledger.add_expense(landlord.landlord_id, "repair", 1200)

        assert ledger.recent_activity(1)[0].detail == "1200 USD repair"
