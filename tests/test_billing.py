"""Tests for the billing aggregator."""

from decimal import Decimal

import pytest

from tenancy_ledger.exceptions import ValidationError
from tenancy_ledger.ledger import Ledger
from tenancy_ledger.ledger.billing import (
    collected_by_category,
    is_due,
    is_fully_paid,
    monthly_totals,
    rent_paid,
    split_rent_utility,
    utility_paid,
)
from tenancy_ledger.models import Payment, PaymentMethod, PaymentType, Tenant


def payment(amount: str, month: str = "2024-03", kind: PaymentType | None = PaymentType.RENT, tenant: str = "t-1") -> Payment:
    return Payment(
        payment_id=f"p-{amount}-{month}-{kind}",
        tenant_id=tenant,
        landlord_id="ll-1",
        amount=Decimal(amount),
        method=PaymentMethod.CASH,
        month_key=month,
        payment_type=kind,
    )


@pytest.fixture
def renter() -> Tenant:
    return Tenant("t-1", "ll-1", "Karim", unit_id="u-1", rent=Decimal("3000"))


class TestPureAggregation:
    def test_two_rent_payments_cover_rent(self, renter: Tenant) -> None:
        payments = [payment("2000"), payment("1000")]

        assert rent_paid(payments, "t-1", "2024-03") == Decimal("3000")
        assert is_fully_paid(renter, payments, "2024-03")
        assert not is_due(renter, payments, "2024-03")

    def test_one_payment_is_due(self, renter: Tenant) -> None:
        payments = [payment("2000")]

        assert not is_fully_paid(renter, payments, "2024-03")
        assert is_due(renter, payments, "2024-03")

    def test_legacy_untyped_counts_as_rent(self, renter: Tenant) -> None:
        payments = [payment("2000", kind=None), payment("1000")]

        assert rent_paid(payments, "t-1", "2024-03") == Decimal("3000")

    def test_utilities_do_not_count_toward_rent(self, renter: Tenant) -> None:
        payments = [payment("2000"), payment("1500", kind=PaymentType.ELECTRICITY)]

        assert rent_paid(payments, "t-1", "2024-03") == Decimal("2000")
        assert utility_paid(payments, "t-1", "2024-03") == Decimal("1500")
        assert is_due(renter, payments, "2024-03")

    def test_utility_filter_by_category(self) -> None:
        payments = [payment("800", kind=PaymentType.GAS), payment("500", kind=PaymentType.WATER)]

        assert utility_paid(payments, "t-1", "2024-03", PaymentType.GAS) == Decimal("800")
        assert utility_paid(payments, "t-1", "2024-03", "water") == Decimal("500")
        assert utility_paid(payments, "t-1", "2024-03", "internet") == Decimal("0")

    def test_utility_filter_rejects_unknown_category(self) -> None:
        with pytest.raises(ValidationError):
            utility_paid([], "t-1", "2024-03", "cable")

    def test_other_months_and_tenants_ignored(self) -> None:
        payments = [payment("3000", month="2024-02"), payment("3000", tenant="t-2")]

        assert rent_paid(payments, "t-1", "2024-03") == Decimal("0")

    def test_overpayment_not_clamped(self, renter: Tenant) -> None:
        payments = [payment("5000")]

        assert rent_paid(payments, "t-1", "2024-03") == Decimal("5000")
        assert is_fully_paid(renter, payments, "2024-03")
        assert rent_paid(payments, "t-1", "2024-04") == Decimal("0")

    def test_unassigned_tenant_never_due(self) -> None:
        tenant = Tenant("t-1", "ll-1", "Gone", unit_id=None, rent=Decimal("3000"))

        assert not is_due(tenant, [], "2024-03")

    def test_split_and_categories(self) -> None:
        payments = [payment("2000"), payment("300", kind=PaymentType.GAS), payment("100", kind=None)]

        rent, utility = split_rent_utility(payments)

        assert len(rent) == 2
        assert len(utility) == 1
        assert collected_by_category(payments) == {"rent": Decimal("2100"), "gas": Decimal("300")}

    def test_monthly_totals(self) -> None:
        payments = [
            payment("2000"),
            payment("400", kind=PaymentType.INTERNET),
            payment("999", tenant="t-other"),
            payment("999", month="2024-04"),
        ]

        totals = monthly_totals(payments, {"t-1"}, "2024-03")

        assert totals.rent == Decimal("2000")
        assert totals.utility == Decimal("400")
        assert totals.total == Decimal("2400")
        assert totals.payment_count == 2


class TestBillingAggregator:
    def test_store_backed_paid_state(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        ledger.record_payment(assigned_tenant.tenant_id, 2000, "bkash", "2024-03")
        assert not ledger.is_fully_paid(assigned_tenant.tenant_id, "2024-03")

        ledger.record_payment(assigned_tenant.tenant_id, 3000, "cash", "2024-03", status="partial")

        assert ledger.rent_paid(assigned_tenant.tenant_id, "2024-03") == Decimal("5000")
        assert ledger.is_fully_paid(assigned_tenant.tenant_id, "2024-03")

    def test_payment_status_flag_is_advisory(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        ledger.record_payment(assigned_tenant.tenant_id, 1000, "cash", "2024-03", status="paid")

        assert not ledger.is_fully_paid(assigned_tenant.tenant_id, "2024-03")

    def test_trend_rolls_over_year(self, ledger: Ledger, landlord, assigned_tenant: Tenant) -> None:
        ledger.record_payment(assigned_tenant.tenant_id, 5000, "cash", "2023-12")
        ledger.record_payment(assigned_tenant.tenant_id, 5000, "cash", "2024-01")
        ledger.record_payment(assigned_tenant.tenant_id, 700, "cash", "2024-01", payment_type="electricity")

        trend = ledger.trend(landlord.landlord_id, "2024-01", months=3)

        assert [t.month_key for t in trend] == ["2023-11", "2023-12", "2024-01"]
        assert [t.rent for t in trend] == [Decimal("0"), Decimal("5000"), Decimal("5000")]
        assert trend[2].utility == Decimal("700")

    def test_trend_default_length_from_config(self, ledger: Ledger, landlord) -> None:
        assert len(ledger.trend(landlord.landlord_id, "2024-06")) == 6

    def test_landlord_totals_exclude_other_landlords(self, ledger: Ledger, landlord, assigned_tenant: Tenant) -> None:
        ledger.register_landlord("ll-002", "Other", "01999000000")
        stranger = ledger.add_manual_tenant("ll-002", "Stranger")
        ledger.record_payment(stranger.tenant_id, 9999, "cash", "2024-03")
        ledger.record_payment(assigned_tenant.tenant_id, 5000, "cash", "2024-03")

        summary = ledger.monthly_summary(landlord.landlord_id, "2024-03")

        assert summary.totals.rent == Decimal("5000")

    def test_invalid_month_key(self, ledger: Ledger, assigned_tenant: Tenant) -> None:
        with pytest.raises(ValidationError):
            ledger.rent_paid(assigned_tenant.tenant_id, "2024-3")
