"""Billing aggregator: derives paid/due state by summing payments.

Nothing here writes. ``Payment.status`` is the recorder's annotation and is
never consulted; whether a month is paid is always ``sum(rent payments) >=
tenant.rent``.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.ledger.validation import to_enum
from tenancy_ledger.models import Payment, PaymentType, Tenant
from tenancy_ledger.months import trailing_months, validate_month_key

ZERO = Decimal("0")


def category_of(payment: Payment) -> str:
    """Category key; legacy payments without a type count as rent."""
    return (payment.payment_type or PaymentType.RENT).value


def _matching(payments: Iterable[Payment], tenant_id: str, month_key: str) -> Iterable[Payment]:
    return (p for p in payments if p.tenant_id == tenant_id and p.month_key == month_key)


def rent_paid(payments: Iterable[Payment], tenant_id: str, month_key: str) -> Decimal:
    return sum((p.amount for p in _matching(payments, tenant_id, month_key) if p.is_rent), ZERO)


def utility_paid(
    payments: Iterable[Payment],
    tenant_id: str,
    month_key: str,
    payment_type: PaymentType | str | None = None,
) -> Decimal:
    """Sum of non-rent payments, optionally for one utility category."""
    wanted = to_enum(PaymentType, payment_type, "payment_type") if payment_type is not None else None
    return sum(
        (
            p.amount
            for p in _matching(payments, tenant_id, month_key)
            if not p.is_rent and (wanted is None or p.payment_type is wanted)
        ),
        ZERO,
    )


def is_fully_paid(tenant: Tenant, payments: Iterable[Payment], month_key: str) -> bool:
    return rent_paid(payments, tenant.tenant_id, month_key) >= tenant.rent


def is_due(tenant: Tenant, payments: Iterable[Payment], month_key: str) -> bool:
    """Assigned and short of rent for the month; unassigned tenants owe nothing."""
    return tenant.is_assigned and not is_fully_paid(tenant, payments, month_key)


def split_rent_utility(payments: Iterable[Payment]) -> tuple[list[Payment], list[Payment]]:
    """Classify payments into the rent and utility sub-ledgers."""
    rent, utility = [], []
    for payment in payments:
        (rent if payment.is_rent else utility).append(payment)
    return rent, utility


def collected_by_category(payments: Iterable[Payment]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    for payment in payments:
        key = category_of(payment)
        totals[key] = totals.get(key, ZERO) + payment.amount
    return totals


@dataclass
class MonthlyTotals:
    """Collected amounts for one landlord and month."""

    month_key: str
    rent: Decimal = ZERO
    utility: Decimal = ZERO
    by_category: dict[str, Decimal] = field(default_factory=dict)
    payment_count: int = 0

    @property
    def total(self) -> Decimal:
        return self.rent + self.utility


def monthly_totals(payments: Iterable[Payment], tenant_ids: set[str], month_key: str) -> MonthlyTotals:
    """Aggregate the month's payments of the given tenants."""
    selected = [p for p in payments if p.month_key == month_key and p.tenant_id in tenant_ids]
    rent, utility = split_rent_utility(selected)
    return MonthlyTotals(
        month_key=month_key,
        rent=sum((p.amount for p in rent), ZERO),
        utility=sum((p.amount for p in utility), ZERO),
        by_category=collected_by_category(selected),
        payment_count=len(selected),
    )


class BillingAggregator:
    """Store-backed entry points; every call re-reads payments."""

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def _tenant_payments(self, tenant_id: str, month_key: str) -> list[Payment]:
        validate_month_key(month_key)
        return self.repo.find(Payment, tenant_id=tenant_id, month_key=month_key)

    def rent_paid(self, tenant_id: str, month_key: str) -> Decimal:
        return rent_paid(self._tenant_payments(tenant_id, month_key), tenant_id, month_key)

    def utility_paid(self, tenant_id: str, month_key: str, payment_type: PaymentType | str | None = None) -> Decimal:
        return utility_paid(self._tenant_payments(tenant_id, month_key), tenant_id, month_key, payment_type)

    def is_fully_paid(self, tenant: Tenant | str, month_key: str) -> bool:
        if isinstance(tenant, str):
            tenant = self.repo.load(Tenant, tenant).record
        return is_fully_paid(tenant, self._tenant_payments(tenant.tenant_id, month_key), month_key)

    def is_due(self, tenant: Tenant | str, month_key: str) -> bool:
        if isinstance(tenant, str):
            tenant = self.repo.load(Tenant, tenant).record
        return is_due(tenant, self._tenant_payments(tenant.tenant_id, month_key), month_key)

    def landlord_tenant_ids(self, landlord_id: str) -> set[str]:
        return {t.tenant_id for t in self.repo.find(Tenant, landlord_id=landlord_id)}

    def monthly_totals(self, landlord_id: str, month_key: str) -> MonthlyTotals:
        validate_month_key(month_key)
        payments = self.repo.find(Payment, month_key=month_key)
        return monthly_totals(payments, self.landlord_tenant_ids(landlord_id), month_key)

    def trend(self, landlord_id: str, month_key: str, months: int = 6) -> list[MonthlyTotals]:
        """Totals for the ``months`` months ending at ``month_key``, oldest first."""
        tenant_ids = self.landlord_tenant_ids(landlord_id)
        result = []
        for key in trailing_months(month_key, months):
            payments = self.repo.find(Payment, month_key=key)
            result.append(monthly_totals(payments, tenant_ids, key))
        return result
