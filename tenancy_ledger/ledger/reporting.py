"""Read-only reports for the presentation layer. Nothing here writes."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from tenancy_ledger.ledger.billing import ZERO, BillingAggregator, MonthlyTotals, is_due, rent_paid, utility_paid
from tenancy_ledger.ledger.notices import NoticeBoard
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.models import Expense, Landlord, Payment, Property, Tenant, Unit
from tenancy_ledger.months import month_key_of, validate_month_key

HUNDRED = Decimal("100")


def percentage(part: int, whole: int) -> Decimal:
    """Percentage rounded to one decimal place; 0 when ``whole`` is 0."""
    if whole == 0:
        return Decimal("0.0")
    return (Decimal(part) * HUNDRED / Decimal(whole)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


@dataclass
class OccupancyStats:
    property_id: str | None
    total_units: int
    occupied_units: int

    @property
    def vacant_units(self) -> int:
        return self.total_units - self.occupied_units

    @property
    def percent(self) -> Decimal:
        return percentage(self.occupied_units, self.total_units)


@dataclass
class MonthlySummary:
    """Collected money against expenses for one landlord and month."""

    landlord_id: str
    totals: MonthlyTotals
    expenses: Decimal

    @property
    def net_profit(self) -> Decimal:
        return self.totals.total - self.expenses


@dataclass
class TenantStatement:
    tenant_id: str
    month_key: str
    rent_due: Decimal
    rent_paid: Decimal
    utility_paid: Decimal
    payments: list[Payment] = field(default_factory=list)

    @property
    def outstanding(self) -> Decimal:
        return max(self.rent_due - self.rent_paid, ZERO)

    @property
    def overpaid(self) -> Decimal:
        """Surplus over rent; accepted but not carried to the next month."""
        return max(self.rent_paid - self.rent_due, ZERO)

    @property
    def status(self) -> str:
        if self.rent_paid >= self.rent_due:
            return "paid"
        return "partial" if self.rent_paid > 0 else "due"


@dataclass
class Dashboard:
    landlord_id: str
    month_key: str
    properties: int
    units: int
    occupied: int
    tenants: int
    unassigned: int
    due: int
    open_notices: int
    collected: Decimal
    expenses: Decimal

    @property
    def vacant(self) -> int:
        return self.units - self.occupied

    @property
    def occupancy_percent(self) -> Decimal:
        return percentage(self.occupied, self.units)

    @property
    def net_profit(self) -> Decimal:
        return self.collected - self.expenses


class Reports:
    """Idempotent queries; each call re-reads the store."""

    def __init__(self, repo: Repository, billing: BillingAggregator, notices: NoticeBoard) -> None:
        self.repo = repo
        self.billing = billing
        self.notices = notices

    def occupancy(self, property_id: str) -> OccupancyStats:
        self.repo.load(Property, property_id)
        units = self.repo.find(Unit, property_id=property_id)
        return OccupancyStats(property_id, len(units), sum(1 for u in units if not u.is_vacant))

    def landlord_occupancy(self, landlord_id: str) -> OccupancyStats:
        units = self.repo.find(Unit, landlord_id=landlord_id)
        return OccupancyStats(None, len(units), sum(1 for u in units if not u.is_vacant))

    def due_tenants(self, landlord_id: str, month_key: str) -> list[Tenant]:
        """Assigned tenants whose rent payments for the month fall short."""
        validate_month_key(month_key)
        tenants = self.repo.find(Tenant, landlord_id=landlord_id)
        payments = self.repo.find(Payment, month_key=month_key)
        return [t for t in tenants if is_due(t, payments, month_key)]

    def expense_total(self, landlord_id: str, month_key: str) -> Decimal:
        expenses = self.repo.find(Expense, landlord_id=landlord_id)
        return sum((e.amount for e in expenses if month_key_of(e.spent_on) == month_key), ZERO)

    def monthly_summary(self, landlord_id: str, month_key: str) -> MonthlySummary:
        totals = self.billing.monthly_totals(landlord_id, month_key)
        return MonthlySummary(landlord_id, totals, self.expense_total(landlord_id, month_key))

    def trend(self, landlord_id: str, month_key: str, months: int = 6) -> list[MonthlyTotals]:
        return self.billing.trend(landlord_id, month_key, months)

    def tenant_statement(self, tenant_id: str, month_key: str) -> TenantStatement:
        validate_month_key(month_key)
        tenant = self.repo.load(Tenant, tenant_id).record
        payments = self.repo.find(Payment, tenant_id=tenant_id, month_key=month_key)
        return TenantStatement(
            tenant_id=tenant_id,
            month_key=month_key,
            rent_due=tenant.rent if tenant.is_assigned else ZERO,
            rent_paid=rent_paid(payments, tenant_id, month_key),
            utility_paid=utility_paid(payments, tenant_id, month_key),
            payments=payments,
        )

    def dashboard(self, landlord_id: str, month_key: str) -> Dashboard:
        validate_month_key(month_key)
        self.repo.load(Landlord, landlord_id)
        tenants = self.repo.find(Tenant, landlord_id=landlord_id)
        units = self.repo.find(Unit, landlord_id=landlord_id)
        payments = self.repo.find(Payment, month_key=month_key)
        tenant_ids = {t.tenant_id for t in tenants}
        collected = sum((p.amount for p in payments if p.tenant_id in tenant_ids), ZERO)
        return Dashboard(
            landlord_id=landlord_id,
            month_key=month_key,
            properties=len(self.repo.find(Property, landlord_id=landlord_id)),
            units=len(units),
            occupied=sum(1 for u in units if not u.is_vacant),
            tenants=len(tenants),
            unassigned=sum(1 for t in tenants if not t.is_assigned),
            due=sum(1 for t in tenants if is_due(t, payments, month_key)),
            open_notices=self.notices.open_count(landlord_id),
            collected=collected,
            expenses=self.expense_total(landlord_id, month_key),
        )

    def platform_overview(self, month_key: str) -> dict[str, object]:
        """Counts across every landlord, for the admin view."""
        validate_month_key(month_key)
        payments = self.repo.find(Payment, month_key=month_key)
        return {
            "landlords": len(self.repo.find(Landlord)),
            "tenants": len(self.repo.find(Tenant)),
            "properties": len(self.repo.find(Property)),
            "units": len(self.repo.find(Unit)),
            "payments": len(payments),
            "collected": sum((p.amount for p in payments), ZERO),
        }
