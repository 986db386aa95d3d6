"""The ledger's command and query surface.

The presentation layer authenticates users and passes their id and role in;
the ledger trusts both. Every call re-reads the store.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from tenancy_ledger.config import LedgerConfig
from tenancy_ledger.ledger.activity import ActivityRecorder, EventSink
from tenancy_ledger.ledger.agreements import AgreementBook
from tenancy_ledger.ledger.billing import BillingAggregator, MonthlyTotals
from tenancy_ledger.ledger.expenses import ExpenseBook
from tenancy_ledger.ledger.notices import NoticeBoard
from tenancy_ledger.ledger.occupancy import OccupancyManager, OccupancyReport
from tenancy_ledger.ledger.payments import PaymentBook
from tenancy_ledger.ledger.registry import Registry
from tenancy_ledger.ledger.rent import RentAuditTrail
from tenancy_ledger.ledger.reporting import Dashboard, MonthlySummary, OccupancyStats, Reports, TenantStatement
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.models import (
    ActivityLog,
    Agreement,
    Expense,
    ExpenseCategory,
    Landlord,
    Notice,
    NoticeStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    Property,
    RentHistoryEntry,
    Role,
    Tenant,
    Unit,
    UnitType,
)
from tenancy_ledger.months import current_month_key
from tenancy_ledger.store import LedgerStore, build_store
from tenancy_ledger.store.retry import call_read, call_write

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """An authenticated caller as reported by the external auth layer."""

    user_id: str
    role: Role


class Ledger:
    """Facade over the ledger components."""

    def __init__(
        self,
        store: LedgerStore,
        config: LedgerConfig | None = None,
        sink: EventSink | None = None,
    ) -> None:
        self.store = store
        self.config = config or LedgerConfig()
        self.sink = sink
        self.repo = Repository(store)
        self.activity = ActivityRecorder(self.repo, sink)
        self.registry = Registry(self.repo, self.activity)
        self.rent_trail = RentAuditTrail(self.repo, self.activity)
        self.occupancy_manager = OccupancyManager(self.repo, self.activity)
        self.billing = BillingAggregator(self.repo)
        self.payment_book = PaymentBook(self.repo, self.activity, self.config.billing.currency)
        self.notice_board = NoticeBoard(self.repo, self.activity)
        self.agreement_book = AgreementBook(self.repo, self.activity)
        self.expense_book = ExpenseBook(self.repo, self.activity, self.config.billing.currency)
        self.reports = Reports(self.repo, self.billing, self.notice_board)

    @classmethod
    def from_config(cls, config: LedgerConfig, sink: EventSink | None = None) -> "Ledger":
        return cls(build_store(config), config, sink)

    def close(self) -> None:
        if self.sink is not None:
            self.sink.close()
        self.store.close()

    def _read(self, fn, *args, **kwargs):
        return call_read(self.config.retry, fn, *args, **kwargs)

    def _write(self, fn, *args, idempotent: bool = False, **kwargs):
        return call_write(self.config.retry, fn, *args, idempotent=idempotent, **kwargs)

    # Registration

    def register_landlord(self, user_id: str, name: str, phone: str, **profile: Any) -> Landlord:
        return self._write(self.registry.register_landlord, user_id, name, phone, **profile)

    def register_tenant(self, user_id: str, landlord_id: str, name: str, **profile: Any) -> Tenant:
        return self._write(self.registry.register_tenant, user_id, landlord_id, name, **profile)

    def self_register_tenant(
        self, user_id: str, landlord_id: str, unit_id: str, name: str, **profile: Any
    ) -> Tenant:
        """Register and move straight into a chosen vacant unit at its listed rent.

        Tenant, user profile and unit occupancy are written in one commit, so
        losing the unit to another session leaves nothing behind. Repeating
        the call after it was applied returns the tenant.
        """
        return self._write(
            self._admit_self_registered, user_id, landlord_id, unit_id, name, idempotent=True, **profile
        )

    def _admit_self_registered(self, user_id: str, landlord_id: str, unit_id: str, name: str, **profile: Any) -> Tenant:
        existing = self.repo.get(Tenant, user_id)
        if existing is not None and existing.record.landlord_id == landlord_id and existing.record.unit_id == unit_id:
            return existing.record
        tenant, user = self.registry.build_registered_tenant(user_id, landlord_id, name, **profile)
        unit = self.occupancy_manager.admit(tenant, unit_id, None, 0, date.today(), extra_writes=[self.repo.put(user)])
        self.registry.record_tenant_created(tenant, tenant.tenant_id)
        self.occupancy_manager.record_assigned(tenant, unit)
        return tenant

    def add_manual_tenant(
        self,
        landlord_id: str,
        name: str,
        phone: str = "",
        unit_id: str | None = None,
        rent: Any = None,
        advance: Any = 0,
        move_in_date: date | str | None = None,
        notes: str = "",
        **profile: Any,
    ) -> Tenant:
        """Landlord-created tenant, optionally assigned at once.

        Without an explicit rent the unit's listed rent is used. With a unit,
        the tenant is only created if the unit can be taken.
        """
        if unit_id is None:
            return self._write(self.registry.add_manual_tenant, landlord_id, name, phone=phone, **profile)
        return self._write(
            self._admit_manual_tenant, landlord_id, name, phone, unit_id, rent, advance,
            move_in_date or date.today(), notes, **profile,
        )

    def _admit_manual_tenant(self, landlord_id: str, name: str, phone: str, unit_id: str, rent: Any, advance: Any,
                             move_in_date: date | str, notes: str, **profile: Any) -> Tenant:
        tenant = self.registry.build_manual_tenant(landlord_id, name, phone=phone, **profile)
        unit = self.occupancy_manager.admit(tenant, unit_id, rent, advance, move_in_date, notes)
        self.registry.record_tenant_created(tenant, landlord_id)
        self.occupancy_manager.record_assigned(tenant, unit)
        return tenant

    def add_property(self, landlord_id: str, name: str, address: str, floors: int, units_per_floor: int,
                     unit_type: UnitType | str = UnitType.FLAT, **details: Any) -> tuple[Property, list[Unit]]:
        return self._write(
            self.registry.add_property, landlord_id, name, address, floors, units_per_floor, unit_type, **details
        )

    # Occupancy and rent

    def assign(self, tenant_id: str, unit_id: str, rent: Any, advance: Any = 0,
               move_in_date: date | str | None = None, notes: str = "") -> Tenant:
        return self._write(
            self.occupancy_manager.assign, tenant_id, unit_id, rent, advance, move_in_date, notes, idempotent=True
        )

    def unassign(self, tenant_id: str) -> Tenant:
        return self._write(self.occupancy_manager.unassign, tenant_id, idempotent=True)

    def change_rent(self, tenant_id: str, new_rent: Any, reason: str = "") -> Tenant:
        return self._write(self.rent_trail.change_rent, tenant_id, new_rent, reason, idempotent=True)

    def current_rent(self, tenant_id: str) -> Decimal:
        return self._read(self.rent_trail.current_rent, tenant_id)

    def rent_history(self, tenant_id: str) -> list[RentHistoryEntry]:
        return self._read(self.rent_trail.history, tenant_id)

    def audit_occupancy(self, landlord_id: str | None = None) -> OccupancyReport:
        return self._read(self.occupancy_manager.audit, landlord_id)

    def reconcile_occupancy(self, landlord_id: str | None = None) -> OccupancyReport:
        return self._write(self.occupancy_manager.reconcile, landlord_id, idempotent=True)

    def audit_rent(self, landlord_id: str | None = None) -> list[Tenant]:
        return self._read(self.rent_trail.audit, landlord_id)

    # Payments

    def record_payment(
        self,
        tenant_id: str,
        amount: Any,
        method: PaymentMethod | str,
        month_key: str,
        status: PaymentStatus | str = PaymentStatus.PAID,
        payment_type: PaymentType | str | None = PaymentType.RENT,
        note: str = "",
        recorded_by: str | None = None,
    ) -> Payment:
        return self._write(
            self.payment_book.record_payment,
            tenant_id, amount, method, month_key, status, payment_type, note, recorded_by,
        )

    def edit_payment(self, payment_id: str, amount: Any = None, note: str | None = None,
                     edited_by: str | None = None) -> Payment:
        return self._write(self.payment_book.edit_payment, payment_id, amount, note, edited_by)

    def delete_payment(self, payment_id: str, deleted_by: str | None = None) -> Payment:
        return self._write(self.payment_book.delete_payment, payment_id, deleted_by)

    # Notices

    def send_notice(self, from_id: str, to_id: str, subject: str, message: str) -> Notice:
        return self._write(self.notice_board.send_notice, from_id, to_id, subject, message)

    def broadcast_notice(self, landlord_id: str, subject: str, message: str) -> list[Notice]:
        return self._write(self.notice_board.broadcast, landlord_id, subject, message)

    def update_notice_status(self, notice_id: str, status: NoticeStatus | str, by: str, note: str = "") -> Notice:
        return self._write(self.notice_board.update_status, notice_id, status, by, note)

    def mark_read(self, notice_id: str, reader_id: str) -> Notice:
        return self._write(self.notice_board.mark_read, notice_id, reader_id, idempotent=True)

    # Agreements and expenses

    def create_agreement(self, tenant_id: str, start_date: date | str | None = None, duration_months: int = 12,
                         terms: str = "", conditions: str | None = None) -> Agreement:
        return self._write(self.agreement_book.create_agreement, tenant_id, start_date, duration_months, terms, conditions)

    def end_agreement(self, agreement_id: str) -> Agreement:
        return self._write(self.agreement_book.end_agreement, agreement_id, idempotent=True)

    def add_expense(self, landlord_id: str, category: ExpenseCategory | str, amount: Any, description: str = "",
                    spent_on: date | str | None = None, property_id: str | None = None) -> Expense:
        return self._write(self.expense_book.add_expense, landlord_id, category, amount, description, spent_on, property_id)

    def delete_expense(self, expense_id: str) -> Expense:
        return self._write(self.expense_book.delete_expense, expense_id)

    # Queries

    def get_landlord(self, landlord_id: str) -> Landlord:
        return self._read(self.repo.load, Landlord, landlord_id).record

    def get_tenant(self, tenant_id: str) -> Tenant:
        return self._read(self.repo.load, Tenant, tenant_id).record

    def get_unit(self, unit_id: str) -> Unit:
        return self._read(self.repo.load, Unit, unit_id).record

    def get_notice(self, notice_id: str) -> Notice:
        return self._read(self.repo.load, Notice, notice_id).record

    def find_landlord_by_invite(self, code: str) -> Landlord | None:
        return self._read(self.registry.find_landlord_by_invite, code)

    def search_landlords_by_phone(self, query: str) -> list[Landlord]:
        return self._read(self.registry.search_landlords_by_phone, query)

    def tenants_of(self, landlord_id: str) -> list[Tenant]:
        return self._read(self.registry.tenants_of, landlord_id)

    def unassigned_tenants(self, landlord_id: str) -> list[Tenant]:
        return self._read(self.registry.unassigned_tenants, landlord_id)

    def properties_of(self, landlord_id: str) -> list[Property]:
        return self._read(self.registry.properties_of, landlord_id)

    def units_of(self, landlord_id: str, property_id: str | None = None) -> list[Unit]:
        return self._read(self.registry.units_of, landlord_id, property_id)

    def vacant_units(self, landlord_id: str) -> list[Unit]:
        return self._read(self.registry.vacant_units, landlord_id)

    def payments_of_tenant(self, tenant_id: str) -> list[Payment]:
        return self._read(self.payment_book.payments_of_tenant, tenant_id)

    def payments_for_month(self, landlord_id: str, month_key: str) -> list[Payment]:
        return self._read(self.payment_book.payments_for_month, landlord_id, month_key)

    def rent_paid(self, tenant_id: str, month_key: str) -> Decimal:
        return self._read(self.billing.rent_paid, tenant_id, month_key)

    def utility_paid(self, tenant_id: str, month_key: str, payment_type: PaymentType | str | None = None) -> Decimal:
        return self._read(self.billing.utility_paid, tenant_id, month_key, payment_type)

    def is_fully_paid(self, tenant_id: str, month_key: str) -> bool:
        return self._read(self.billing.is_fully_paid, tenant_id, month_key)

    def notices_for(self, party_id: str) -> list[Notice]:
        return self._read(self.notice_board.notices_for, party_id)

    def unread_count(self, party_id: str) -> int:
        return self._read(self.notice_board.unread_count, party_id)

    def agreements_of(self, landlord_id: str, tenant_id: str | None = None) -> list[Agreement]:
        return self._read(self.agreement_book.agreements_of, landlord_id, tenant_id)

    def expenses_of(self, landlord_id: str, month_key: str | None = None) -> list[Expense]:
        return self._read(self.expense_book.expenses_of, landlord_id, month_key)

    def occupancy(self, property_id: str) -> OccupancyStats:
        return self._read(self.reports.occupancy, property_id)

    def landlord_occupancy(self, landlord_id: str) -> OccupancyStats:
        return self._read(self.reports.landlord_occupancy, landlord_id)

    def due_tenants(self, landlord_id: str, month_key: str) -> list[Tenant]:
        return self._read(self.reports.due_tenants, landlord_id, month_key)

    def monthly_summary(self, landlord_id: str, month_key: str) -> MonthlySummary:
        return self._read(self.reports.monthly_summary, landlord_id, month_key)

    def trend(self, landlord_id: str, month_key: str, months: int | None = None) -> list[MonthlyTotals]:
        if months is None:
            months = self.config.billing.trend_months
        return self._read(self.reports.trend, landlord_id, month_key, months)

    def dashboard(self, landlord_id: str, month_key: str) -> Dashboard:
        return self._read(self.reports.dashboard, landlord_id, month_key)

    def tenant_statement(self, tenant_id: str, month_key: str) -> TenantStatement:
        return self._read(self.reports.tenant_statement, tenant_id, month_key)

    def recent_activity(self, limit: int = 100) -> list[ActivityLog]:
        return self._read(self.activity.recent, limit)

    def home(self, identity: Identity, month_key: str | None = None) -> Dashboard | TenantStatement | dict:
        """The landing view for a caller's role."""
        month_key = month_key or current_month_key()
        if identity.role is Role.LANDLORD:
            return self.dashboard(identity.user_id, month_key)
        if identity.role is Role.TENANT:
            return self.tenant_statement(identity.user_id, month_key)
        return self._read(self.reports.platform_overview, month_key)
