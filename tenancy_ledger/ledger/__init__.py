"""Ledger commands and queries over a :class:`~tenancy_ledger.store.LedgerStore`."""

from tenancy_ledger.ledger.activity import ActivityRecorder, EventSink
from tenancy_ledger.ledger.agreements import AgreementBook
from tenancy_ledger.ledger.billing import BillingAggregator, MonthlyTotals
from tenancy_ledger.ledger.expenses import ExpenseBook
from tenancy_ledger.ledger.facade import Identity, Ledger
from tenancy_ledger.ledger.notices import NoticeBoard
from tenancy_ledger.ledger.occupancy import OccupancyManager, OccupancyReport, OccupancyViolation
from tenancy_ledger.ledger.payments import PaymentBook
from tenancy_ledger.ledger.registry import Registry
from tenancy_ledger.ledger.rent import RentAuditTrail
from tenancy_ledger.ledger.reporting import Dashboard, MonthlySummary, OccupancyStats, Reports, TenantStatement
from tenancy_ledger.ledger.repository import Repository, Versioned

__all__ = [
    "ActivityRecorder",
    "AgreementBook",
    "BillingAggregator",
    "Dashboard",
    "EventSink",
    "ExpenseBook",
    "Identity",
    "Ledger",
    "MonthlySummary",
    "MonthlyTotals",
    "NoticeBoard",
    "OccupancyManager",
    "OccupancyReport",
    "OccupancyStats",
    "OccupancyViolation",
    "PaymentBook",
    "Registry",
    "RentAuditTrail",
    "Reports",
    "Repository",
    "TenantStatement",
    "Versioned",
]
