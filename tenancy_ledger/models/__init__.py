"""Ledger record models."""

from tenancy_ledger.models.activity import ActivityLog
from tenancy_ledger.models.agreement import Agreement
from tenancy_ledger.models.base import Event, new_id, new_invite_code, now
from tenancy_ledger.models.enums import (
    AgreementStatus,
    ExpenseCategory,
    NoticeStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    RecordStatus,
    Role,
    UnitType,
)
from tenancy_ledger.models.expense import Expense
from tenancy_ledger.models.landlord import Landlord, UserProfile
from tenancy_ledger.models.notice import Notice, StatusChange
from tenancy_ledger.models.payment import Payment
from tenancy_ledger.models.property import Property, Unit
from tenancy_ledger.models.tenant import RentHistoryEntry, Tenant

__all__ = [
    "ActivityLog",
    "Agreement",
    "AgreementStatus",
    "Event",
    "Expense",
    "ExpenseCategory",
    "Landlord",
    "Notice",
    "NoticeStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentType",
    "Property",
    "RecordStatus",
    "RentHistoryEntry",
    "Role",
    "StatusChange",
    "Tenant",
    "Unit",
    "UnitType",
    "UserProfile",
    "new_id",
    "new_invite_code",
    "now",
]
