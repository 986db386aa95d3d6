"""Typed access to ledger records on top of a document store."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from tenancy_ledger.exceptions import EntityNotFoundError
from tenancy_ledger.models import (
    ActivityLog,
    Agreement,
    Expense,
    Landlord,
    Notice,
    Payment,
    Property,
    Tenant,
    Unit,
    UserProfile,
)
from tenancy_ledger.store import base
from tenancy_ledger.store.base import Delete, LedgerStore, Put, Update, Write
from tenancy_ledger.store.codec import from_document, serialize_value, to_document

T = TypeVar("T")

# Record kind -> (collection, id field, label used in error messages)
RECORD_KINDS: dict[type, tuple[str, str, str]] = {
    Landlord: (base.LANDLORDS, "landlord_id", "Landlord"),
    UserProfile: (base.USERS, "user_id", "User"),
    Property: (base.PROPERTIES, "property_id", "Property"),
    Unit: (base.UNITS, "unit_id", "Unit"),
    Tenant: (base.TENANTS, "tenant_id", "Tenant"),
    Payment: (base.PAYMENTS, "payment_id", "Payment"),
    Notice: (base.NOTICES, "notice_id", "Notice"),
    Agreement: (base.AGREEMENTS, "agreement_id", "Agreement"),
    Expense: (base.EXPENSES, "expense_id", "Expense"),
    ActivityLog: (base.LOGS, "log_id", "Log"),
}


@dataclass
class Versioned(Generic[T]):
    """A record together with the store version it was read at."""

    record: T
    version: int


class Repository:
    """Load, query and stage writes for dataclass records."""

    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    def get(self, kind: type[T], record_id: str | None) -> Versioned[T] | None:
        if not record_id:
            return None
        collection, _, _ = RECORD_KINDS[kind]
        doc = self.store.get(collection, record_id)
        if doc is None:
            return None
        return Versioned(from_document(kind, doc.data), doc.version)

    def load(self, kind: type[T], record_id: str | None) -> Versioned[T]:
        """Like :meth:`get` but raise :class:`EntityNotFoundError` when absent."""
        found = self.get(kind, record_id)
        if found is None:
            label = RECORD_KINDS[kind][2]
            raise EntityNotFoundError(f"{label} {record_id} not found")
        return found

    def find(self, kind: type[T], **equals: Any) -> list[T]:
        return [v.record for v in self.find_versioned(kind, **equals)]

    def find_versioned(self, kind: type[T], **equals: Any) -> list[Versioned[T]]:
        collection, _, _ = RECORD_KINDS[kind]
        filters = {k: serialize_value(v) for k, v in equals.items()}
        return [Versioned(from_document(kind, d.data), d.version) for d in self.store.find(collection, **filters)]

    def exists(self, kind: type, record_id: str | None) -> bool:
        if not record_id:
            return False
        return self.store.get(RECORD_KINDS[kind][0], record_id) is not None

    @staticmethod
    def put(record: Any) -> Put:
        collection, id_field, _ = RECORD_KINDS[type(record)]
        return Put(collection, getattr(record, id_field), to_document(record))

    @staticmethod
    def update(record: Any, version: int) -> Update:
        collection, id_field, _ = RECORD_KINDS[type(record)]
        return Update(collection, getattr(record, id_field), to_document(record), version)

    @staticmethod
    def delete(record: Any, version: int) -> Delete:
        collection, id_field, _ = RECORD_KINDS[type(record)]
        return Delete(collection, getattr(record, id_field), version)

    def commit(self, writes: list[Write]) -> None:
        self.store.commit(writes)
