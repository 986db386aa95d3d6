"""Document stores holding the ledger's records."""

from tenancy_ledger.store.base import (
    COLLECTIONS,
    Delete,
    Document,
    LedgerStore,
    Put,
    Update,
    Write,
)
from tenancy_ledger.store.memory import InMemoryLedgerStore

__all__ = [
    "COLLECTIONS",
    "Delete",
    "Document",
    "InMemoryLedgerStore",
    "LedgerStore",
    "Put",
    "Update",
    "Write",
    "build_store",
]


def build_store(config) -> LedgerStore:
    """Return the backend selected by ``config.store_backend``."""
    if config.store_backend == "postgres":
        from tenancy_ledger.store.postgres import PostgresLedgerStore

        store = PostgresLedgerStore(config.postgres)
        store.create_schema()
        return store
    return InMemoryLedgerStore()
