"""Document store abstraction for ledger records."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

# Collection names
LANDLORDS = "landlords"
USERS = "users"
PROPERTIES = "properties"
UNITS = "units"
TENANTS = "tenants"
PAYMENTS = "payments"
NOTICES = "notices"
AGREEMENTS = "agreements"
EXPENSES = "expenses"
LOGS = "logs"

COLLECTIONS = (
    LANDLORDS,
    USERS,
    PROPERTIES,
    UNITS,
    TENANTS,
    PAYMENTS,
    NOTICES,
    AGREEMENTS,
    EXPENSES,
    LOGS,
)


@dataclass(frozen=True)
class Document:
    """A stored document and the version it was read at."""

    collection: str
    id: str
    version: int
    data: dict


@dataclass(frozen=True)
class Put:
    """Create a document; fails if the id is taken."""

    collection: str
    doc_id: str
    data: dict


@dataclass(frozen=True)
class Update:
    """Replace a document if it is still at ``expected_version``."""

    collection: str
    doc_id: str
    data: dict
    expected_version: int


@dataclass(frozen=True)
class Delete:
    """Remove a document if it is still at ``expected_version``."""

    collection: str
    doc_id: str
    expected_version: int


Write = Put | Update | Delete


class LedgerStore(ABC):
    """Key/value document store with an all-or-nothing conditional commit.

    The store knows nothing about record kinds or references between them;
    those rules live in the ledger components.
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Document | None:
        """Fetch one document, or None if absent."""

    @abstractmethod
    def find(self, collection: str, **equals: Any) -> list[Document]:
        """Return documents whose top-level fields equal the given values."""

    @abstractmethod
    def commit(self, writes: list[Write]) -> None:
        """Apply all writes or none.

        Raises
        ------
        ConcurrencyConflictError
            A ``Put`` id already exists, or an ``Update``/``Delete`` target is
            missing or not at its expected version.
        TransientStoreError
            The backend failed; the outcome of the commit is unknown.
        """

    def close(self) -> None:
        """Release backend resources."""

    def summary(self) -> dict[str, int]:
        """Return document counts per collection."""
        return {name: len(self.find(name)) for name in COLLECTIONS}
