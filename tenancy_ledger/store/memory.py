"""Thread-safe in-memory document store."""

import copy
import threading
from typing import Any

from tenancy_ledger.exceptions import ConcurrencyConflictError
from tenancy_ledger.store.base import Delete, Document, LedgerStore, Put, Update, Write


class InMemoryLedgerStore(LedgerStore):
    """In-memory store; documents are deep-copied on the way in and out."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, tuple[int, dict]]] = {}
        self._lock = threading.RLock()

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._lock:
            entry = self._collections.get(collection, {}).get(doc_id)
            if entry is None:
                return None
            version, data = entry
            return Document(collection, doc_id, version, copy.deepcopy(data))

    def find(self, collection: str, **equals: Any) -> list[Document]:
        with self._lock:
            docs = []
            for doc_id, (version, data) in self._collections.get(collection, {}).items():
                if all(data.get(k) == v for k, v in equals.items()):
                    docs.append(Document(collection, doc_id, version, copy.deepcopy(data)))
            return docs

    def commit(self, writes: list[Write]) -> None:
        with self._lock:
            # Stage against current state first so a failing write leaves nothing applied
            staged: dict[tuple[str, str], tuple[int, dict] | None] = {}
            for write in writes:
                key = (write.collection, write.doc_id)
                current = staged[key] if key in staged else self._collections.get(write.collection, {}).get(write.doc_id)

                if isinstance(write, Put):
                    if current is not None:
                        raise ConcurrencyConflictError(f"{write.collection}/{write.doc_id} already exists")
                    staged[key] = (1, copy.deepcopy(write.data))
                elif isinstance(write, Update):
                    self._check_version(write, current)
                    staged[key] = (current[0] + 1, copy.deepcopy(write.data))
                elif isinstance(write, Delete):
                    self._check_version(write, current)
                    staged[key] = None

            for (collection, doc_id), entry in staged.items():
                docs = self._collections.setdefault(collection, {})
                if entry is None:
                    docs.pop(doc_id, None)
                else:
                    docs[doc_id] = entry

    @staticmethod
    def _check_version(write: Update | Delete, current: tuple[int, dict] | None) -> None:
        if current is None:
            raise ConcurrencyConflictError(f"{write.collection}/{write.doc_id} no longer exists")
        if current[0] != write.expected_version:
            raise ConcurrencyConflictError(
                f"{write.collection}/{write.doc_id} is at version {current[0]}, "
                f"expected {write.expected_version}"
            )
