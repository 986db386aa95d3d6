"""Custom exception hierarchy for tenancy-ledger."""


class LedgerError(Exception):
    """Base exception for all tenancy-ledger errors."""


class ValidationError(LedgerError):
    """Raised when command input is missing or invalid."""


class InvalidEntityStateError(ValidationError):
    """Raised when an entity is in an invalid state for the operation."""


class EntityNotFoundError(LedgerError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class ConsistencyError(LedgerError):
    """Raised when an audit finds records violating a cross-record invariant."""


class StoreError(LedgerError):
    """Raised when the persistence layer fails."""


class TransientStoreError(StoreError):
    """Raised for retryable I/O failures; writes have an unknown outcome."""


class ConcurrencyConflictError(StoreError):
    """Raised when a conditional write loses against a concurrent change."""


class ConfigurationError(LedgerError):
    """Raised when configuration is invalid or missing."""


class SinkError(LedgerError):
    """Raised when an activity sink operation fails."""
