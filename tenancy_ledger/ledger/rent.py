"""Rent audit trail: every rent value a tenant has had, with a reason."""

import logging
from decimal import Decimal
from typing import Any

from tenancy_ledger.exceptions import InvalidEntityStateError
from tenancy_ledger.ledger.activity import ActivityRecorder
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.ledger.validation import to_amount
from tenancy_ledger.models import RentHistoryEntry, Tenant, now

logger = logging.getLogger(__name__)

INITIAL_REASON = "initial"


def current_rent(tenant: Tenant) -> Decimal:
    return tenant.rent


def history(tenant: Tenant) -> list[RentHistoryEntry]:
    """Chronological rent entries (a copy; the trail itself is append-only)."""
    return list(tenant.rent_history)


def is_consistent(tenant: Tenant) -> bool:
    """An assigned tenant's rent must equal the last history entry."""
    if not tenant.is_assigned or not tenant.rent_history:
        return True
    return tenant.rent == tenant.rent_history[-1].rent


def start_tenancy_rent(tenant: Tenant, rent: Decimal) -> RentHistoryEntry:
    """Set the opening rent of a new tenancy and append its ``initial`` entry.

    Mutates ``tenant`` only; the caller commits it together with the unit.
    """
    entry = RentHistoryEntry(rent=rent, changed_at=now(), reason=INITIAL_REASON)
    tenant.rent_history.append(entry)
    tenant.rent = rent
    return entry


class RentAuditTrail:
    """Owns ``Tenant.rent`` and ``Tenant.rent_history``."""

    def __init__(self, repo: Repository, activity: ActivityRecorder) -> None:
        self.repo = repo
        self.activity = activity

    def change_rent(self, tenant_id: str, new_rent: Any, reason: str = "") -> Tenant:
        """Append ``{rent, date, reason, prev_rent}`` and update the current rent.

        Re-running with the same rent and reason after a success is a no-op.
        """
        amount = to_amount(new_rent, "rent", positive=False)
        reason = (reason or "").strip() or "change"

        loaded = self.repo.load(Tenant, tenant_id)
        tenant = loaded.record
        if not tenant.is_assigned:
            raise InvalidEntityStateError(f"Tenant {tenant_id} has no unit, so no rent to change")

        tail = tenant.rent_history[-1] if tenant.rent_history else None
        if tail is not None and tail.rent == amount and tail.reason == reason and tenant.rent == amount:
            logger.debug("Rent change for %s already applied", tenant_id)
            return tenant

        previous = tenant.rent
        tenant.rent_history.append(
            RentHistoryEntry(rent=amount, changed_at=now(), reason=reason, prev_rent=previous)
        )
        tenant.rent = amount
        self.repo.commit([self.repo.update(tenant, loaded.version)])

        logger.info(
            "Rent changed for tenant %s: %s -> %s (%s)", tenant_id, previous, amount, reason,
            extra={"landlord_id": tenant.landlord_id, "tenant_id": tenant_id, "event_type": "tenant.rent_changed"},
        )
        self.activity.record(
            "rent_change",
            tenant_id,
            f"Rent {previous} → {amount}: {reason}",
            event_type="tenant.rent_changed",
            subject=tenant_id,
            data={"prev_rent": str(previous), "rent": str(amount), "reason": reason},
            landlord_id=tenant.landlord_id,
        )
        return tenant

    def current_rent(self, tenant_id: str) -> Decimal:
        return current_rent(self.repo.load(Tenant, tenant_id).record)

    def history(self, tenant_id: str) -> list[RentHistoryEntry]:
        return history(self.repo.load(Tenant, tenant_id).record)

    def audit(self, landlord_id: str | None = None) -> list[Tenant]:
        """Tenants whose rent disagrees with their history tail."""
        filters = {"landlord_id": landlord_id} if landlord_id else {}
        return [t for t in self.repo.find(Tenant, **filters) if not is_consistent(t)]
