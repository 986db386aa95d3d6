"""Tenant model and its rent audit trail entries."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from tenancy_ledger.models.enums import RecordStatus


@dataclass
class RentHistoryEntry:
    """One immutable rent change."""

    rent: Decimal
    changed_at: datetime
    reason: str
    prev_rent: Decimal | None = None


@dataclass
class Tenant:
    """Tenant of one landlord, optionally occupying one unit.

    ``unit_id`` is owned by the occupancy manager; ``rent`` and
    ``rent_history`` by the rent audit trail.
    """

    tenant_id: str
    landlord_id: str
    name: str
    phone: str = ""
    email: str = ""
    nid: str = ""
    photo: str = ""
    members: int = 1
    user_id: str | None = None  # None for landlord-created tenants
    unit_id: str | None = None
    rent: Decimal = Decimal("0")
    advance: Decimal = Decimal("0")
    move_in_date: date | None = None
    notes: str = ""
    rent_history: list[RentHistoryEntry] = field(default_factory=list)
    status: RecordStatus = RecordStatus.ACTIVE
    created_at: datetime | None = None

    @property
    def is_assigned(self) -> bool:
        return self.unit_id is not None
