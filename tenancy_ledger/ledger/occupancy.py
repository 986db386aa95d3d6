"""Occupancy manager: keeps ``Unit.is_vacant`` in step with ``Tenant.unit_id``.

Assign and unassign touch two records. Both writes go into a single
conditional commit, so another session either sees the tenancy fully
applied or not at all, and a concurrent change to either record makes the
commit fail instead of overwriting it.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from tenancy_ledger.exceptions import ConsistencyError, InvalidEntityStateError, ValidationError
from tenancy_ledger.ledger.activity import ActivityRecorder
from tenancy_ledger.ledger.rent import INITIAL_REASON, start_tenancy_rent
from tenancy_ledger.ledger.repository import Repository, Versioned
from tenancy_ledger.ledger.validation import to_amount, to_date
from tenancy_ledger.models import Tenant, Unit
from tenancy_ledger.store.base import Write

logger = logging.getLogger(__name__)

# Violation kinds
OCCUPIED_WITHOUT_TENANT = "occupied_without_tenant"
TENANT_ON_VACANT_UNIT = "tenant_on_vacant_unit"
TENANT_ON_MISSING_UNIT = "tenant_on_missing_unit"
UNIT_SHARED = "unit_shared"


@dataclass
class OccupancyViolation:
    kind: str
    unit_id: str
    tenant_ids: list[str] = field(default_factory=list)
    repaired: bool = False

    def describe(self) -> str:
        tenants = ", ".join(self.tenant_ids) or "-"
        return f"{self.kind}: unit={self.unit_id} tenants={tenants}"


@dataclass
class OccupancyReport:
    """Result of an occupancy audit or reconciliation pass."""

    units_checked: int = 0
    tenants_checked: int = 0
    violations: list[OccupancyViolation] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.violations

    @property
    def unrepaired(self) -> list[OccupancyViolation]:
        return [v for v in self.violations if not v.repaired]

    def raise_for_violations(self) -> None:
        """Raise :class:`ConsistencyError` if anything is still inconsistent."""
        remaining = self.unrepaired
        if remaining:
            details = "; ".join(v.describe() for v in remaining)
            raise ConsistencyError(f"{len(remaining)} occupancy violation(s): {details}")


class OccupancyManager:
    """Owns ``Unit.is_vacant`` and ``Tenant.unit_id``."""

    def __init__(self, repo: Repository, activity: ActivityRecorder) -> None:
        self.repo = repo
        self.activity = activity

    def assign(
        self,
        tenant_id: str,
        unit_id: str,
        rent: Any,
        advance: Any = 0,
        move_in_date: date | str | None = None,
        notes: str = "",
    ) -> Tenant:
        """Move an unassigned tenant into a vacant unit.

        Sets the tenant's unit, rent, advance, move-in date and notes, appends
        an ``initial`` rent entry and marks the unit occupied. Repeating the
        call with the same arguments after it succeeded returns the tenant
        without writing.
        """
        rent_amount = to_amount(rent, "rent", positive=False)
        advance_amount = to_amount(advance or 0, "advance", positive=False)
        moved_in = to_date(move_in_date, "move_in_date")

        loaded_tenant = self.repo.load(Tenant, tenant_id)
        loaded_unit = self.repo.load(Unit, unit_id)
        tenant, unit = loaded_tenant.record, loaded_unit.record

        if tenant.landlord_id != unit.landlord_id:
            raise ValidationError(f"Tenant {tenant_id} and unit {unit_id} belong to different landlords")

        if self._already_assigned(tenant, unit, rent_amount, advance_amount):
            logger.debug("Tenant %s already assigned to unit %s", tenant_id, unit_id)
            return tenant

        if tenant.is_assigned:
            raise InvalidEntityStateError(f"Tenant {tenant_id} is already assigned to unit {tenant.unit_id}")
        self._require_vacant(unit)

        tenant.unit_id = unit_id
        tenant.advance = advance_amount
        tenant.move_in_date = moved_in
        tenant.notes = notes or ""
        start_tenancy_rent(tenant, rent_amount)
        unit.is_vacant = False

        self.repo.commit([
            self.repo.update(tenant, loaded_tenant.version),
            self.repo.update(unit, loaded_unit.version),
        ])

        logger.info(
            "Assigned tenant %s to unit %s at rent %s", tenant_id, unit_id, rent_amount,
            extra={"landlord_id": tenant.landlord_id, "tenant_id": tenant_id, "unit_id": unit_id,
                   "event_type": "tenant.assigned"},
        )
        self.record_assigned(tenant, unit)
        return tenant

    def admit(
        self,
        tenant: Tenant,
        unit_id: str,
        rent: Any = None,
        advance: Any = 0,
        move_in_date: date | str | None = None,
        notes: str = "",
        extra_writes: Sequence[Write] = (),
    ) -> Unit:
        """Create a new ``tenant`` already living in ``unit_id``.

        The tenant Put, ``extra_writes`` and the unit Update go into one
        commit guarded by the unit's version, so a rejected or lost admission
        leaves no record behind. ``rent`` defaults to the unit's listed rent.
        The caller records the activity once it has the returned unit.
        """
        loaded_unit = self.repo.load(Unit, unit_id)
        unit = loaded_unit.record
        rent_amount = unit.rent if rent is None else to_amount(rent, "rent", positive=False)
        advance_amount = to_amount(advance or 0, "advance", positive=False)
        moved_in = to_date(move_in_date, "move_in_date")
        if tenant.landlord_id != unit.landlord_id:
            raise ValidationError(f"Unit {unit_id} does not belong to landlord {tenant.landlord_id}")
        self._require_vacant(unit)

        tenant.unit_id = unit_id
        tenant.advance = advance_amount
        tenant.move_in_date = moved_in
        tenant.notes = notes or ""
        start_tenancy_rent(tenant, rent_amount)
        unit.is_vacant = False

        self.repo.commit([
            self.repo.put(tenant),
            *extra_writes,
            self.repo.update(unit, loaded_unit.version),
        ])
        logger.info(
            "Admitted new tenant %s into unit %s at rent %s", tenant.tenant_id, unit_id, rent_amount,
            extra={"landlord_id": tenant.landlord_id, "tenant_id": tenant.tenant_id, "unit_id": unit_id},
        )
        return unit

    def _require_vacant(self, unit: Unit) -> None:
        if not unit.is_vacant:
            raise InvalidEntityStateError(f"Unit {unit.unit_no} ({unit.unit_id}) is already occupied")
        occupants = [t.tenant_id for t in self.repo.find(Tenant, unit_id=unit.unit_id)]
        if occupants:
            raise InvalidEntityStateError(f"Unit {unit.unit_id} is referenced by tenant(s) {occupants}")

    def record_assigned(self, tenant: Tenant, unit: Unit) -> None:
        self.activity.record(
            "assign",
            tenant.tenant_id,
            f"Tenant → Unit {unit.unit_no}",
            event_type="tenant.assigned",
            subject=tenant.tenant_id,
            data={"unit_id": unit.unit_id, "rent": str(tenant.rent), "advance": str(tenant.advance)},
            landlord_id=tenant.landlord_id,
        )

    @staticmethod
    def _already_assigned(tenant: Tenant, unit: Unit, rent: Decimal, advance: Decimal) -> bool:
        if tenant.unit_id != unit.unit_id or unit.is_vacant or not tenant.rent_history:
            return False
        tail = tenant.rent_history[-1]
        return tail.reason == INITIAL_REASON and tail.rent == rent and tenant.rent == rent and tenant.advance == advance

    def unassign(self, tenant_id: str) -> Tenant:
        """Release the tenant's unit and clear unit, rent and advance.

        Rent history is kept. Calling this on an unassigned tenant does
        nothing.
        """
        loaded_tenant = self.repo.load(Tenant, tenant_id)
        tenant = loaded_tenant.record
        if not tenant.is_assigned:
            logger.debug("Tenant %s has no unit; nothing to unassign", tenant_id)
            return tenant

        unit_id = tenant.unit_id
        writes: list[Write] = []
        loaded_unit = self.repo.get(Unit, unit_id)
        if loaded_unit is not None and not loaded_unit.record.is_vacant:
            others = [t for t in self.repo.find(Tenant, unit_id=unit_id) if t.tenant_id != tenant_id]
            if not others:
                loaded_unit.record.is_vacant = True
                writes.append(self.repo.update(loaded_unit.record, loaded_unit.version))

        tenant.unit_id = None
        tenant.rent = Decimal("0")
        tenant.advance = Decimal("0")
        writes.append(self.repo.update(tenant, loaded_tenant.version))
        self.repo.commit(writes)

        logger.info(
            "Unassigned tenant %s from unit %s", tenant_id, unit_id,
            extra={"landlord_id": tenant.landlord_id, "tenant_id": tenant_id, "unit_id": unit_id,
                   "event_type": "tenant.unassigned"},
        )
        self.activity.record(
            "unassign",
            tenant_id,
            "Tenant removed from unit",
            event_type="tenant.unassigned",
            subject=tenant_id,
            data={"unit_id": unit_id},
            landlord_id=tenant.landlord_id,
        )
        return tenant

    # Maintenance

    def audit(self, landlord_id: str | None = None) -> OccupancyReport:
        """Report every unit/tenant pair that breaks the vacancy rule. Read-only."""
        units, tenants = self._snapshot(landlord_id)
        return self._inspect(units, tenants)

    def reconcile(self, landlord_id: str | None = None) -> OccupancyReport:
        """Audit, then repair whichever side of each broken pair is outdated.

        The tenant's ``unit_id`` is treated as the truth. A unit shared by
        several tenants is only reported; choosing who stays is a human call.
        """
        units, tenants = self._snapshot(landlord_id)
        report = self._inspect(units, tenants)
        tenants_by_id = {t.record.tenant_id: t for t in tenants}

        for violation in report.violations:
            writes: list[Write] = []
            if violation.kind == OCCUPIED_WITHOUT_TENANT:
                unit = units[violation.unit_id]
                unit.record.is_vacant = True
                writes.append(self.repo.update(unit.record, unit.version))
            elif violation.kind == TENANT_ON_VACANT_UNIT:
                unit = units[violation.unit_id]
                unit.record.is_vacant = False
                writes.append(self.repo.update(unit.record, unit.version))
            elif violation.kind == TENANT_ON_MISSING_UNIT:
                for tenant_id in violation.tenant_ids:
                    tenant = tenants_by_id[tenant_id]
                    tenant.record.unit_id = None
                    tenant.record.rent = Decimal("0")
                    tenant.record.advance = Decimal("0")
                    writes.append(self.repo.update(tenant.record, tenant.version))
            if not writes:
                continue

            self.repo.commit(writes)
            violation.repaired = True
            logger.warning("Repaired %s", violation.describe())
            self.activity.record(
                "reconcile",
                "system",
                f"Repaired {violation.describe()}",
                event_type="occupancy.repaired",
                subject=violation.unit_id,
                data={"kind": violation.kind, "tenant_ids": violation.tenant_ids},
                landlord_id=landlord_id,
            )
        return report

    def _snapshot(
        self, landlord_id: str | None
    ) -> tuple[dict[str, Versioned[Unit]], list[Versioned[Tenant]]]:
        filters = {"landlord_id": landlord_id} if landlord_id else {}
        units = {u.record.unit_id: u for u in self.repo.find_versioned(Unit, **filters)}
        tenants = self.repo.find_versioned(Tenant, **filters)
        return units, tenants

    def _inspect(
        self, units: dict[str, Versioned[Unit]], tenants: list[Versioned[Tenant]]
    ) -> OccupancyReport:
        report = OccupancyReport(units_checked=len(units), tenants_checked=len(tenants))

        occupants: dict[str, list[str]] = {}
        for loaded in tenants:
            tenant = loaded.record
            if tenant.unit_id is not None:
                occupants.setdefault(tenant.unit_id, []).append(tenant.tenant_id)

        for unit_id, tenant_ids in occupants.items():
            if unit_id not in units:
                # Unit may belong to another landlord's scope; only flag truly missing units
                if not self.repo.exists(Unit, unit_id):
                    report.violations.append(OccupancyViolation(TENANT_ON_MISSING_UNIT, unit_id, tenant_ids))
                continue
            if len(tenant_ids) > 1:
                report.violations.append(OccupancyViolation(UNIT_SHARED, unit_id, tenant_ids))
            if units[unit_id].record.is_vacant:
                report.violations.append(OccupancyViolation(TENANT_ON_VACANT_UNIT, unit_id, tenant_ids))

        for unit_id, loaded in units.items():
            if not loaded.record.is_vacant and unit_id not in occupants:
                report.violations.append(OccupancyViolation(OCCUPIED_WITHOUT_TENANT, unit_id))

        return report
