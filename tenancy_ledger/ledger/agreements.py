"""Rental agreements: point-in-time snapshots of a tenancy."""

import logging
from datetime import date

from tenancy_ledger.exceptions import InvalidEntityStateError, ValidationError
from tenancy_ledger.ledger.activity import ActivityRecorder
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.ledger.validation import to_date
from tenancy_ledger.models import Agreement, AgreementStatus, Tenant, Unit, new_id, now

logger = logging.getLogger(__name__)


class AgreementBook:
    def __init__(self, repo: Repository, activity: ActivityRecorder) -> None:
        self.repo = repo
        self.activity = activity

    def create_agreement(
        self,
        tenant_id: str,
        start_date: date | str | None = None,
        duration_months: int = 12,
        terms: str = "",
        conditions: str | None = None,
    ) -> Agreement:
        """Snapshot the tenant's current tenancy.

        Start date defaults to the move-in date (or today); conditions
        default to the unit's conditions text.
        """
        if duration_months < 1:
            raise ValidationError("duration_months must be at least 1")
        tenant = self.repo.load(Tenant, tenant_id).record
        if not tenant.is_assigned:
            raise InvalidEntityStateError(f"Tenant {tenant_id} has no unit to agree on")
        unit = self.repo.load(Unit, tenant.unit_id).record

        agreement = Agreement(
            agreement_id=new_id(),
            landlord_id=tenant.landlord_id,
            tenant_id=tenant_id,
            unit_id=unit.unit_id,
            property_id=unit.property_id,
            tenant_name=tenant.name,
            unit_no=unit.unit_no,
            rent=tenant.rent,
            advance=tenant.advance,
            start_date=to_date(start_date, "start_date") or tenant.move_in_date or date.today(),
            duration_months=duration_months,
            terms=terms or "",
            conditions=unit.conditions if conditions is None else conditions,
            created_at=now(),
        )
        self.repo.commit([self.repo.put(agreement)])

        logger.info(
            "Agreement %s created for tenant %s", agreement.agreement_id, tenant_id,
            extra={"landlord_id": tenant.landlord_id, "tenant_id": tenant_id, "unit_id": unit.unit_id,
                   "event_type": "agreement.created"},
        )
        self.activity.record(
            "agreement",
            tenant.landlord_id,
            f"Agreement for {tenant.name} in {unit.unit_no}",
            event_type="agreement.created",
            subject=agreement.agreement_id,
            data={"tenant_id": tenant_id, "rent": str(agreement.rent)},
            landlord_id=tenant.landlord_id,
        )
        return agreement

    def end_agreement(self, agreement_id: str) -> Agreement:
        loaded = self.repo.load(Agreement, agreement_id)
        agreement = loaded.record
        if agreement.status is AgreementStatus.ENDED:
            return agreement
        agreement.status = AgreementStatus.ENDED
        agreement.ended_at = now()
        self.repo.commit([self.repo.update(agreement, loaded.version)])

        logger.info(
            "Agreement %s ended", agreement_id,
            extra={"landlord_id": agreement.landlord_id, "tenant_id": agreement.tenant_id,
                   "event_type": "agreement.ended"},
        )
        self.activity.record(
            "agreement_end",
            agreement.landlord_id,
            f"Agreement for {agreement.tenant_name} ended",
            event_type="agreement.ended",
            subject=agreement_id,
            landlord_id=agreement.landlord_id,
        )
        return agreement

    def agreements_of(self, landlord_id: str, tenant_id: str | None = None) -> list[Agreement]:
        filters = {"landlord_id": landlord_id}
        if tenant_id:
            filters["tenant_id"] = tenant_id
        return self.repo.find(Agreement, **filters)
