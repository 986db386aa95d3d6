"""Rental agreement snapshot model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from tenancy_ledger.models.enums import AgreementStatus


@dataclass
class Agreement:
    """Denormalized snapshot of a tenancy; never follows later rent changes."""

    agreement_id: str
    landlord_id: str
    tenant_id: str
    unit_id: str
    property_id: str
    tenant_name: str
    unit_no: str
    rent: Decimal
    advance: Decimal
    start_date: date
    duration_months: int = 12
    terms: str = ""
    conditions: str = ""
    status: AgreementStatus = AgreementStatus.ACTIVE
    ended_at: datetime | None = None
    created_at: datetime | None = None
