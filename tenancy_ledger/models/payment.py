"""Payment model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from tenancy_ledger.models.enums import PaymentMethod, PaymentStatus, PaymentType


@dataclass
class Payment:
    """A single recorded payment toward a tenant's monthly obligation.

    Several payments may accumulate toward the same (tenant, month, type).
    ``payment_type`` of None is a legacy record and counts as rent.
    """

    payment_id: str
    tenant_id: str
    landlord_id: str
    amount: Decimal
    method: PaymentMethod
    month_key: str  # YYYY-MM
    status: PaymentStatus = PaymentStatus.PAID
    payment_type: PaymentType | None = PaymentType.RENT
    note: str = ""
    recorded_by: str | None = None
    paid_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_rent(self) -> bool:
        return self.payment_type is None or self.payment_type is PaymentType.RENT
