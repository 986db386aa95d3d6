"""Recording and correcting payments."""

import logging
from typing import Any

from tenancy_ledger.exceptions import ValidationError
from tenancy_ledger.ledger.activity import ActivityRecorder
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.ledger.validation import to_amount, to_enum
from tenancy_ledger.models import (
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    Tenant,
    new_id,
    now,
)
from tenancy_ledger.months import validate_month_key

logger = logging.getLogger(__name__)


class PaymentBook:
    """Payments are history: only amount/note edits and deletes are allowed."""

    def __init__(self, repo: Repository, activity: ActivityRecorder, currency: str = "BDT") -> None:
        self.repo = repo
        self.activity = activity
        self.currency = currency

    def record_payment(
        self,
        tenant_id: str,
        amount: Any,
        method: PaymentMethod | str,
        month_key: str,
        status: PaymentStatus | str = PaymentStatus.PAID,
        payment_type: PaymentType | str | None = PaymentType.RENT,
        note: str = "",
        recorded_by: str | None = None,
    ) -> Payment:
        """Record a confirmed payment. Overpayment is accepted as-is."""
        value = to_amount(amount, "amount")
        pay_method = to_enum(PaymentMethod, method, "method")
        pay_status = to_enum(PaymentStatus, status, "status")
        pay_type = to_enum(PaymentType, payment_type, "type") if payment_type is not None else None
        validate_month_key(month_key)

        tenant = self.repo.load(Tenant, tenant_id).record

        payment = Payment(
            payment_id=new_id(),
            tenant_id=tenant_id,
            landlord_id=tenant.landlord_id,
            amount=value,
            method=pay_method,
            month_key=month_key,
            status=pay_status,
            payment_type=pay_type,
            note=note or "",
            recorded_by=recorded_by,
            paid_at=now(),
        )
        self.repo.commit([self.repo.put(payment)])

        logger.info(
            "Recorded payment %s: %s for %s (%s)", payment.payment_id, value, tenant_id, month_key,
            extra={"landlord_id": tenant.landlord_id, "tenant_id": tenant_id, "event_type": "payment.recorded"},
        )
        self.activity.record(
            "payment",
            recorded_by or tenant_id,
            f"{value} {self.currency} via {pay_method.value}",
            event_type="payment.recorded",
            subject=payment.payment_id,
            data={
                "tenant_id": tenant_id,
                "amount": str(value),
                "month_key": month_key,
                "type": pay_type.value if pay_type else None,
            },
            landlord_id=tenant.landlord_id,
        )
        return payment

    def edit_payment(
        self,
        payment_id: str,
        amount: Any = None,
        note: str | None = None,
        edited_by: str | None = None,
    ) -> Payment:
        """Correct the amount and/or note of a recorded payment."""
        if amount is None and note is None:
            raise ValidationError("Nothing to edit: give amount and/or note")

        loaded = self.repo.load(Payment, payment_id)
        payment = loaded.record
        previous = payment.amount
        if amount is not None:
            payment.amount = to_amount(amount, "amount")
        if note is not None:
            payment.note = note
        payment.updated_at = now()
        self.repo.commit([self.repo.update(payment, loaded.version)])

        logger.info(
            "Edited payment %s: amount %s -> %s", payment_id, previous, payment.amount,
            extra={"landlord_id": payment.landlord_id, "tenant_id": payment.tenant_id, "event_type": "payment.edited"},
        )
        self.activity.record(
            "payment_edit",
            edited_by or payment.tenant_id,
            f"Payment {payment_id}: {previous} → {payment.amount} {self.currency}",
            event_type="payment.edited",
            subject=payment_id,
            data={"prev_amount": str(previous), "amount": str(payment.amount), "note": payment.note},
            landlord_id=payment.landlord_id,
        )
        return payment

    def delete_payment(self, payment_id: str, deleted_by: str | None = None) -> Payment:
        loaded = self.repo.load(Payment, payment_id)
        payment = loaded.record
        self.repo.commit([self.repo.delete(payment, loaded.version)])

        logger.info(
            "Deleted payment %s", payment_id,
            extra={"landlord_id": payment.landlord_id, "tenant_id": payment.tenant_id, "event_type": "payment.deleted"},
        )
        self.activity.record(
            "payment_delete",
            deleted_by or payment.tenant_id,
            f"Payment {payment_id} ({payment.amount} {self.currency}, {payment.month_key}) deleted",
            event_type="payment.deleted",
            subject=payment_id,
            data={"tenant_id": payment.tenant_id, "amount": str(payment.amount), "month_key": payment.month_key},
            landlord_id=payment.landlord_id,
        )
        return payment

    def payments_of_tenant(self, tenant_id: str) -> list[Payment]:
        """Newest first."""
        payments = self.repo.find(Payment, tenant_id=tenant_id)
        payments.sort(key=lambda p: (p.month_key, p.paid_at or now()), reverse=True)
        return payments

    def payments_for_month(self, landlord_id: str, month_key: str) -> list[Payment]:
        validate_month_key(month_key)
        tenant_ids = {t.tenant_id for t in self.repo.find(Tenant, landlord_id=landlord_id)}
        return [p for p in self.repo.find(Payment, month_key=month_key) if p.tenant_id in tenant_ids]
