"""Notice tickets between a landlord and tenants.

State machine::

    open ──► in_progress ──► resolved
      └────────────────────────┘

``resolved`` is terminal: there is no reopen, and any transition out of it
is rejected with :class:`InvalidEntityStateError`. Moving to the status a
ticket already has is rejected as well. ``read`` is independent of status.
"""

import logging

from tenancy_ledger.exceptions import InvalidEntityStateError, ReferentialIntegrityError, ValidationError
from tenancy_ledger.ledger.activity import ActivityRecorder
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.ledger.validation import require_text, to_enum
from tenancy_ledger.models import Landlord, Notice, NoticeStatus, StatusChange, Tenant, new_id, now

logger = logging.getLogger(__name__)

TRANSITIONS: dict[NoticeStatus, frozenset[NoticeStatus]] = {
    NoticeStatus.OPEN: frozenset({NoticeStatus.IN_PROGRESS, NoticeStatus.RESOLVED}),
    NoticeStatus.IN_PROGRESS: frozenset({NoticeStatus.RESOLVED}),
    NoticeStatus.RESOLVED: frozenset(),
}


def can_transition(current: NoticeStatus, target: NoticeStatus) -> bool:
    return target in TRANSITIONS[current]


class NoticeBoard:
    """Create notices, move them through the state machine, track reads."""

    def __init__(self, repo: Repository, activity: ActivityRecorder) -> None:
        self.repo = repo
        self.activity = activity

    def _landlord_of_pair(self, from_id: str, to_id: str) -> str:
        """Return the landlord id if exactly one side is a tenant of the other."""
        sender_landlord = self.repo.get(Landlord, from_id)
        if sender_landlord is not None:
            tenant = self.repo.get(Tenant, to_id)
            if tenant is None or tenant.record.landlord_id != from_id:
                raise ReferentialIntegrityError(f"Tenant {to_id} not found for landlord {from_id}")
            return from_id

        sender_tenant = self.repo.get(Tenant, from_id)
        if sender_tenant is None:
            raise ReferentialIntegrityError(f"Sender {from_id} is neither a landlord nor a tenant")
        if sender_tenant.record.landlord_id != to_id:
            raise ValidationError(f"Tenant {from_id} can only write to their own landlord")
        return to_id

    def send_notice(self, from_id: str, to_id: str, subject: str, message: str) -> Notice:
        """Open a ticket from a tenant to their landlord or the reverse."""
        subject = require_text(subject, "subject")
        message = require_text(message, "message")
        landlord_id = self._landlord_of_pair(from_id, to_id)

        notice = self._new_notice(landlord_id, from_id, to_id, subject, message)
        self.repo.commit([self.repo.put(notice)])

        logger.info(
            "Notice %s sent %s -> %s", notice.notice_id, from_id, to_id,
            extra={"landlord_id": landlord_id, "event_type": "notice.sent"},
        )
        self._record_sent(notice)
        return notice

    def broadcast(self, landlord_id: str, subject: str, message: str) -> list[Notice]:
        """Fan one message out as an independent notice per tenant."""
        subject = require_text(subject, "subject")
        message = require_text(message, "message")
        self.repo.load(Landlord, landlord_id)

        tenants = self.repo.find(Tenant, landlord_id=landlord_id)
        notices = [
            self._new_notice(landlord_id, landlord_id, t.tenant_id, subject, message) for t in tenants
        ]
        if notices:
            self.repo.commit([self.repo.put(n) for n in notices])

        logger.info(
            "Broadcast from %s to %d tenants", landlord_id, len(notices),
            extra={"landlord_id": landlord_id, "event_type": "notice.broadcast"},
        )
        self.activity.record(
            "broadcast",
            landlord_id,
            f"Notice to {len(notices)} tenants: {subject}",
            event_type="notice.broadcast",
            subject=landlord_id,
            data={"notice_ids": [n.notice_id for n in notices], "subject": subject},
            landlord_id=landlord_id,
        )
        return notices

    @staticmethod
    def _new_notice(landlord_id: str, from_id: str, to_id: str, subject: str, message: str) -> Notice:
        created = now()
        return Notice(
            notice_id=new_id(),
            landlord_id=landlord_id,
            from_id=from_id,
            to_id=to_id,
            subject=subject,
            message=message,
            created_at=created,
            updated_at=created,
        )

    def _record_sent(self, notice: Notice) -> None:
        self.activity.record(
            "notice",
            notice.from_id,
            f"Notice to {notice.to_id}: {notice.subject}",
            event_type="notice.sent",
            subject=notice.notice_id,
            data={"from_id": notice.from_id, "to_id": notice.to_id, "subject": notice.subject},
            landlord_id=notice.landlord_id,
        )

    def update_status(self, notice_id: str, status: NoticeStatus | str, by: str, note: str = "") -> Notice:
        """Apply a transition and append exactly one history entry."""
        target = to_enum(NoticeStatus, status, "status")
        actor = require_text(by, "by")

        loaded = self.repo.load(Notice, notice_id)
        notice = loaded.record
        if actor not in (notice.from_id, notice.to_id):
            raise ValidationError(f"{actor} is not a party to notice {notice_id}")
        if not can_transition(notice.status, target):
            raise InvalidEntityStateError(
                f"Notice {notice_id} cannot move from {notice.status.value} to {target.value}"
            )

        changed = now()
        notice.status_history.append(StatusChange(status=target, note=note or "", by=actor, at=changed))
        notice.status = target
        notice.status_note = note or ""
        notice.updated_at = changed
        self.repo.commit([self.repo.update(notice, loaded.version)])

        logger.info(
            "Notice %s -> %s by %s", notice_id, target.value, actor,
            extra={"landlord_id": notice.landlord_id, "event_type": "notice.status_changed"},
        )
        self.activity.record(
            "notice_status",
            actor,
            f"Notice {notice.subject}: {target.value}",
            event_type="notice.status_changed",
            subject=notice_id,
            data={"status": target.value, "note": notice.status_note},
            landlord_id=notice.landlord_id,
        )
        return notice

    def mark_read(self, notice_id: str, reader_id: str) -> Notice:
        """Flag the notice read when its recipient opens it.

        The sender viewing their own notice, or a repeat view, changes nothing.
        """
        loaded = self.repo.load(Notice, notice_id)
        notice = loaded.record
        if reader_id not in (notice.from_id, notice.to_id):
            raise ValidationError(f"{reader_id} is not a party to notice {notice_id}")
        if reader_id == notice.from_id or notice.read:
            return notice

        notice.read = True
        self.repo.commit([self.repo.update(notice, loaded.version)])
        logger.debug("Notice %s read by %s", notice_id, reader_id)
        return notice

    def notices_for(self, party_id: str) -> list[Notice]:
        """Sent and received notices, newest first."""
        received = self.repo.find(Notice, to_id=party_id)
        sent = self.repo.find(Notice, from_id=party_id)
        by_id = {n.notice_id: n for n in received + sent}
        return sorted(by_id.values(), key=lambda n: n.created_at or now(), reverse=True)

    def unread_count(self, party_id: str) -> int:
        return sum(1 for n in self.repo.find(Notice, to_id=party_id) if not n.read)

    def open_count(self, landlord_id: str) -> int:
        return sum(1 for n in self.repo.find(Notice, landlord_id=landlord_id) if n.status is not NoticeStatus.RESOLVED)
