"""Notice ticket model."""

from dataclasses import dataclass, field
from datetime import datetime

from tenancy_ledger.models.enums import NoticeStatus


@dataclass
class StatusChange:
    """One entry of a notice's append-only status history."""

    status: NoticeStatus
    note: str
    by: str
    at: datetime


@dataclass
class Notice:
    """A message thread between a landlord and one tenant."""

    notice_id: str
    landlord_id: str
    from_id: str
    to_id: str
    subject: str
    message: str
    status: NoticeStatus = NoticeStatus.OPEN
    status_note: str = ""
    read: bool = False
    status_history: list[StatusChange] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
