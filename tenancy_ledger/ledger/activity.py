"""Activity log and event feed for completed commands."""

import logging
from typing import Any, Protocol

from tenancy_ledger.exceptions import SinkError, StoreError
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.models import ActivityLog, Event, new_id, now

logger = logging.getLogger(__name__)

EVENT_SOURCE = "tenancy-ledger"


class EventSink(Protocol):
    """Anything that can receive ledger events."""

    def publish(self, event: Event) -> None: ...

    def close(self) -> None: ...


class ActivityRecorder:
    """Write one log entry and one event per successful command.

    The command has already been committed when this runs, so failures here
    are logged and never raised.
    """

    def __init__(self, repo: Repository, sink: EventSink | None = None) -> None:
        self.repo = repo
        self.sink = sink

    def record(
        self,
        action: str,
        user_id: str,
        detail: str,
        *,
        event_type: str,
        subject: str,
        data: dict[str, Any] | None = None,
        landlord_id: str | None = None,
    ) -> None:
        context = {"landlord_id": landlord_id, "event_type": event_type}
        entry = ActivityLog(log_id=new_id(), action=action, user_id=user_id, detail=detail, ts=now())
        try:
            self.repo.commit([self.repo.put(entry)])
        except StoreError:
            logger.error("Failed to write activity log for %s", action, exc_info=True, extra=context)

        if self.sink is None:
            return
        event = Event(
            event_id=new_id(),
            event_type=event_type,
            event_time=entry.ts,
            source=EVENT_SOURCE,
            subject=subject,
            data=data or {},
            metadata={"landlord_id": landlord_id, "user_id": user_id},
        )
        try:
            self.sink.publish(event)
        except SinkError:
            logger.error("Failed to publish %s for %s", event_type, subject, exc_info=True, extra=context)

    def recent(self, limit: int = 100) -> list[ActivityLog]:
        """Newest entries first."""
        # Stores return insertion order; reverse first so ties stay newest-first
        logs = list(reversed(self.repo.find(ActivityLog)))
        logs.sort(key=lambda entry: entry.ts, reverse=True)
        return logs[:limit]
