"""Activity log model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ActivityLog:
    """Append-only record of a completed command."""

    log_id: str
    action: str
    user_id: str
    detail: str
    ts: datetime
