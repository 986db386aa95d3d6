"""Base models and helpers shared across record kinds."""

import secrets
import string
import uuid
from dataclasses import dataclass, field
from datetime import datetime

_INVITE_ALPHABET = string.ascii_uppercase + string.digits


def new_id() -> str:
    """Return a new opaque record id."""
    return uuid.uuid4().hex


def new_invite_code() -> str:
    """Return a short human-typable landlord invite code (``MN-XXXX``)."""
    return "MN-" + "".join(secrets.choice(_INVITE_ALPHABET) for _ in range(4))


def now() -> datetime:
    """Current local time, second precision."""
    return datetime.now().replace(microsecond=0)


@dataclass
class Event:
    """Standard event envelope for the activity feed."""

    event_id: str
    event_type: str  # entity.action (e.g., tenant.assigned)
    event_time: datetime
    source: str  # Service/system that generated
    subject: str  # Entity ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
