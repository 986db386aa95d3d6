"""Landlord and user profile models."""

from dataclasses import dataclass
from datetime import datetime

from tenancy_ledger.models.enums import RecordStatus, Role


@dataclass
class Landlord:
    """Landlord account. The id is the authenticated user id."""

    landlord_id: str
    name: str
    phone: str
    invite_code: str
    email: str = ""
    address: str = ""
    location: str = ""
    holding_no: str = ""
    tin_no: str = ""
    photo: str = ""
    status: RecordStatus = RecordStatus.ACTIVE
    created_at: datetime | None = None


@dataclass
class UserProfile:
    """Role record for an authenticated user."""

    user_id: str
    role: Role
    name: str
    email: str = ""
    phone: str = ""
    status: RecordStatus = RecordStatus.ACTIVE
    created_at: datetime | None = None
