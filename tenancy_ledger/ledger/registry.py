"""Registration of landlords, tenants and properties, and landlord discovery."""

import logging
import re
from typing import Any

from tenancy_ledger.exceptions import ValidationError
from tenancy_ledger.ledger.activity import ActivityRecorder
from tenancy_ledger.ledger.repository import Repository
from tenancy_ledger.ledger.validation import require_text, to_amount, to_enum
from tenancy_ledger.models import (
    Landlord,
    Property,
    Role,
    Tenant,
    Unit,
    UnitType,
    UserProfile,
    new_id,
    new_invite_code,
    now,
)

logger = logging.getLogger(__name__)

MAX_FLAT_UNITS_PER_FLOOR = 26
MIN_PHONE_QUERY_DIGITS = 5
DEFAULT_PROPERTY_COLOR = "#10B981"
INVITE_CODE_ATTEMPTS = 10

_NON_DIGITS = re.compile(r"\D+")


def unit_label(unit_type: UnitType, floor: int, position: int) -> str:
    """Label for the unit at ``position`` (1-based) on ``floor``.

    >>> unit_label(UnitType.FLAT, 2, 3)
    '2C'
    >>> unit_label(UnitType.ROOM, 2, 3)
    '203'
    """
    if unit_type is UnitType.FLAT:
        return f"{floor}{chr(ord('A') + position - 1)}"
    return f"{floor}{position:02d}"


def normalize_phone(phone: str) -> str:
    """Digits only, without a leading 880/88 country code or leading zeros."""
    digits = _NON_DIGITS.sub("", phone or "")
    for prefix in ("880", "88"):
        if digits.startswith(prefix) and len(digits) > len(prefix) + 6:
            digits = digits[len(prefix):]
            break
    return digits.lstrip("0")


class Registry:
    """Creates the records everything else hangs off."""

    def __init__(self, repo: Repository, activity: ActivityRecorder) -> None:
        self.repo = repo
        self.activity = activity

    # Landlords

    def register_landlord(
        self,
        user_id: str,
        name: str,
        phone: str,
        email: str = "",
        address: str = "",
        location: str = "",
        holding_no: str = "",
        tin_no: str = "",
        photo: str = "",
    ) -> Landlord:
        """Create the landlord record (id = user id) and its user profile."""
        user_id = require_text(user_id, "user_id")
        name = require_text(name, "name")
        phone = require_text(phone, "phone")
        if self.repo.exists(Landlord, user_id):
            raise ValidationError(f"Landlord {user_id} is already registered")

        created = now()
        landlord = Landlord(
            landlord_id=user_id,
            name=name,
            phone=phone,
            invite_code=self._unique_invite_code(),
            email=email or "",
            address=address or "",
            location=location or "",
            holding_no=holding_no or "",
            tin_no=tin_no or "",
            photo=photo or "",
            created_at=created,
        )
        profile = UserProfile(user_id=user_id, role=Role.LANDLORD, name=name, email=email or "", phone=phone, created_at=created)
        self.repo.commit([self.repo.put(landlord), self.repo.put(profile)])

        logger.info(
            "Registered landlord %s (%s)", user_id, landlord.invite_code,
            extra={"landlord_id": user_id, "event_type": "landlord.registered"},
        )
        self.activity.record(
            "register",
            user_id,
            f"Landlord: {name} ({landlord.invite_code})",
            event_type="landlord.registered",
            subject=user_id,
            data={"name": name, "invite_code": landlord.invite_code},
            landlord_id=user_id,
        )
        return landlord

    def _unique_invite_code(self) -> str:
        for _ in range(INVITE_CODE_ATTEMPTS):
            code = new_invite_code()
            if not self.repo.find(Landlord, invite_code=code):
                return code
        raise ValidationError("Could not allocate a unique invite code")

    def find_landlord_by_invite(self, code: str) -> Landlord | None:
        wanted = (code or "").strip().upper()
        if not wanted:
            return None
        matches = self.repo.find(Landlord, invite_code=wanted)
        return matches[0] if matches else None

    def search_landlords_by_phone(self, query: str) -> list[Landlord]:
        """Landlords whose normalized phone contains the normalized query."""
        if len(_NON_DIGITS.sub("", query or "")) < MIN_PHONE_QUERY_DIGITS:
            return []
        wanted = normalize_phone(query)
        if not wanted:
            return []
        return [landlord for landlord in self.repo.find(Landlord) if wanted in normalize_phone(landlord.phone)]

    # Tenants

    def _new_tenant(
        self,
        landlord_id: str,
        name: str,
        *,
        tenant_id: str | None = None,
        user_id: str | None = None,
        phone: str = "",
        email: str = "",
        nid: str = "",
        photo: str = "",
        members: int = 1,
    ) -> Tenant:
        name = require_text(name, "name")
        self.repo.load(Landlord, landlord_id)
        if members < 1:
            raise ValidationError("members must be at least 1")
        return Tenant(
            tenant_id=tenant_id or new_id(),
            landlord_id=landlord_id,
            name=name,
            phone=phone or "",
            email=email or "",
            nid=nid or "",
            photo=photo or "",
            members=members,
            user_id=user_id,
            created_at=now(),
        )

    def build_registered_tenant(
        self,
        user_id: str,
        landlord_id: str,
        name: str,
        phone: str = "",
        email: str = "",
        nid: str = "",
        photo: str = "",
        members: int = 1,
    ) -> tuple[Tenant, UserProfile]:
        """Tenant (id = user id) and its user profile, not yet committed."""
        user_id = require_text(user_id, "user_id")
        if self.repo.exists(Tenant, user_id):
            raise ValidationError(f"Tenant {user_id} is already registered")
        tenant = self._new_tenant(
            landlord_id, name, tenant_id=user_id, user_id=user_id,
            phone=phone, email=email, nid=nid, photo=photo, members=members,
        )
        profile = UserProfile(user_id=user_id, role=Role.TENANT, name=tenant.name, email=tenant.email, phone=tenant.phone, created_at=tenant.created_at)
        return tenant, profile

    def build_manual_tenant(
        self,
        landlord_id: str,
        name: str,
        phone: str = "",
        email: str = "",
        nid: str = "",
        members: int = 1,
    ) -> Tenant:
        """Landlord-created tenant without a user account, not yet committed."""
        return self._new_tenant(landlord_id, name, phone=phone, email=email, nid=nid, members=members)

    def register_tenant(
        self,
        user_id: str,
        landlord_id: str,
        name: str,
        **profile: Any,
    ) -> Tenant:
        """Self-registration without a unit: tenant record plus user profile."""
        tenant, user = self.build_registered_tenant(user_id, landlord_id, name, **profile)
        self.repo.commit([self.repo.put(tenant), self.repo.put(user)])
        self.record_tenant_created(tenant, tenant.tenant_id)
        return tenant

    def add_manual_tenant(self, landlord_id: str, name: str, **profile: Any) -> Tenant:
        tenant = self.build_manual_tenant(landlord_id, name, **profile)
        self.repo.commit([self.repo.put(tenant)])
        self.record_tenant_created(tenant, landlord_id)
        return tenant

    def record_tenant_created(self, tenant: Tenant, actor: str) -> None:
        logger.info(
            "Registered tenant %s for landlord %s", tenant.tenant_id, tenant.landlord_id,
            extra={"landlord_id": tenant.landlord_id, "tenant_id": tenant.tenant_id, "event_type": "tenant.registered"},
        )
        self.activity.record(
            "register",
            actor,
            f"Tenant: {tenant.name} → Landlord: {tenant.landlord_id}",
            event_type="tenant.registered",
            subject=tenant.tenant_id,
            data={"name": tenant.name, "self_registered": tenant.user_id is not None},
            landlord_id=tenant.landlord_id,
        )

    # Properties

    def add_property(
        self,
        landlord_id: str,
        name: str,
        address: str,
        floors: int,
        units_per_floor: int,
        unit_type: UnitType | str = UnitType.FLAT,
        color: str = DEFAULT_PROPERTY_COLOR,
        location: str = "",
        default_rent: Any = 0,
        default_bedrooms: int = 0,
        default_bathrooms: int = 0,
        default_conditions: str = "",
    ) -> tuple[Property, list[Unit]]:
        """Create a property and generate its units from the layout, in one commit."""
        name = require_text(name, "name")
        address = require_text(address, "address")
        kind = to_enum(UnitType, unit_type, "unit_type")
        rent = to_amount(default_rent or 0, "default_rent", positive=False)
        if floors < 1 or units_per_floor < 1:
            raise ValidationError("floors and units_per_floor must be at least 1")
        if kind is UnitType.FLAT and units_per_floor > MAX_FLAT_UNITS_PER_FLOOR:
            raise ValidationError(f"flats are lettered A-Z; at most {MAX_FLAT_UNITS_PER_FLOOR} per floor")
        if default_bedrooms < 0 or default_bathrooms < 0:
            raise ValidationError("bedrooms and bathrooms cannot be negative")
        self.repo.load(Landlord, landlord_id)

        prop = Property(
            property_id=new_id(),
            landlord_id=landlord_id,
            name=name,
            address=address,
            floors=floors,
            units_per_floor=units_per_floor,
            unit_type=kind,
            color=color or DEFAULT_PROPERTY_COLOR,
            location=location or "",
            default_rent=rent,
            default_bedrooms=default_bedrooms,
            default_bathrooms=default_bathrooms,
            default_conditions=default_conditions or "",
            created_at=now(),
        )
        units = [
            Unit(
                unit_id=new_id(),
                property_id=prop.property_id,
                landlord_id=landlord_id,
                floor=floor,
                unit_no=unit_label(kind, floor, position),
                unit_type=kind,
                rent=rent,
                bedrooms=default_bedrooms,
                bathrooms=default_bathrooms,
                conditions=prop.default_conditions,
            )
            for floor in range(1, floors + 1)
            for position in range(1, units_per_floor + 1)
        ]
        self.repo.commit([self.repo.put(prop)] + [self.repo.put(u) for u in units])

        logger.info(
            "Added property %s with %d units", prop.property_id, len(units),
            extra={"landlord_id": landlord_id, "event_type": "property.added"},
        )
        self.activity.record(
            "add_property",
            landlord_id,
            f"Property: {name}",
            event_type="property.added",
            subject=prop.property_id,
            data={"name": name, "units": len(units), "unit_type": kind.value},
            landlord_id=landlord_id,
        )
        return prop, units

    # Lookups

    def landlords(self) -> list[Landlord]:
        return self.repo.find(Landlord)

    def tenants_of(self, landlord_id: str) -> list[Tenant]:
        return self.repo.find(Tenant, landlord_id=landlord_id)

    def unassigned_tenants(self, landlord_id: str) -> list[Tenant]:
        return [t for t in self.tenants_of(landlord_id) if not t.is_assigned]

    def properties_of(self, landlord_id: str) -> list[Property]:
        return self.repo.find(Property, landlord_id=landlord_id)

    def units_of(self, landlord_id: str, property_id: str | None = None) -> list[Unit]:
        filters: dict[str, Any] = {"landlord_id": landlord_id}
        if property_id:
            filters["property_id"] = property_id
        units = self.repo.find(Unit, **filters)
        units.sort(key=lambda u: (u.property_id, u.floor, u.unit_no))
        return units

    def vacant_units(self, landlord_id: str) -> list[Unit]:
        """Units a self-registering tenant may pick."""
        return [u for u in self.units_of(landlord_id) if u.is_vacant]
