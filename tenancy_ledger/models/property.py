"""Property and unit models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from tenancy_ledger.models.enums import UnitType


@dataclass
class Property:
    """A building owned by one landlord.

    The layout (floors, units_per_floor, unit_type) is applied once when the
    property is created; later edits never regenerate units.
    """

    property_id: str
    landlord_id: str
    name: str
    address: str
    floors: int
    units_per_floor: int
    unit_type: UnitType
    color: str = "#10B981"
    location: str = ""
    default_rent: Decimal = Decimal("0")
    default_bedrooms: int = 0
    default_bathrooms: int = 0
    default_conditions: str = ""
    created_at: datetime | None = None


@dataclass
class Unit:
    """A rentable flat or room. ``is_vacant`` is owned by the occupancy manager."""

    unit_id: str
    property_id: str
    landlord_id: str
    floor: int
    unit_no: str  # 1A, 1B (flat) or 101, 102 (room)
    unit_type: UnitType
    is_vacant: bool = True
    rent: Decimal = Decimal("0")  # template rent copied from the property
    bedrooms: int = 0
    bathrooms: int = 0
    conditions: str = ""
