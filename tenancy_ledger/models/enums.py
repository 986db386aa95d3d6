"""Enumeration types for ledger entities."""

from enum import Enum


class Role(str, Enum):
    LANDLORD = "landlord"
    TENANT = "tenant"
    ADMIN = "admin"


class RecordStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"


class UnitType(str, Enum):
    FLAT = "flat"
    ROOM = "room"


class PaymentMethod(str, Enum):
    BKASH = "bkash"
    NAGAD = "nagad"
    ROCKET = "rocket"
    BANK = "bank"
    CASH = "cash"


class PaymentStatus(str, Enum):
    """Recorder's annotation only; due/paid is always derived from sums."""

    PAID = "paid"
    PARTIAL = "partial"


class PaymentType(str, Enum):
    RENT = "rent"
    ELECTRICITY = "electricity"
    GAS = "gas"
    WATER = "water"
    INTERNET = "internet"
    SERVICE_CHARGE = "service_charge"
    OTHER = "other"

    @property
    def is_utility(self) -> bool:
        return self is not PaymentType.RENT


class NoticeStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class AgreementStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"


class ExpenseCategory(str, Enum):
    MAINTENANCE = "maintenance"
    REPAIR = "repair"
    UTILITY = "utility"
    TAX = "tax"
    SALARY = "salary"
    CLEANING = "cleaning"
    OTHER = "other"
