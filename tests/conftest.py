"""Pytest configuration and fixtures."""

import pytest

from tenancy_ledger.config import LedgerConfig, RetryConfig
from tenancy_ledger.ledger import Ledger
from tenancy_ledger.models import Landlord, Property, Tenant, Unit
from tenancy_ledger.store import InMemoryLedgerStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def month_key() -> str:
    """Billing month used across tests."""
    return "2024-05"


@pytest.fixture
def config() -> LedgerConfig:
    """Config with retries that never sleep."""
    return LedgerConfig(retry=RetryConfig(attempts=3, min_wait=0, max_wait=0))


@pytest.fixture
def store() -> InMemoryLedgerStore:
    """Create a fresh store for each test."""
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(store: InMemoryLedgerStore, config: LedgerConfig) -> Ledger:
    return Ledger(store, config)


@pytest.fixture
def landlord(ledger: Ledger) -> Landlord:
    return ledger.register_landlord(
        "ll-001", "Rahim Uddin", "+880 1711-000001", email="rahim@example.com", address="Mirpur, Dhaka"
    )


@pytest.fixture
def building(ledger: Ledger, landlord: Landlord) -> tuple[Property, list[Unit]]:
    """Two floors of two flats each (1A, 1B, 2A, 2B) at 5000."""
    return ledger.add_property(
        landlord.landlord_id,
        "Green View",
        "House 12, Road 5",
        floors=2,
        units_per_floor=2,
        unit_type="flat",
        default_rent=5000,
        default_bedrooms=2,
        default_bathrooms=1,
        default_conditions="No pets",
    )


@pytest.fixture
def unit(building: tuple[Property, list[Unit]]) -> Unit:
    return building[1][0]


@pytest.fixture
def tenant(ledger: Ledger, landlord: Landlord) -> Tenant:
    """An unassigned, landlord-created tenant."""
    return ledger.add_manual_tenant(landlord.landlord_id, "Karim Hossain", phone="01711000002")


@pytest.fixture
def assigned_tenant(ledger: Ledger, tenant: Tenant, unit: Unit) -> Tenant:
    return ledger.assign(tenant.tenant_id, unit.unit_id, 5000, advance=10000, move_in_date="2024-01-01")
