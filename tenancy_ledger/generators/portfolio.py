"""Demo landlord portfolios built through the public ledger commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from tenancy_ledger.generators.base import BaseGenerator
from tenancy_ledger.ledger import Ledger
from tenancy_ledger.models import (
    ExpenseCategory,
    Landlord,
    NoticeStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    Property,
    Tenant,
    UnitType,
)
from tenancy_ledger.months import current_month_key, parse_month_key, trailing_months

logger = logging.getLogger(__name__)


@dataclass
class Portfolio:
    """What one generator run created."""

    landlord: Landlord
    properties: list[Property] = field(default_factory=list)
    tenants: list[Tenant] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)
    notices: int = 0
    expenses: int = 0


class PortfolioGenerator(BaseGenerator):
    """Generate a landlord with properties, tenants and a few months of history."""

    METHODS = list(PaymentMethod)
    METHOD_WEIGHTS = [0.40, 0.25, 0.10, 0.15, 0.10]

    UTILITIES = [PaymentType.ELECTRICITY, PaymentType.GAS, PaymentType.WATER, PaymentType.INTERNET]

    # Monthly rent bands by unit type
    RENT_RANGES = {
        UnitType.FLAT: (8000, 30000),
        UnitType.ROOM: (3000, 8000),
    }

    NOTICE_SUBJECTS = [
        "Water leakage in bathroom",
        "Gas line check",
        "Lift not working",
        "Electricity meter reading",
        "Main gate lock broken",
    ]

    def __init__(
        self,
        ledger: Ledger,
        seed: int | None = None,
        locale: str = "en_US",
        occupancy_rate: float = 0.75,
        on_time_rate: float = 0.8,
    ) -> None:
        super().__init__(seed, locale)
        if not 0 <= occupancy_rate <= 1 or not 0 <= on_time_rate <= 1:
            raise ValueError("occupancy_rate and on_time_rate must be within [0, 1]")
        self.ledger = ledger
        self.occupancy_rate = occupancy_rate
        self.on_time_rate = on_time_rate

    def generate(
        self,
        properties: int = 2,
        floors: int = 3,
        units_per_floor: int = 2,
        months: int = 3,
        month_key: str | None = None,
    ) -> Portfolio:
        """Build one portfolio.

        Parameters
        ----------
        properties : int
            Number of properties.
        floors, units_per_floor : int
            Layout of every property.
        months : int
            Months of payment history, ending at ``month_key``.
        month_key : str | None
            Last month of history (default: current month).

        Returns
        -------
        Portfolio
            Records created by the run.
        """
        month_key = month_key or current_month_key()
        landlord = self.ledger.register_landlord(
            self.fake.uuid4().replace("-", ""),
            self.fake.name(),
            self._phone(),
            email=self.fake.email(),
            address=self.fake.address().replace("\n", ", "),
        )
        portfolio = Portfolio(landlord=landlord)

        for _ in range(properties):
            unit_type = self.rng.choice(list(UnitType))
            low, high = self.RENT_RANGES[unit_type]
            prop, units = self.ledger.add_property(
                landlord.landlord_id,
                f"{self.fake.last_name()} {'Tower' if unit_type is UnitType.FLAT else 'Mess'}",
                self.fake.street_address(),
                floors,
                units_per_floor,
                unit_type,
                default_rent=self._round_rent(self.rng.uniform(low, high)),
                default_bedrooms=self.rng.randint(1, 3) if unit_type is UnitType.FLAT else 1,
                default_bathrooms=self.rng.randint(1, 2),
            )
            portfolio.properties.append(prop)

            for unit in units:
                if self.rng.random() >= self.occupancy_rate:
                    continue
                year, month = parse_month_key(trailing_months(month_key, months)[0])
                tenant = self.ledger.add_manual_tenant(
                    landlord.landlord_id,
                    self.fake.name(),
                    phone=self._phone(),
                    unit_id=unit.unit_id,
                    advance=unit.rent * 2,
                    move_in_date=date(year, month, 1),
                    members=self.rng.randint(1, 5),
                )
                portfolio.tenants.append(tenant)

        for tenant in portfolio.tenants:
            portfolio.payments.extend(self._payments(tenant, trailing_months(month_key, months)))

        portfolio.notices = self._notices(landlord, portfolio.tenants)
        portfolio.expenses = self._expenses(landlord, portfolio.properties, month_key)

        logger.info(
            "Generated portfolio for %s: %d properties, %d tenants, %d payments",
            landlord.landlord_id,
            len(portfolio.properties),
            len(portfolio.tenants),
            len(portfolio.payments),
        )
        return portfolio

    def _phone(self) -> str:
        return "01" + "".join(str(self.rng.randint(0, 9)) for _ in range(9))

    @staticmethod
    def _round_rent(value: float) -> Decimal:
        return Decimal(int(value // 500 * 500))

    def _method(self) -> PaymentMethod:
        return self.rng.choices(self.METHODS, weights=self.METHOD_WEIGHTS, k=1)[0]

    def _payments(self, tenant: Tenant, month_keys: list[str]) -> list[Payment]:
        payments = []
        for key in month_keys:
            if self.rng.random() < self.on_time_rate:
                payments.append(self.ledger.record_payment(tenant.tenant_id, tenant.rent, self._method(), key))
            elif self.rng.random() < 0.5:
                # Part payment in two instalments, the second one short
                half = (tenant.rent / 2).quantize(Decimal("1"))
                for amount in (half, half / 2):
                    payments.append(
                        self.ledger.record_payment(
                            tenant.tenant_id, amount, self._method(), key, status=PaymentStatus.PARTIAL
                        )
                    )
            for utility in self.rng.sample(self.UTILITIES, k=self.rng.randint(0, 2)):
                payments.append(
                    self.ledger.record_payment(
                        tenant.tenant_id,
                        Decimal(self.rng.randrange(300, 2500, 50)),
                        self._method(),
                        key,
                        payment_type=utility,
                    )
                )
        return payments

    def _notices(self, landlord: Landlord, tenants: list[Tenant]) -> int:
        count = 0
        for tenant in tenants:
            if self.rng.random() > 0.3:
                continue
            notice = self.ledger.send_notice(
                tenant.tenant_id,
                landlord.landlord_id,
                self.rng.choice(self.NOTICE_SUBJECTS),
                self.fake.sentence(nb_words=12),
            )
            count += 1
            if self.rng.random() < 0.5:
                self.ledger.update_notice_status(
                    notice.notice_id, NoticeStatus.IN_PROGRESS, landlord.landlord_id, "Technician called"
                )
        return count

    def _expenses(self, landlord: Landlord, properties: list[Property], month_key: str) -> int:
        year, month = parse_month_key(month_key)
        count = 0
        for prop in properties:
            for category in self.rng.sample(list(ExpenseCategory), k=2):
                self.ledger.add_expense(
                    landlord.landlord_id,
                    category,
                    Decimal(self.rng.randrange(500, 10000, 100)),
                    description=self.fake.sentence(nb_words=4),
                    spent_on=date(year, month, self.rng.randint(1, 28)),
                    property_id=prop.property_id,
                )
                count += 1
        return count
