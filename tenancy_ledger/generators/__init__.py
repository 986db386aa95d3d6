"""Demo data generators."""

from tenancy_ledger.generators.base import BaseGenerator
from tenancy_ledger.generators.portfolio import Portfolio, PortfolioGenerator

__all__ = ["BaseGenerator", "Portfolio", "PortfolioGenerator"]
