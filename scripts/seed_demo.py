#!/usr/bin/env python3
"""Seed a demo landlord portfolio and print its dashboard.

Writes to the store selected by ``STORE_BACKEND`` (in-memory by default) and
optionally streams the activity feed to a sink or exports every record as
JSON for manual inspection.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tenancy_ledger.config import LedgerConfig
from tenancy_ledger.exceptions import LedgerError
from tenancy_ledger.generators import PortfolioGenerator
from tenancy_ledger.ledger import Ledger
from tenancy_ledger.logging import get_logger, setup_logging
from tenancy_ledger.months import current_month_key, validate_month_key
from tenancy_ledger.sinks import build_sink
from tenancy_ledger.store import COLLECTIONS
from tenancy_ledger.store.codec import serialize_value

logger = get_logger(__name__)


def export_json(ledger: Ledger, output_dir: Path) -> None:
    """Dump every collection to ``<collection>.json``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    for collection in COLLECTIONS:
        docs = ledger.store.find(collection)
        filepath = output_dir / f"{collection}.json"
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump([serialize_value(doc.data) for doc in docs], f, indent=2, ensure_ascii=False)
        print(f"Saved {len(docs)} records to {filepath}")


def print_dashboard(ledger: Ledger, landlord_id: str, month_key: str) -> None:
    board = ledger.dashboard(landlord_id, month_key)
    summary = ledger.monthly_summary(landlord_id, month_key)

    print("=" * 60)
    print(f"Dashboard for {landlord_id} ({month_key})")
    print("=" * 60)
    print(f"  Properties:        {board.properties}")
    print(f"  Units:             {board.units} ({board.occupied} occupied, {board.vacant} vacant)")
    print(f"  Occupancy:         {board.occupancy_percent}%")
    print(f"  Tenants:           {board.tenants} ({board.unassigned} unassigned)")
    print(f"  Due this month:    {board.due}")
    print(f"  Open notices:      {board.open_notices}")
    print(f"  Rent collected:    {summary.totals.rent}")
    print(f"  Utility collected: {summary.totals.utility}")
    print(f"  Expenses:          {summary.expenses}")
    print(f"  Net profit:        {summary.net_profit}")

    print("\nTrend:")
    for totals in ledger.trend(landlord_id, month_key):
        print(f"  {totals.month_key}: rent={totals.rent} utility={totals.utility}")


def main() -> None:
    """Generate a demo portfolio."""
    parser = argparse.ArgumentParser(description="Seed a demo tenancy ledger")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--locale", default="en_US", help="Faker locale (default: en_US)")
    parser.add_argument("--properties", type=int, default=2, help="Properties to create (default: 2)")
    parser.add_argument("--floors", type=int, default=3, help="Floors per property (default: 3)")
    parser.add_argument("--units-per-floor", type=int, default=2, help="Units per floor (default: 2)")
    parser.add_argument("--months", type=int, default=3, help="Months of payment history (default: 3)")
    parser.add_argument("--month", default=None, help="Last month of history, YYYY-MM (default: current)")
    parser.add_argument(
        "--sink",
        choices=["none", "console", "json", "kafka"],
        default="none",
        help="Where to publish the activity feed (default: none)",
    )
    parser.add_argument("--export", type=Path, default=None, help="Directory to export records as JSON")
    parser.add_argument("--log-format", choices=["standard", "json"], default="standard")
    args = parser.parse_args()

    try:
        config = LedgerConfig.from_env()
        setup_logging(config.log_level, args.log_format)
        month_key = validate_month_key(args.month) if args.month else current_month_key()
        ledger = Ledger.from_config(config, sink=build_sink(args.sink, config))
    except LedgerError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        generator = PortfolioGenerator(ledger, seed=args.seed, locale=args.locale)
        portfolio = generator.generate(
            properties=args.properties,
            floors=args.floors,
            units_per_floor=args.units_per_floor,
            months=args.months,
            month_key=month_key,
        )
        print_dashboard(ledger, portfolio.landlord.landlord_id, month_key)
        print(f"\nInvite code: {portfolio.landlord.invite_code}")

        if args.export:
            export_json(ledger, args.export)
    except LedgerError:
        logger.exception("Seeding failed")
        sys.exit(1)
    finally:
        ledger.close()


if __name__ == "__main__":
    main()
