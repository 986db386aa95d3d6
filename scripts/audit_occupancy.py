#!/usr/bin/env python3
"""Check unit vacancy against tenant assignments, and optionally repair.

Exit status is 0 when the store is consistent (or every violation was
repaired), 1 when violations remain and 2 on configuration errors.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tenancy_ledger.config import LedgerConfig
from tenancy_ledger.exceptions import ConsistencyError, LedgerError
from tenancy_ledger.ledger import Ledger
from tenancy_ledger.logging import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Audit occupancy consistency")
    parser.add_argument("--landlord", default=None, help="Limit the check to one landlord id")
    parser.add_argument("--repair", action="store_true", help="Repair violations that have a single fix")
    parser.add_argument("--log-format", choices=["standard", "json"], default="standard")
    args = parser.parse_args()

    try:
        config = LedgerConfig.from_env()
        setup_logging(config.log_level, args.log_format)
        ledger = Ledger.from_config(config)
    except LedgerError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        if args.repair:
            report = ledger.reconcile_occupancy(args.landlord)
        else:
            report = ledger.audit_occupancy(args.landlord)
    finally:
        ledger.close()

    print(f"Checked {report.units_checked} units and {report.tenants_checked} tenants")
    for violation in report.violations:
        state = "repaired" if violation.repaired else "open"
        print(f"  [{state}] {violation.describe()}")

    try:
        report.raise_for_violations()
    except ConsistencyError as e:
        logger.error("%s", e)
        sys.exit(1)
    print("Occupancy is consistent" if report.is_consistent else "All violations repaired")


if __name__ == "__main__":
    main()
