#!/usr/bin/env python3
"""Load the payout percentage table from a CSV file.

The file needs the columns ``month``, ``bettors_count`` and ``percentage``.
Rows are validated with the same rules the payout engine applies before the
existing table is replaced.
"""
from __future__ import annotations

import argparse
import csv
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dvfactor.core.errors import PayoutTableError  # noqa: E402
from dvfactor.core.log import get_logger, timeit  # noqa: E402
from dvfactor.db.session import session_scope  # noqa: E402
from dvfactor.domain.payouts import PayoutPercentageTable, PayoutTableRow  # noqa: E402
from dvfactor.repositories import PayoutTableRepository  # noqa: E402

LOGGER = get_logger("dvfactor.scripts.load_payout_table")


def read_rows(path: Path) -> list[PayoutTableRow]:
    rows: list[PayoutTableRow] = []
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for line_number, record in enumerate(reader, start=2):
            try:
                rows.append(
                    PayoutTableRow(
                        month=int(record["month"]),
                        bettors_count=int(record["bettors_count"]),
                        percentage=Decimal(record["percentage"].strip()),
                    )
                )
            except (KeyError, ValueError, InvalidOperation, AttributeError) as exc:
                raise PayoutTableError(
                    "Malformed payout table line", path=path, line=line_number
                ) from exc
    return rows


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("csv_path", type=Path, help="CSV file with month,bettors_count,percentage")
    parser.add_argument("--dry-run", action="store_true", help="validate without writing")
    args = parser.parse_args(argv)

    try:
        rows = read_rows(args.csv_path)
        table = PayoutPercentageTable(rows)
    except PayoutTableError as exc:
        LOGGER.error("Payout table rejected: %s", exc)
        return 1

    missing_months = [month for month in range(1, 13) if table.max_count(month) is None]
    if missing_months:
        LOGGER.warning("No rows for months %s; resignations then cannot be settled", missing_months)

    if args.dry_run:
        LOGGER.info("Validated %s payout table rows", len(table))
        return 0

    with timeit("Loading payout table", logger=LOGGER, unit="rows", total=len(table)):
        with session_scope() as session:
            PayoutTableRepository(session).replace_rows(table.rows)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
