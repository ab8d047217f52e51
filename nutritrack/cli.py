# -*- coding: utf-8 -*-
"""
Operator CLI for the NutriTrack database.

Usage:
    python -m nutritrack.cli seed <csv> [--source csv] [--lenient]
    python -m nutritrack.cli check <csv> [--lenient]
    python -m nutritrack.cli ids
    python -m nutritrack.cli averages
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .app_db import init_app_db
from .config import settings
from .errors import MissingColumnError, SeedFileError
from .insights.scoring import sex_partitioned_average
from .patients.storage import PatientStore
from .seed.importer import CsvImporter
from .seed.seeder import CsvSeeder
from .seed.storage import SeedLedger


def _db_path(args: argparse.Namespace) -> Path:
    path = Path(args.db_path) if args.db_path else settings.db_path
    init_app_db(path)
    return path


def _fmt_avg(value) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def cmd_seed(args: argparse.Namespace) -> int:
    """Import a seed CSV unless the source was already applied."""
    source = Path(args.csv)
    if not source.exists():
        print(f"Error: CSV not found: {source}")
        return 1

    db_path = _db_path(args)
    seeder = CsvSeeder(
        PatientStore(db_path),
        SeedLedger(db_path),
        CsvImporter(strict_columns=settings.seed_strict_columns and not args.lenient),
    )
    try:
        result = asyncio.run(seeder.seed_file_if_needed(args.source, source))
    except (MissingColumnError, SeedFileError) as exc:
        print(f"Error: {exc}")
        return 2

    if not result.applied:
        print(f"Source {args.source!r} already applied; nothing to do.")
        return 0
    print(f"Imported {result.inserted} patient record(s) from {source}")
    if result.report is not None:
        print(f"  skipped rows: {len(result.report.skipped_rows)}")
        print(f"  unreadable cells: {len(result.report.parse_errors)}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Parse a seed CSV without writing anything."""
    try:
        report = CsvImporter(strict_columns=not args.lenient).parse_file(Path(args.csv))
    except (MissingColumnError, SeedFileError) as exc:
        print(f"Error: {exc}")
        return 2
    except FileNotFoundError:
        print(f"Error: CSV not found: {args.csv}")
        return 1

    print(f"Rows parsed: {report.count}")
    print(f"Rows skipped: {len(report.skipped_rows)} {report.skipped_rows or ''}")
    for err in report.parse_errors:
        print(f"  {err}")
    if report.missing_columns:
        print("Missing score columns: " + ", ".join(report.missing_columns))
    return 0


def cmd_ids(args: argparse.Namespace) -> int:
    ids = asyncio.run(PatientStore(_db_path(args)).get_all_ids())
    for user_id in ids:
        print(user_id)
    return 0


def cmd_averages(args: argparse.Namespace) -> int:
    records = asyncio.run(PatientStore(_db_path(args)).get_all())
    male_avg, female_avg = sex_partitioned_average(records)
    print(f"Patients: {len(records)}")
    print(f"Average HEIFA (Male)  : {_fmt_avg(male_avg)}")
    print(f"Average HEIFA (Female): {_fmt_avg(female_avg)}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="NutriTrack database CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db-path",
        help="Path to the SQLite database (default: NUTRITRACK_DB_PATH or data/nutritrack.db)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    seed_parser = subparsers.add_parser("seed", help="Import a HEIFA seed CSV once")
    seed_parser.add_argument("csv", help="Path to the CSV file")
    seed_parser.add_argument("--source", default=settings.seed_source_id, help="Ledger key (default: csv)")
    seed_parser.add_argument("--lenient", action="store_true", help="Read missing score columns as 0.0")

    check_parser = subparsers.add_parser("check", help="Validate a seed CSV without importing")
    check_parser.add_argument("csv", help="Path to the CSV file")
    check_parser.add_argument("--lenient", action="store_true", help="Read missing score columns as 0.0")

    subparsers.add_parser("ids", help="List patient IDs")
    subparsers.add_parser("averages", help="Average HEIFA total score by sex")

    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "seed": cmd_seed,
        "check": cmd_check,
        "ids": cmd_ids,
        "averages": cmd_averages,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
