# -*- coding: utf-8 -*-
"""One-time population of the patients table from the HEIFA seed CSV."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from fastapi.concurrency import run_in_threadpool

from ..errors import SeedFileError
from ..patients.storage import PatientStore
from .importer import CsvImporter, ImportReport
from .storage import SeedLedger

logger = logging.getLogger(__name__)

LineSource = Callable[[], Iterable[str]]


def file_lines(path: Path) -> LineSource:
    def _read() -> Iterable[str]:
        try:
            return Path(path).read_text(encoding="utf-8-sig").splitlines()
        except UnicodeDecodeError as exc:
            raise SeedFileError(str(path), str(exc)) from exc

    return _read


@dataclass
class SeedResult:
    source_id: str
    applied: bool
    inserted: int = 0
    report: Optional[ImportReport] = None


class CsvSeeder:
    """Runs the importer once per source and records it in the ledger.

    The ledger is written after the batch lands. If the process dies in between,
    the next run imports the same rows again; the store upserts by user ID, so
    that second run leaves the table as a single run would.
    """

    def __init__(
        self,
        patients: PatientStore,
        ledger: SeedLedger,
        importer: Optional[CsvImporter] = None,
    ) -> None:
        self.patients = patients
        self.ledger = ledger
        self.importer = importer or CsvImporter()

    async def seed_if_needed(self, source_id: str, lines: LineSource) -> SeedResult:
        if await self.ledger.is_applied(source_id):
            logger.info("Seed source %r already applied, skipping", source_id)
            return SeedResult(source_id=source_id, applied=False)

        # MissingColumnError and SeedFileError propagate from here, before anything is written.
        report = await run_in_threadpool(lambda: self.importer.parse_lines(lines()))
        inserted = await self.patients.insert_all(report.records)
        await self.ledger.mark_applied(source_id)
        logger.info("Seed source %r applied: %d patient record(s)", source_id, inserted)
        return SeedResult(source_id=source_id, applied=True, inserted=inserted, report=report)

    async def seed_file_if_needed(self, source_id: str, path: Path) -> SeedResult:
        return await self.seed_if_needed(source_id, file_lines(path))
