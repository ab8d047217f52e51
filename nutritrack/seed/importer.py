# -*- coding: utf-8 -*-
"""CSV importer for the HEIFA seed file.

The seed file carries every score twice, once per sex (``FruitHEIFAscoreMale``,
``FruitHEIFAscoreFemale``...). For each row only the variant matching the row's
``Sex`` value is kept. Parsing is plain comma splitting: quoted fields are not
supported and cells must not contain commas.

Structural problems (a required column missing from the header) abort the whole
import before any row is read. Cell-level problems never abort: the score reads
0.0 and the problem is recorded on the report.

With ``strict_columns=False`` only the identity columns are required; an absent
score column reads 0.0 and is listed on the report.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..errors import ParseError, SeedFileError
from ..patients.models import SCORE_FIELDS, PatientRecord, Sex
from .columns import ColumnResolver

logger = logging.getLogger(__name__)

USER_ID_COLUMN = "User_ID"
PHONE_COLUMN = "PhoneNumber"
SEX_COLUMN = "Sex"
IDENTITY_COLUMNS = (USER_ID_COLUMN, PHONE_COLUMN, SEX_COLUMN)


@dataclass
class ImportReport:
    records: List[PatientRecord] = field(default_factory=list)
    skipped_rows: List[int] = field(default_factory=list)
    parse_errors: List[ParseError] = field(default_factory=list)
    missing_columns: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)


# sex -> score field -> header index (None when the column is absent)
ColumnTable = Dict[Sex, Dict[str, Optional[int]]]


def build_column_table(resolver: ColumnResolver, *, strict: bool) -> ColumnTable:
    table: ColumnTable = {sex: {} for sex in Sex}
    for sex in Sex:
        for component in SCORE_FIELDS:
            name = component.column_for(sex)
            table[sex][component.field] = resolver.resolve(name) if strict else resolver.find(name)
    return table


def _parse_score(raw: Optional[str], *, field_name: str, row: int) -> float:
    text = (raw or "").strip()
    if not text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        raise ParseError(field=field_name, row=row, raw=text) from None
    if not math.isfinite(value) or value < 0:
        raise ParseError(field=field_name, row=row, raw=text)
    return value


class CsvImporter:
    def __init__(self, *, strict_columns: bool = True) -> None:
        self.strict_columns = strict_columns

    def parse_file(self, path: Path) -> ImportReport:
        try:
            with Path(path).open("r", encoding="utf-8-sig") as fh:
                return self.parse_lines(fh)
        except UnicodeDecodeError as exc:
            raise SeedFileError(str(path), str(exc)) from exc

    def parse_lines(self, lines: Iterable[str]) -> ImportReport:
        it = iter(lines)
        report = ImportReport()
        header_line = next(it, None)
        if header_line is None:
            return report

        resolver = ColumnResolver(header_line.rstrip("\r\n").split(","))
        identity = resolver.resolve_all(IDENTITY_COLUMNS)
        table = build_column_table(resolver, strict=self.strict_columns)
        report.missing_columns = sorted(
            component.column_for(sex)
            for sex, columns in table.items()
            for component in SCORE_FIELDS
            if columns[component.field] is None
        )
        if report.missing_columns:
            logger.warning("Seed header lacks %d score column(s); those scores read 0.0: %s",
                           len(report.missing_columns), ", ".join(report.missing_columns))

        width = len(resolver.header)
        for line_no, line in enumerate(it, start=2):
            values = line.rstrip("\r\n").split(",")
            if len(values) < width:
                report.skipped_rows.append(line_no)
                continue
            user_id = values[identity[USER_ID_COLUMN]].strip()
            if not user_id:
                report.skipped_rows.append(line_no)
                continue

            sex = Sex.from_raw(values[identity[SEX_COLUMN]])
            scores: Dict[str, float] = {}
            for component in SCORE_FIELDS:
                idx = table[sex][component.field]
                raw = values[idx] if idx is not None else None
                try:
                    scores[component.field] = _parse_score(raw, field_name=component.column_for(sex), row=line_no)
                except ParseError as err:
                    report.parse_errors.append(err)
                    logger.debug("%s", err)
                    scores[component.field] = 0.0

            phone = values[identity[PHONE_COLUMN]].strip()
            report.records.append(
                PatientRecord(
                    user_id=user_id,
                    phone_number=phone or None,
                    name=None,
                    password_hash=None,
                    sex=sex,
                    **scores,
                )
            )

        if report.skipped_rows:
            logger.warning("Skipped %d malformed seed row(s)", len(report.skipped_rows))
        if report.parse_errors:
            logger.warning("%d unreadable score cell(s) defaulted to 0.0", len(report.parse_errors))
        return report

