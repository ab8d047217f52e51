# -*- coding: utf-8 -*-
"""Patients: DB storage.

``PatientStore`` is the only writer of the ``patients`` table. Methods are
coroutines; the blocking sqlite work runs in the threadpool.
"""

from __future__ import annotations

import re
import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fastapi.concurrency import run_in_threadpool

from ..app_db import db_conn
from .models import SCORE_FIELDS, PatientRecord

_INT_ID = re.compile(r"[+-]?[0-9]+")

# Columns that come from the seed file. Re-seeding overwrites only these.
_SEED_COLUMNS: Tuple[str, ...] = ("phone_number", "sex") + tuple(c.field for c in SCORE_FIELDS)


def sort_user_ids(user_ids: Iterable[str]) -> List[str]:
    """Numeric order; IDs that are not plain integers go last, in text order.

    Only ASCII digits with an optional sign count: ``int()`` would also take
    "1_000", " 7" or non-Latin digits.
    """

    def _key(value: str) -> Tuple[int, int, str]:
        if _INT_ID.fullmatch(value):
            return (0, int(value), value)
        return (1, 0, value)

    return sorted(user_ids, key=_key)


def _row_to_record(row: sqlite3.Row) -> PatientRecord:
    return PatientRecord.model_validate(dict(row))


def _record_params(record: PatientRecord) -> Dict[str, Any]:
    data = record.model_dump()
    data["sex"] = record.sex.value
    return data


class PatientStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    # ---- sync implementations ----

    def _insert_all(self, records: Sequence[PatientRecord]) -> int:
        columns = ("user_id", "name", "password_hash") + _SEED_COLUMNS
        placeholders = ", ".join(f":{c}" for c in columns)
        updates = ", ".join(f"{c} = excluded.{c}" for c in _SEED_COLUMNS)
        sql = (
            f"INSERT INTO patients ({', '.join(columns)}) VALUES ({placeholders}) "
            f"ON CONFLICT(user_id) DO UPDATE SET {updates}"
        )
        with db_conn(self.db_path) as conn:
            conn.executemany(sql, [_record_params(r) for r in records])
        return len(records)

    def _get_by_id(self, user_id: str) -> Optional[PatientRecord]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT * FROM patients WHERE user_id = ?", (user_id,)).fetchone()
            return _row_to_record(row) if row else None

    def _get_all_ids(self) -> List[str]:
        with db_conn(self.db_path) as conn:
            rows = conn.execute("SELECT user_id FROM patients").fetchall()
        return sort_user_ids(r["user_id"] for r in rows)

    def _get_all(self) -> List[PatientRecord]:
        with db_conn(self.db_path) as conn:
            rows = conn.execute("SELECT * FROM patients").fetchall()
        records = [_row_to_record(r) for r in rows]
        order = {uid: i for i, uid in enumerate(sort_user_ids(r.user_id for r in records))}
        return sorted(records, key=lambda r: order[r.user_id])

    def _set_password(self, user_id: str, password_hash: str) -> bool:
        with db_conn(self.db_path) as conn:
            cur = conn.execute(
                "UPDATE patients SET password_hash = ? WHERE user_id = ?",
                (password_hash, user_id),
            )
            return cur.rowcount > 0

    def _claim(self, user_id: str, name: Optional[str], phone_number: str, password_hash: str) -> bool:
        with db_conn(self.db_path) as conn:
            cur = conn.execute(
                """
                UPDATE patients
                SET name = ?, phone_number = ?, password_hash = ?
                WHERE user_id = ?
                """,
                (name, phone_number, password_hash, user_id),
            )
            return cur.rowcount > 0

    def _count(self) -> int:
        with db_conn(self.db_path) as conn:
            return int(conn.execute("SELECT COUNT(*) FROM patients").fetchone()[0])

    # ---- async API ----

    async def insert_all(self, records: Sequence[PatientRecord]) -> int:
        """Upsert the whole batch in a single transaction."""
        return await run_in_threadpool(self._insert_all, list(records))

    async def get_by_id(self, user_id: str) -> Optional[PatientRecord]:
        return await run_in_threadpool(self._get_by_id, user_id)

    async def get_all_ids(self) -> List[str]:
        return await run_in_threadpool(self._get_all_ids)

    async def get_all(self) -> List[PatientRecord]:
        return await run_in_threadpool(self._get_all)

    async def set_password(self, user_id: str, password_hash: str) -> bool:
        return await run_in_threadpool(self._set_password, user_id, password_hash)

    async def claim(self, user_id: str, name: Optional[str], phone_number: str, password_hash: str) -> bool:
        """Set name, phone and credential together. Score columns are left alone."""
        return await run_in_threadpool(self._claim, user_id, name, phone_number, password_hash)

    async def count(self) -> int:
        return await run_in_threadpool(self._count)
