# -*- coding: utf-8 -*-
"""Seed ledger: DB storage helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from ..app_db import db_conn


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class SeedLedger:
    """One row per import source. Rows are written once and never deleted."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    def _get_entry(self, source_id: str) -> Optional[Dict[str, Any]]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT * FROM seed_flags WHERE key = ?", (source_id,)).fetchone()
            if not row:
                return None
            entry = dict(row)
            entry["seeded"] = bool(entry["seeded"])
            return entry

    def _mark_applied(self, source_id: str) -> None:
        with db_conn(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO seed_flags (key, seeded, applied_at) VALUES (?, 1, ?)",
                (source_id, _utc_now()),
            )

    async def get_entry(self, source_id: str) -> Optional[Dict[str, Any]]:
        return await run_in_threadpool(self._get_entry, source_id)

    async def is_applied(self, source_id: str) -> bool:
        entry = await self.get_entry(source_id)
        return bool(entry and entry["seeded"])

    async def mark_applied(self, source_id: str) -> None:
        await run_in_threadpool(self._mark_applied, source_id)
