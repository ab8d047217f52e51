# -*- coding: utf-8 -*-
"""NutriCoach tips: DB storage helpers."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from fastapi.concurrency import run_in_threadpool

from ..app_db import db_conn
from ..errors import UnknownUser
from .models import NutriCoachTip


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class TipStore:
    """Append-only log of AI tips, per patient."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    def _append(self, user_id: str, tip_text: str) -> NutriCoachTip:
        now = _utc_now()
        try:
            with db_conn(self.db_path) as conn:
                cur = conn.execute(
                    "INSERT INTO nutri_coach_tips (user_id, tip_text, created_at) VALUES (?, ?, ?)",
                    (user_id, tip_text, now),
                )
                tip_id = int(cur.lastrowid)
        except sqlite3.IntegrityError as exc:
            raise UnknownUser(user_id) from exc
        return NutriCoachTip(id=tip_id, user_id=user_id, tip_text=tip_text, created_at=now)

    def _list_for_user(self, user_id: str) -> List[NutriCoachTip]:
        with db_conn(self.db_path) as conn:
            rows = conn.execute(
                """
                SELECT id, user_id, tip_text, created_at
                FROM nutri_coach_tips
                WHERE user_id = ?
                ORDER BY created_at DESC, id DESC
                """,
                (user_id,),
            ).fetchall()
        return [NutriCoachTip.model_validate(dict(r)) for r in rows]

    async def append(self, user_id: str, tip_text: str) -> NutriCoachTip:
        return await run_in_threadpool(self._append, user_id, tip_text)

    async def list_for_user(self, user_id: str) -> List[NutriCoachTip]:
        return await run_in_threadpool(self._list_for_user, user_id)
