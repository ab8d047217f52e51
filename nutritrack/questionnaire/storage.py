# -*- coding: utf-8 -*-
"""Food questionnaire: DB storage helpers.

One row per patient. ``upsert`` replaces the whole row and does not validate;
run ``validate_questionnaire`` first.
"""

from __future__ import annotations

import sqlite3
from datetime import time
from pathlib import Path
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from ..app_db import db_conn
from ..errors import UnknownUser
from .models import QuestionnaireResponse


def _fmt_time(value: time) -> str:
    return value.strftime("%H:%M")


def _split_foods(value: str) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


class QuestionnaireStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    def _upsert(self, response: QuestionnaireResponse) -> None:
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO food_questionnaire
                        (user_id, selected_foods, persona, meal_time, sleep_time, wake_time)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        response.user_id,
                        ", ".join(response.selected_foods),
                        response.persona.value,
                        _fmt_time(response.meal_time),
                        _fmt_time(response.sleep_time),
                        _fmt_time(response.wake_time),
                    ),
                )
        except sqlite3.IntegrityError as exc:
            # Only the patient foreign key can fail here.
            raise UnknownUser(response.user_id) from exc

    def _get_by_user_id(self, user_id: str) -> Optional[QuestionnaireResponse]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT * FROM food_questionnaire WHERE user_id = ?", (user_id,)).fetchone()
        if not row:
            return None
        data = dict(row)
        data["selected_foods"] = _split_foods(data["selected_foods"])
        return QuestionnaireResponse.model_validate(data)

    def _has_response(self, user_id: str) -> bool:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT COUNT(*) FROM food_questionnaire WHERE user_id = ?", (user_id,)).fetchone()
            return int(row[0]) > 0

    async def upsert(self, response: QuestionnaireResponse) -> None:
        await run_in_threadpool(self._upsert, response)

    async def get_by_user_id(self, user_id: str) -> Optional[QuestionnaireResponse]:
        return await run_in_threadpool(self._get_by_user_id, user_id)

    async def has_response(self, user_id: str) -> bool:
        return await run_in_threadpool(self._has_response, user_id)
