# -*- coding: utf-8 -*-
"""App database (patients/questionnaire/tips/seed ledger): SQLite helpers."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_app_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS patients (
                user_id TEXT PRIMARY KEY,
                name TEXT,
                phone_number TEXT,
                password_hash TEXT,
                sex TEXT NOT NULL,
                heifa_total_score REAL NOT NULL DEFAULT 0,
                discretionary_score REAL NOT NULL DEFAULT 0,
                vegetables_score REAL NOT NULL DEFAULT 0,
                fruits_score REAL NOT NULL DEFAULT 0,
                grains_cereals_score REAL NOT NULL DEFAULT 0,
                whole_grains_score REAL NOT NULL DEFAULT 0,
                meat_alternatives_score REAL NOT NULL DEFAULT 0,
                dairy_alternatives_score REAL NOT NULL DEFAULT 0,
                sodium_score REAL NOT NULL DEFAULT 0,
                alcohol_score REAL NOT NULL DEFAULT 0,
                water_score REAL NOT NULL DEFAULT 0,
                sugar_score REAL NOT NULL DEFAULT 0,
                saturated_fat_score REAL NOT NULL DEFAULT 0,
                unsaturated_fat_score REAL NOT NULL DEFAULT 0
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS food_questionnaire (
                user_id TEXT PRIMARY KEY,
                selected_foods TEXT NOT NULL,
                persona TEXT NOT NULL,
                meal_time TEXT NOT NULL,
                sleep_time TEXT NOT NULL,
                wake_time TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES patients(user_id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS nutri_coach_tips (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                tip_text TEXT NOT NULL,
                created_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES patients(user_id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_nutri_coach_tips_user_created ON nutri_coach_tips(user_id, created_at DESC);"
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS seed_flags (
                key TEXT PRIMARY KEY,
                seeded INTEGER NOT NULL,
                applied_at TEXT NOT NULL
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
