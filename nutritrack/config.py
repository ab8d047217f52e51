from __future__ import annotations

import os
from pathlib import Path
from typing import List


def _env_flag(name: str, default: bool = False) -> bool:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    return raw in {"1", "true", "True", "yes"}


class Settings:
    """Centralized configuration for the NutriTrack data layer and API."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("NUTRITRACK_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("NUTRITRACK_DB_PATH") or (self.data_root / "nutritrack.db")
        ).expanduser()

        # ---- Seeding ----
        self.seed_csv_path: Path = Path(
            os.environ.get("NUTRITRACK_SEED_CSV") or (self.data_root / "patients_seed.csv")
        ).expanduser()
        self.seed_source_id: str = os.environ.get("NUTRITRACK_SEED_SOURCE") or "csv"
        self.seed_strict_columns: bool = _env_flag("NUTRITRACK_SEED_STRICT_COLUMNS", default=True)

        # ---- Accounts / sessions ----
        self.password_min_length: int = int(os.environ.get("NUTRITRACK_PASSWORD_MIN_LENGTH") or "8")
        # In production you MUST set NUTRITRACK_JWT_SECRET.
        self.jwt_secret: str = os.environ.get("NUTRITRACK_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("NUTRITRACK_TOKEN_TTL_DAYS") or "7")

        self.log_level: str = (os.environ.get("NUTRITRACK_LOG_LEVEL") or "INFO").upper()
        self.host: str = os.environ.get("NUTRITRACK_HOST") or "127.0.0.1"
        self.port: int = int(os.environ.get("NUTRITRACK_PORT") or "8000")

        cors = os.environ.get("NUTRITRACK_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
