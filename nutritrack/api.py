# -*- coding: utf-8 -*-
"""
NutriTrack API

Patient accounts, HEIFA insights, food questionnaire and NutriCoach tips over
the SQLite data layer. The patients table is seeded from CSV on first start.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional, Type

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .app_db import init_app_db
from .auth.api import router as auth_router
from .auth.lifecycle import AccountLifecycle
from .coach.api import router as coach_router
from .coach.service import CoachService, TipGenerator
from .coach.storage import TipStore
from .config import Settings, settings as default_settings
from .errors import (
    AlreadyClaimed,
    CoachUnavailable,
    InvalidPassword,
    InvalidQuestionnaire,
    MissingColumnError,
    SeedFileError,
    NutriTrackError,
    PhoneMismatch,
    UnclaimedAccount,
    UnknownUser,
    WrongPassword,
)
from .insights.api import router as insights_router
from .patients.api import router as patients_router
from .patients.storage import PatientStore
from .questionnaire.api import router as questionnaire_router
from .questionnaire.storage import QuestionnaireStore
from .seed.importer import CsvImporter
from .seed.seeder import CsvSeeder
from .seed.storage import SeedLedger

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: Dict[Type[NutriTrackError], int] = {
    UnknownUser: 404,
    AlreadyClaimed: 409,
    PhoneMismatch: 400,
    InvalidPassword: 400,
    WrongPassword: 401,
    UnclaimedAccount: 403,
    InvalidQuestionnaire: 422,
    CoachUnavailable: 502,
}


async def seed_on_startup(app: FastAPI) -> None:
    cfg: Settings = app.state.settings
    if not cfg.seed_csv_path.exists():
        logger.warning("Seed file not found, skipping seeding: %s", cfg.seed_csv_path)
        return
    try:
        await app.state.seeder.seed_file_if_needed(cfg.seed_source_id, cfg.seed_csv_path)
    except (MissingColumnError, SeedFileError) as exc:
        logger.error("Seed file %s rejected: %s", cfg.seed_csv_path, exc)
        raise


def create_app(cfg: Optional[Settings] = None, *, tip_generator: Optional[TipGenerator] = None) -> FastAPI:
    cfg = cfg or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_app_db(cfg.db_path)
        await seed_on_startup(app)
        yield

    app = FastAPI(
        title="NutriTrack",
        description="HEIFA nutrition scores, patient accounts and food questionnaire",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Shared services, one set per app.
    patients = PatientStore(cfg.db_path)
    questionnaires = QuestionnaireStore(cfg.db_path)
    tips = TipStore(cfg.db_path)
    app.state.settings = cfg
    app.state.patients = patients
    app.state.questionnaires = questionnaires
    app.state.tips = tips
    app.state.accounts = AccountLifecycle(patients, min_password_length=cfg.password_min_length)
    app.state.seeder = CsvSeeder(
        patients,
        SeedLedger(cfg.db_path),
        CsvImporter(strict_columns=cfg.seed_strict_columns),
    )
    app.state.coach = CoachService(patients, questionnaires, tips)
    app.state.tip_generator = tip_generator

    @app.exception_handler(NutriTrackError)
    async def _nutritrack_error(request: Request, exc: NutriTrackError):
        status = _STATUS_BY_ERROR.get(type(exc), 400)
        return JSONResponse(status_code=status, content={"detail": exc.message, "error": exc.to_dict()})

    @app.get("/api/health", summary="Liveness")
    def health():
        return {"status": "ok"}

    app.include_router(auth_router)
    app.include_router(patients_router)
    app.include_router(insights_router)
    app.include_router(questionnaire_router)
    app.include_router(coach_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    logging.basicConfig(level=default_settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("nutritrack.api:app", host=default_settings.host, port=default_settings.port, reload=False)
