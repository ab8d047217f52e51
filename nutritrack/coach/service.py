# -*- coding: utf-8 -*-
"""Boundary with the AI text collaborator.

The collaborator is any ``async (prompt) -> str`` callable. This module builds
the prompt from a patient's scores and questionnaire, awaits the collaborator
and records the returned text as a tip.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from ..errors import CoachUnavailable, UnknownUser
from ..patients.models import HEIFA_COMPONENTS, HEIFA_TOTAL, PatientRecord
from ..patients.storage import PatientStore
from ..questionnaire.models import QuestionnaireResponse
from ..questionnaire.storage import QuestionnaireStore
from .models import NutriCoachTip
from .storage import TipStore

logger = logging.getLogger(__name__)

TipGenerator = Callable[[str], Awaitable[str]]


def build_patient_prompt(record: PatientRecord, questionnaire: Optional[QuestionnaireResponse]) -> str:
    lines = [
        "Generate a short encouraging message to help someone improve their fruit intake.",
        "",
        f"The user is {record.sex.value}.",
        (
            f"Their total food quality score is {record.heifa_total_score:.2f} out of "
            f"{HEIFA_TOTAL.max_score:.0f} on the Healthy Eating Index for Australian adults (HEIFA)."
        ),
        "Component scores:",
    ]
    for c in HEIFA_COMPONENTS:
        lines.append(f"- {c.label}: {record.score(c):.2f} / {c.max_score:.0f}")

    if questionnaire is not None:
        lines += [
            "",
            "Questionnaire answers:",
            f"- Preferred foods: {', '.join(questionnaire.selected_foods)}",
            f"- Persona: {questionnaire.persona.value}",
            f"- Biggest meal at: {questionnaire.meal_time.strftime('%H:%M')}",
            f"- Sleeps at: {questionnaire.sleep_time.strftime('%H:%M')}",
            f"- Wakes at: {questionnaire.wake_time.strftime('%H:%M')}",
        ]

    lines += [
        "",
        "Use the data above to make the message relevant and motivating. Keep it to about 300-350 characters.",
    ]
    return "\n".join(lines)


class CoachService:
    def __init__(self, patients: PatientStore, questionnaires: QuestionnaireStore, tips: TipStore) -> None:
        self.patients = patients
        self.questionnaires = questionnaires
        self.tips = tips

    async def generate_tip(self, user_id: str, generator: TipGenerator) -> NutriCoachTip:
        record = await self.patients.get_by_id(user_id)
        if record is None:
            raise UnknownUser(user_id)
        questionnaire = await self.questionnaires.get_by_user_id(user_id)
        prompt = build_patient_prompt(record, questionnaire)
        try:
            text = (await generator(prompt)).strip() or "No output"
        except Exception as exc:
            logger.warning("Tip generation failed for %s: %s", user_id, exc)
            raise CoachUnavailable(user_id, str(exc) or type(exc).__name__) from exc
        tip = await self.tips.append(user_id, text)
        logger.info("Stored coach tip %d for %s", tip.id, user_id)
        return tip
