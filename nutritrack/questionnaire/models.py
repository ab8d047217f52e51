# -*- coding: utf-8 -*-
"""Food questionnaire: Pydantic models and submission checks."""

from __future__ import annotations

from datetime import time
from enum import Enum
from typing import Dict, FrozenSet, List

from pydantic import BaseModel, Field, field_validator

from ..errors import InvalidQuestionnaire

FOOD_OPTIONS = ("Fruits", "Vegetables", "Grains", "Red Meat", "Seafood", "Poultry", "Fish", "Eggs", "Nuts/Seeds")


class Persona(str, Enum):
    health_devotee = "Health Devotee"
    mindful_eater = "Mindful Eater"
    wellness_striver = "Wellness Striver"
    balance_seeker = "Balance Seeker"
    health_procrastinator = "Health Procrastinator"
    food_carefree = "Food Carefree"


class QuestionnaireAnswers(BaseModel):
    """Request body for a submission. The user ID comes from the session."""

    selected_foods: List[str] = Field(default_factory=list)
    persona: Persona
    meal_time: time = Field(..., description="Biggest meal of the day, HH:MM")
    sleep_time: time = Field(..., description="Usual bedtime, HH:MM")
    wake_time: time = Field(..., description="Usual wake-up time, HH:MM")

    @field_validator("selected_foods")
    @classmethod
    def _clean_foods(cls, value: List[str]) -> List[str]:
        seen: List[str] = []
        for raw in value:
            label = raw.strip()
            if "," in label:
                raise ValueError(f"food label must not contain a comma: {label!r}")
            if label and label not in seen:
                seen.append(label)
        return seen

    @field_validator("meal_time", "sleep_time", "wake_time")
    @classmethod
    def _to_minutes(cls, value: time) -> time:
        # Stored as HH:MM; compare what gets stored.
        return value.replace(second=0, microsecond=0, tzinfo=None)


class QuestionnaireResponse(QuestionnaireAnswers):
    user_id: str = Field(..., min_length=1)

    @property
    def food_set(self) -> FrozenSet[str]:
        return frozenset(self.selected_foods)


def validate_questionnaire(response: QuestionnaireAnswers) -> None:
    """Checks the store does not make. Raises ``InvalidQuestionnaire`` with every problem found."""
    problems: List[Dict[str, str]] = []
    if not response.selected_foods:
        problems.append({"field": "selected_foods", "message": "select at least one food category"})

    times = (
        ("meal_time", response.meal_time),
        ("sleep_time", response.sleep_time),
        ("wake_time", response.wake_time),
    )
    for i, (name_a, value_a) in enumerate(times):
        for name_b, value_b in times[i + 1 :]:
            if value_a == value_b:
                problems.append({"field": name_a, "message": f"{name_a} and {name_b} must be different"})
                problems.append({"field": name_b, "message": f"{name_b} and {name_a} must be different"})

    if problems:
        raise InvalidQuestionnaire(problems)
