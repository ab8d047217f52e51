# -*- coding: utf-8 -*-
"""Patients: Pydantic models and the HEIFA component table.

A patient record is created by the CSV seeder and afterwards only changes
through the account lifecycle (claim, password change). The score columns are
fixed at seed time.
"""

from __future__ import annotations

from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, Field


class Sex(str, Enum):
    male = "Male"
    female = "Female"

    @classmethod
    def from_raw(cls, value: str) -> "Sex":
        # Anything that is not "male" is read as female, as in the source data.
        return cls.male if (value or "").strip().lower() == "male" else cls.female


class HeifaComponent(NamedTuple):
    field: str
    label: str
    max_score: float
    column_stem: str

    def column_for(self, sex: Sex) -> str:
        return f"{self.column_stem}{sex.value}"


# Display order of the insights screen.
HEIFA_COMPONENTS: Tuple[HeifaComponent, ...] = (
    HeifaComponent("discretionary_score", "Discretionary", 10.0, "DiscretionaryHEIFAscore"),
    HeifaComponent("vegetables_score", "Vegetables", 10.0, "VegetablesHEIFAscore"),
    HeifaComponent("fruits_score", "Fruits", 10.0, "FruitHEIFAscore"),
    HeifaComponent("grains_cereals_score", "Grains & Cereals", 5.0, "GrainsandcerealsHEIFAscore"),
    HeifaComponent("whole_grains_score", "Whole Grains", 5.0, "WholegrainsHEIFAscore"),
    HeifaComponent("meat_alternatives_score", "Meat & Alternatives", 10.0, "MeatandalternativesHEIFAscore"),
    HeifaComponent("sodium_score", "Sodium", 10.0, "SodiumHEIFAscore"),
    HeifaComponent("alcohol_score", "Alcohol", 5.0, "AlcoholHEIFAscore"),
    HeifaComponent("dairy_alternatives_score", "Dairy & Alternatives", 10.0, "DairyandalternativesHEIFAscore"),
    HeifaComponent("water_score", "Water", 5.0, "WaterHEIFAscore"),
    HeifaComponent("sugar_score", "Sugar", 10.0, "SugarHEIFAscore"),
    HeifaComponent("saturated_fat_score", "Saturated Fat", 5.0, "SaturatedFatHEIFAscore"),
    HeifaComponent("unsaturated_fat_score", "Unsaturated Fat", 5.0, "UnsaturatedFatHEIFAscore"),
)

HEIFA_TOTAL = HeifaComponent("heifa_total_score", "Total", 100.0, "HEIFAtotalscore")

# Every score column read by the seeder: the total plus the thirteen components.
SCORE_FIELDS: Tuple[HeifaComponent, ...] = (HEIFA_TOTAL,) + HEIFA_COMPONENTS


class PatientRecord(BaseModel):
    user_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    phone_number: Optional[str] = None
    password_hash: Optional[str] = Field(None, repr=False)
    sex: Sex
    heifa_total_score: float = Field(0.0, ge=0)
    discretionary_score: float = Field(0.0, ge=0)
    vegetables_score: float = Field(0.0, ge=0)
    fruits_score: float = Field(0.0, ge=0)
    grains_cereals_score: float = Field(0.0, ge=0)
    whole_grains_score: float = Field(0.0, ge=0)
    meat_alternatives_score: float = Field(0.0, ge=0)
    dairy_alternatives_score: float = Field(0.0, ge=0)
    sodium_score: float = Field(0.0, ge=0)
    alcohol_score: float = Field(0.0, ge=0)
    water_score: float = Field(0.0, ge=0)
    sugar_score: float = Field(0.0, ge=0)
    saturated_fat_score: float = Field(0.0, ge=0)
    unsaturated_fat_score: float = Field(0.0, ge=0)

    @property
    def is_claimed(self) -> bool:
        return bool(self.password_hash)

    def score(self, component: HeifaComponent) -> float:
        return float(getattr(self, component.field))


class AccountState(str, Enum):
    unclaimed = "unclaimed"
    claimed = "claimed"


# ---- API payloads ----


class ComponentScore(BaseModel):
    label: str
    score: float
    max_score: float


class PatientPublic(BaseModel):
    user_id: str
    name: Optional[str] = None
    phone_number: Optional[str] = None
    sex: Sex
    heifa_total_score: float
    components: List[ComponentScore]

    @classmethod
    def from_record(cls, record: PatientRecord) -> "PatientPublic":
        return cls(
            user_id=record.user_id,
            name=record.name,
            phone_number=record.phone_number,
            sex=record.sex,
            heifa_total_score=record.heifa_total_score,
            components=[
                ComponentScore(label=c.label, score=record.score(c), max_score=c.max_score)
                for c in HEIFA_COMPONENTS
            ],
        )


class PatientIdsResponse(BaseModel):
    count: int
    user_ids: List[str]


class AccountStateResponse(BaseModel):
    user_id: str
    state: AccountState
