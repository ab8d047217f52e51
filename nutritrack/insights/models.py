# -*- coding: utf-8 -*-
"""Insights: Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ComponentRatio(BaseModel):
    label: str
    score: float
    max_score: float
    ratio: float = Field(..., ge=0, le=1)


class InsightsResponse(BaseModel):
    user_id: str
    heifa_total_score: float
    total_ratio: float = Field(..., ge=0, le=1)
    components: List[ComponentRatio]


class AveragesResponse(BaseModel):
    patient_count: int
    male_average: Optional[float] = None
    female_average: Optional[float] = None
