# -*- coding: utf-8 -*-
"""NutriCoach tips: Pydantic models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class NutriCoachTip(BaseModel):
    id: int
    user_id: str
    tip_text: str
    created_at: str = Field(..., description="ISO8601 UTC")


class TipsResponse(BaseModel):
    count: int
    tips: List[NutriCoachTip]
