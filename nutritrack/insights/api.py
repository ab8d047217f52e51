# -*- coding: utf-8 -*-
"""Insights: API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..auth.security import get_current_patient
from ..patients.models import HEIFA_COMPONENTS, PatientRecord
from .models import AveragesResponse, ComponentRatio, InsightsResponse
from .scoring import normalized_components, sex_partitioned_average, total_ratio

router = APIRouter(prefix="/api/insights", tags=["Insights"])


@router.get("/me", response_model=InsightsResponse, summary="Component scores for the current patient")
def my_insights(patient: PatientRecord = Depends(get_current_patient)):
    components = [
        ComponentRatio(label=label, score=patient.score(c), max_score=c.max_score, ratio=ratio)
        for c, (label, ratio) in zip(HEIFA_COMPONENTS, normalized_components(patient))
    ]
    return InsightsResponse(
        user_id=patient.user_id,
        heifa_total_score=patient.heifa_total_score,
        total_ratio=total_ratio(patient),
        components=components,
    )


@router.get("/averages", response_model=AveragesResponse, summary="Average HEIFA total score by sex")
async def averages(request: Request, patient: PatientRecord = Depends(get_current_patient)):
    records = await request.app.state.patients.get_all()
    male_avg, female_avg = sex_partitioned_average(records)
    return AveragesResponse(patient_count=len(records), male_average=male_avg, female_average=female_avg)
