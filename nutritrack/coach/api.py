# -*- coding: utf-8 -*-
"""NutriCoach: API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from ..auth.security import get_current_patient
from ..patients.models import PatientRecord
from .models import NutriCoachTip, TipsResponse

router = APIRouter(prefix="/api/coach", tags=["NutriCoach"])


@router.get("/tips", response_model=TipsResponse, summary="Current patient's tips, newest first")
async def list_tips(request: Request, patient: PatientRecord = Depends(get_current_patient)):
    tips = await request.app.state.tips.list_for_user(patient.user_id)
    return TipsResponse(count=len(tips), tips=tips)


@router.post("/tips", response_model=NutriCoachTip, summary="Ask the AI collaborator for a new tip")
async def create_tip(request: Request, patient: PatientRecord = Depends(get_current_patient)):
    generator = getattr(request.app.state, "tip_generator", None)
    if generator is None:
        raise HTTPException(status_code=503, detail="AI service not configured")
    return await request.app.state.coach.generate_tip(patient.user_id, generator)
