# -*- coding: utf-8 -*-
"""Food questionnaire: API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from ..auth.security import get_current_patient
from ..patients.models import PatientRecord
from .models import FOOD_OPTIONS, Persona, QuestionnaireAnswers, QuestionnaireResponse, validate_questionnaire

router = APIRouter(prefix="/api/questionnaire", tags=["Questionnaire"])


@router.get("/options", summary="Food categories and personas offered by the form")
def options():
    return {"foods": list(FOOD_OPTIONS), "personas": [p.value for p in Persona]}


@router.get("", response_model=QuestionnaireResponse, summary="Current patient's answers")
async def get_answers(request: Request, patient: PatientRecord = Depends(get_current_patient)):
    response = await request.app.state.questionnaires.get_by_user_id(patient.user_id)
    if response is None:
        raise HTTPException(status_code=404, detail="Questionnaire not filled")
    return response


@router.put("", response_model=QuestionnaireResponse, summary="Submit or replace the current patient's answers")
async def put_answers(
    request: Request,
    body: QuestionnaireAnswers,
    patient: PatientRecord = Depends(get_current_patient),
):
    validate_questionnaire(body)
    response = QuestionnaireResponse(user_id=patient.user_id, **body.model_dump())
    await request.app.state.questionnaires.upsert(response)
    return response
