# -*- coding: utf-8 -*-
"""Patients: API endpoints used before login (ID picker, claim screen)."""

from __future__ import annotations

from fastapi import APIRouter, Request

from .models import AccountStateResponse, PatientIdsResponse

router = APIRouter(prefix="/api/patients", tags=["Patients"])


@router.get("/ids", response_model=PatientIdsResponse, summary="All patient IDs, numerically sorted")
async def list_ids(request: Request):
    ids = await request.app.state.patients.get_all_ids()
    return PatientIdsResponse(count=len(ids), user_ids=ids)


@router.get("/{user_id}/state", response_model=AccountStateResponse, summary="Whether an account is claimed")
async def account_state(request: Request, user_id: str):
    state = await request.app.state.accounts.account_state(user_id)
    return AccountStateResponse(user_id=user_id, state=state)
