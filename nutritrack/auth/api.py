# -*- coding: utf-8 -*-
"""Auth: API endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from ..errors import InvalidPassword
from ..patients.models import PatientPublic, PatientRecord
from .lifecycle import AccountLifecycle
from .models import AuthResponse, ChangePasswordRequest, ClaimRequest, LoginRequest
from .security import create_access_token, get_current_patient

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _accounts(request: Request) -> AccountLifecycle:
    return request.app.state.accounts


def _issue_token(request: Request, patient: PatientRecord) -> str:
    settings = request.app.state.settings
    return create_access_token(user_id=patient.user_id, secret=settings.jwt_secret, ttl_days=settings.token_ttl_days)


def _check_confirmation(password: str, confirm: Optional[str]) -> None:
    if confirm is not None and confirm != password:
        raise InvalidPassword("Passwords do not match", field="confirm_password")


@router.post("/claim", response_model=AuthResponse, summary="Claim a seeded patient account")
async def claim(request: Request, body: ClaimRequest):
    accounts = _accounts(request)
    accounts.validate_new_password(body.password)
    _check_confirmation(body.password, body.confirm_password)
    patient = await accounts.claim_account(body.user_id, body.name, body.phone_number, body.password)
    return AuthResponse(patient=PatientPublic.from_record(patient), token=_issue_token(request, patient))


@router.post("/login", response_model=AuthResponse, summary="Login")
async def login(request: Request, body: LoginRequest):
    patient = await _accounts(request).login(body.user_id, body.password)
    return AuthResponse(patient=PatientPublic.from_record(patient), token=_issue_token(request, patient))


@router.post("/change-password", summary="Change the current patient's password")
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    patient: PatientRecord = Depends(get_current_patient),
):
    _check_confirmation(body.new_password, body.confirm_password)
    await _accounts(request).change_password(patient.user_id, body.old_password, body.new_password)
    return {"status": "ok"}


@router.get("/me", response_model=PatientPublic, summary="Get current patient")
def me(patient: PatientRecord = Depends(get_current_patient)):
    return PatientPublic.from_record(patient)
