# -*- coding: utf-8 -*-
"""Auth: Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..patients.models import PatientPublic


class ClaimRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    name: Optional[str] = Field(None, max_length=128)
    phone_number: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., max_length=128)
    confirm_password: Optional[str] = Field(None, max_length=128)


class LoginRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., max_length=128)
    confirm_password: Optional[str] = Field(None, max_length=128)


class AuthResponse(BaseModel):
    patient: PatientPublic
    token: str
