# -*- coding: utf-8 -*-
"""Patient account lifecycle.

A seeded patient starts unclaimed (no credential). Claiming sets name, phone
and password once; afterwards the patient can log in and change the password.
Holding the authenticated session is the caller's job: ``login`` only returns
the record.

    Unclaimed --claim_account--> Claimed --login--> (session, external)
                                    ^   |
                                    +---+ change_password
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from ..errors import (
    AlreadyClaimed,
    InvalidPassword,
    PhoneMismatch,
    UnclaimedAccount,
    UnknownUser,
    WrongPassword,
)
from ..patients.models import AccountState, PatientRecord
from ..patients.storage import PatientStore
from .security import PBKDF2_ITERATIONS, hash_password, verify_password

logger = logging.getLogger(__name__)


class AccountLifecycle:
    def __init__(
        self,
        patients: PatientStore,
        *,
        min_password_length: int = 8,
        hash_iterations: int = PBKDF2_ITERATIONS,
    ) -> None:
        self.patients = patients
        self.min_password_length = min_password_length
        self.hash_iterations = hash_iterations

    async def _require(self, user_id: str) -> PatientRecord:
        record = await self.patients.get_by_id(user_id)
        if record is None:
            raise UnknownUser(user_id)
        return record

    async def _hash(self, password: str) -> str:
        return await run_in_threadpool(hash_password, password, iterations=self.hash_iterations)

    async def _matches(self, password: str, record: PatientRecord) -> bool:
        return await run_in_threadpool(verify_password, password, record.password_hash)

    def validate_new_password(self, password: str, *, field: str = "password") -> None:
        if len(password or "") < self.min_password_length:
            raise InvalidPassword(
                f"Password must be at least {self.min_password_length} characters",
                field=field,
                min_length=self.min_password_length,
            )

    async def account_state(self, user_id: str) -> AccountState:
        record = await self._require(user_id)
        return AccountState.claimed if record.is_claimed else AccountState.unclaimed

    async def claim_account(
        self,
        user_id: str,
        name: Optional[str],
        phone: str,
        password: str,
    ) -> PatientRecord:
        record = await self._require(user_id)
        if record.is_claimed:
            raise AlreadyClaimed(user_id)
        if phone != record.phone_number:
            logger.warning("Claim rejected for %s: phone mismatch", user_id)
            raise PhoneMismatch(user_id)
        if not password:
            raise InvalidPassword("Password must not be empty")

        password_hash = await self._hash(password)
        clean_name = (name or "").strip() or None
        await self.patients.claim(user_id, clean_name, phone, password_hash)
        logger.info("Account %s claimed", user_id)
        return record.model_copy(update={"name": clean_name, "phone_number": phone, "password_hash": password_hash})

    async def login(self, user_id: str, password: str) -> PatientRecord:
        record = await self._require(user_id)
        if not record.is_claimed:
            raise UnclaimedAccount(user_id)
        if not await self._matches(password, record):
            logger.warning("Failed login for %s", user_id)
            raise WrongPassword(user_id)
        return record

    async def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        record = await self._require(user_id)
        if not record.is_claimed:
            raise UnclaimedAccount(user_id)
        if not await self._matches(old_password, record):
            raise WrongPassword(user_id, field="old_password")
        self.validate_new_password(new_password, field="new_password")

        await self.patients.set_password(user_id, await self._hash(new_password))
        logger.info("Password changed for %s", user_id)
