# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

from nutritrack.app_db import init_app_db
from nutritrack.auth.lifecycle import AccountLifecycle
from nutritrack.errors import (
    AlreadyClaimed,
    InvalidPassword,
    PhoneMismatch,
    UnclaimedAccount,
    UnknownUser,
    WrongPassword,
)
from nutritrack.patients.models import AccountState, PatientRecord, Sex
from nutritrack.patients.storage import PatientStore


class TestAccountLifecycle(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="nutritrack-test-"))
        db_path = self._tmp / "nutritrack.db"
        init_app_db(db_path)
        self.patients = PatientStore(db_path)
        # Low iteration count keeps the suite fast; the scheme is unchanged.
        self.accounts = AccountLifecycle(self.patients, hash_iterations=1_000)
        await self.patients.insert_all(
            [
                PatientRecord(user_id="1", phone_number="61234567", sex=Sex.male, heifa_total_score=70.0, fruits_score=8.5),
                PatientRecord(user_id="2", phone_number="61200000", sex=Sex.female, heifa_total_score=55.0),
                PatientRecord(user_id="3", phone_number=None, sex=Sex.female),
            ]
        )

    async def asyncTearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    async def _claim_first(self) -> None:
        await self.accounts.claim_account("1", "Alex", "61234567", "password123")

    async def test_claim_then_login(self) -> None:
        self.assertEqual(await self.accounts.account_state("1"), AccountState.unclaimed)

        claimed = await self.accounts.claim_account("1", "  Alex  ", "61234567", "password123")
        self.assertEqual(claimed.name, "Alex")
        self.assertEqual(await self.accounts.account_state("1"), AccountState.claimed)

        record = await self.accounts.login("1", "password123")
        self.assertEqual(record.user_id, "1")
        self.assertEqual(record.name, "Alex")
        # Scores are untouched by the claim.
        self.assertEqual(record.fruits_score, 8.5)
        self.assertEqual(record.heifa_total_score, 70.0)

    async def test_password_is_not_stored_in_plain_text(self) -> None:
        await self._claim_first()
        record = await self.patients.get_by_id("1")
        self.assertNotEqual(record.password_hash, "password123")
        self.assertTrue(record.password_hash.startswith("pbkdf2_sha256$"))

    async def test_claim_unknown_user(self) -> None:
        with self.assertRaises(UnknownUser) as ctx:
            await self.accounts.claim_account("99", None, "61234567", "password123")
        self.assertEqual(ctx.exception.context["user_id"], "99")

    async def test_claim_with_wrong_phone(self) -> None:
        with self.assertRaises(PhoneMismatch) as ctx:
            await self.accounts.claim_account("1", None, "61234568", "password123")
        self.assertEqual(ctx.exception.context["field"], "phone_number")
        self.assertEqual(await self.accounts.account_state("1"), AccountState.unclaimed)

    async def test_claim_without_stored_phone_is_rejected(self) -> None:
        with self.assertRaises(PhoneMismatch):
            await self.accounts.claim_account("3", None, "", "password123")

    async def test_claim_with_empty_password(self) -> None:
        with self.assertRaises(InvalidPassword):
            await self.accounts.claim_account("1", None, "61234567", "")
        self.assertEqual(await self.accounts.account_state("1"), AccountState.unclaimed)

    async def test_claim_twice_keeps_first_password(self) -> None:
        await self._claim_first()
        before = (await self.patients.get_by_id("1")).password_hash

        with self.assertRaises(AlreadyClaimed):
            await self.accounts.claim_account("1", "Mallory", "61234567", "otherpass123")

        after = await self.patients.get_by_id("1")
        self.assertEqual(after.password_hash, before)
        self.assertEqual(after.name, "Alex")

    async def test_login_unclaimed(self) -> None:
        with self.assertRaises(UnclaimedAccount):
            await self.accounts.login("2", "anything")

    async def test_login_unknown(self) -> None:
        with self.assertRaises(UnknownUser):
            await self.accounts.login("404", "anything")

    async def test_login_wrong_password_changes_nothing(self) -> None:
        await self._claim_first()
        before = (await self.patients.get_by_id("1")).model_dump()

        with self.assertRaises(WrongPassword):
            await self.accounts.login("1", "password124")

        after = (await self.patients.get_by_id("1")).model_dump()
        self.assertEqual(before, after)

    async def test_change_password(self) -> None:
        await self._claim_first()
        await self.accounts.change_password("1", "password123", "newpassword1")

        with self.assertRaises(WrongPassword):
            await self.accounts.login("1", "password123")
        record = await self.accounts.login("1", "newpassword1")
        self.assertEqual(record.user_id, "1")

    async def test_change_password_wrong_old(self) -> None:
        await self._claim_first()
        with self.assertRaises(WrongPassword) as ctx:
            await self.accounts.change_password("1", "nope", "newpassword1")
        self.assertEqual(ctx.exception.field, "old_password")

    async def test_change_password_too_short(self) -> None:
        await self._claim_first()
        with self.assertRaises(InvalidPassword) as ctx:
            await self.accounts.change_password("1", "password123", "short")
        self.assertEqual(ctx.exception.min_length, 8)
        self.assertEqual(ctx.exception.field, "new_password")
        await self.accounts.login("1", "password123")

    async def test_change_password_unclaimed(self) -> None:
        with self.assertRaises(UnclaimedAccount):
            await self.accounts.change_password("2", "", "newpassword1")


if __name__ == "__main__":
    unittest.main()
