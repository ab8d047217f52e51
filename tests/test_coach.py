# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from datetime import time
from pathlib import Path

from nutritrack.app_db import init_app_db
from nutritrack.coach.service import CoachService, build_patient_prompt
from nutritrack.coach.storage import TipStore
from nutritrack.errors import CoachUnavailable, UnknownUser
from nutritrack.patients.models import PatientRecord, Sex
from nutritrack.patients.storage import PatientStore
from nutritrack.questionnaire.models import Persona, QuestionnaireResponse
from nutritrack.questionnaire.storage import QuestionnaireStore


class FakeGenerator:
    def __init__(self, reply: str = "Eat an apple today!") -> None:
        self.reply = reply
        self.prompts = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


async def failing_generator(prompt: str) -> str:
    raise RuntimeError("upstream timeout")


class TestCoach(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="nutritrack-test-"))
        db_path = self._tmp / "nutritrack.db"
        init_app_db(db_path)
        self.patients = PatientStore(db_path)
        self.questionnaires = QuestionnaireStore(db_path)
        self.tips = TipStore(db_path)
        self.coach = CoachService(self.patients, self.questionnaires, self.tips)
        await self.patients.insert_all(
            [
                PatientRecord(user_id="1", phone_number="0400", sex=Sex.male, heifa_total_score=64.5, fruits_score=2.5),
                PatientRecord(user_id="2", phone_number="0411", sex=Sex.female),
            ]
        )

    async def asyncTearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    async def test_tips_listed_newest_first(self) -> None:
        first = await self.tips.append("1", "first")
        second = await self.tips.append("1", "second")
        await self.tips.append("2", "other patient")

        tips = await self.tips.list_for_user("1")
        self.assertEqual([t.id for t in tips], [second.id, first.id])
        self.assertEqual(await self.tips.list_for_user("3"), [])

    async def test_append_for_unknown_patient(self) -> None:
        with self.assertRaises(UnknownUser):
            await self.tips.append("nope", "hello")
        self.assertEqual(await self.tips.list_for_user("nope"), [])

    async def test_generate_tip_stores_reply(self) -> None:
        generator = FakeGenerator("  Try berries with breakfast.  ")
        tip = await self.coach.generate_tip("1", generator)

        self.assertEqual(tip.tip_text, "Try berries with breakfast.")
        self.assertEqual(tip.user_id, "1")
        self.assertEqual(len(generator.prompts), 1)
        self.assertIn("The user is Male.", generator.prompts[0])
        self.assertIn("- Fruits: 2.50 / 10", generator.prompts[0])
        self.assertEqual([t.id for t in await self.tips.list_for_user("1")], [tip.id])

    async def test_empty_reply_is_recorded_as_no_output(self) -> None:
        tip = await self.coach.generate_tip("1", FakeGenerator("   "))
        self.assertEqual(tip.tip_text, "No output")

    async def test_generator_failure_stores_nothing(self) -> None:
        with self.assertRaises(CoachUnavailable) as ctx:
            await self.coach.generate_tip("1", failing_generator)
        self.assertIn("upstream timeout", str(ctx.exception))
        self.assertEqual(await self.tips.list_for_user("1"), [])

    async def test_unknown_patient(self) -> None:
        generator = FakeGenerator()
        with self.assertRaises(UnknownUser):
            await self.coach.generate_tip("99", generator)
        self.assertEqual(generator.prompts, [])

    async def test_prompt_includes_questionnaire(self) -> None:
        record = await self.patients.get_by_id("1")
        answers = QuestionnaireResponse(
            user_id="1",
            selected_foods=["Fruits", "Eggs"],
            persona=Persona.balance_seeker,
            meal_time=time(13, 0),
            sleep_time=time(23, 15),
            wake_time=time(7, 0),
        )
        prompt = build_patient_prompt(record, answers)
        self.assertIn("- Preferred foods: Fruits, Eggs", prompt)
        self.assertIn("- Persona: Balance Seeker", prompt)
        self.assertIn("- Sleeps at: 23:15", prompt)
        self.assertNotIn("Questionnaire answers", build_patient_prompt(record, None))


if __name__ == "__main__":
    unittest.main()
