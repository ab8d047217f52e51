# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from datetime import time
from pathlib import Path

from pydantic import ValidationError

from nutritrack.app_db import init_app_db
from nutritrack.errors import InvalidQuestionnaire, UnknownUser
from nutritrack.patients.models import PatientRecord, Sex
from nutritrack.patients.storage import PatientStore
from nutritrack.questionnaire.models import Persona, QuestionnaireResponse, validate_questionnaire
from nutritrack.questionnaire.storage import QuestionnaireStore


def make_response(**overrides) -> QuestionnaireResponse:
    data = dict(
        user_id="1",
        selected_foods=["Fruits", "Fish"],
        persona=Persona.mindful_eater,
        meal_time=time(12, 30),
        sleep_time=time(22, 0),
        wake_time=time(6, 45),
    )
    data.update(overrides)
    return QuestionnaireResponse(**data)


class TestQuestionnaireValidation(unittest.TestCase):
    def test_valid_response_passes(self) -> None:
        validate_questionnaire(make_response())

    def test_requires_a_food(self) -> None:
        with self.assertRaises(InvalidQuestionnaire) as ctx:
            validate_questionnaire(make_response(selected_foods=[]))
        self.assertEqual(ctx.exception.fields, ["selected_foods"])

    def test_duplicate_times_name_both_fields(self) -> None:
        with self.assertRaises(InvalidQuestionnaire) as ctx:
            validate_questionnaire(make_response(sleep_time=time(6, 45)))
        self.assertEqual(ctx.exception.fields, ["sleep_time", "wake_time"])

    def test_all_problems_reported_together(self) -> None:
        with self.assertRaises(InvalidQuestionnaire) as ctx:
            validate_questionnaire(
                make_response(selected_foods=[], meal_time=time(8, 0), sleep_time=time(8, 0), wake_time=time(8, 0))
            )
        self.assertEqual(ctx.exception.fields, ["meal_time", "selected_foods", "sleep_time", "wake_time"])

    def test_food_labels_are_cleaned(self) -> None:
        response = make_response(selected_foods=[" Fruits ", "Fruits", "", "Eggs"])
        self.assertEqual(response.selected_foods, ["Fruits", "Eggs"])
        self.assertEqual(response.food_set, frozenset({"Fruits", "Eggs"}))

    def test_seconds_are_dropped_before_validation(self) -> None:
        response = make_response(meal_time=time(8, 0, 10), sleep_time=time(8, 0, 20), wake_time=time(8, 0, 30))
        self.assertEqual(response.meal_time, time(8, 0))
        with self.assertRaises(InvalidQuestionnaire) as ctx:
            validate_questionnaire(response)
        self.assertEqual(ctx.exception.fields, ["meal_time", "sleep_time", "wake_time"])

    def test_comma_in_label_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_response(selected_foods=["Nuts, Seeds"])

    def test_unknown_persona_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_response(persona="Snack Enthusiast")


class TestQuestionnaireStore(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="nutritrack-test-"))
        db_path = self._tmp / "nutritrack.db"
        init_app_db(db_path)
        await PatientStore(db_path).insert_all(
            [
                PatientRecord(user_id="1", phone_number="0400", sex=Sex.male),
                PatientRecord(user_id="2", phone_number="0411", sex=Sex.female),
            ]
        )
        self.store = QuestionnaireStore(db_path)

    async def asyncTearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    async def test_missing_response(self) -> None:
        self.assertIsNone(await self.store.get_by_user_id("1"))
        self.assertFalse(await self.store.has_response("1"))

    async def test_round_trip(self) -> None:
        original = make_response()
        await self.store.upsert(original)

        loaded = await self.store.get_by_user_id("1")
        self.assertEqual(loaded, original)
        self.assertTrue(await self.store.has_response("1"))
        self.assertFalse(await self.store.has_response("2"))

    async def test_round_trip_with_seconds(self) -> None:
        original = make_response(meal_time=time(12, 30, 45), sleep_time=time(22, 0, 5), wake_time=time(6, 45, 59))
        await self.store.upsert(original)

        loaded = await self.store.get_by_user_id("1")
        self.assertEqual(loaded, original)
        self.assertEqual(loaded.meal_time, time(12, 30))

    async def test_upsert_for_unknown_patient(self) -> None:
        with self.assertRaises(UnknownUser) as ctx:
            await self.store.upsert(make_response(user_id="nope"))
        self.assertEqual(ctx.exception.user_id, "nope")
        self.assertFalse(await self.store.has_response("nope"))

    async def test_upsert_replaces_whole_row(self) -> None:
        await self.store.upsert(make_response())
        await self.store.upsert(
            make_response(selected_foods=["Eggs"], persona=Persona.food_carefree, meal_time=time(19, 0))
        )

        loaded = await self.store.get_by_user_id("1")
        self.assertEqual(loaded.selected_foods, ["Eggs"])
        self.assertEqual(loaded.persona, Persona.food_carefree)
        self.assertEqual(loaded.meal_time, time(19, 0))
        self.assertEqual(loaded.sleep_time, time(22, 0))

    async def test_store_does_not_validate(self) -> None:
        # Duplicate times are the caller's problem.
        await self.store.upsert(make_response(meal_time=time(6, 45)))
        loaded = await self.store.get_by_user_id("1")
        self.assertEqual(loaded.meal_time, loaded.wake_time)


if __name__ == "__main__":
    unittest.main()
