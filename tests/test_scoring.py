# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from nutritrack.insights.scoring import (
    component_ratio,
    normalized_components,
    sex_partitioned_average,
    total_ratio,
)
from nutritrack.patients.models import HEIFA_COMPONENTS, PatientRecord, Sex


def patient(user_id: str, sex: Sex, total: float = 0.0, **scores: float) -> PatientRecord:
    return PatientRecord(user_id=user_id, phone_number="0400", sex=sex, heifa_total_score=total, **scores)


class TestNormalizedComponents(unittest.TestCase):
    def test_thirteen_components_in_display_order(self) -> None:
        ratios = normalized_components(patient("1", Sex.male))
        self.assertEqual(len(ratios), 13)
        self.assertEqual([label for label, _ in ratios], [c.label for c in HEIFA_COMPONENTS])
        self.assertEqual(ratios[0][0], "Discretionary")
        self.assertTrue(all(ratio == 0.0 for _, ratio in ratios))

    def test_ratios_scale_by_component_maximum(self) -> None:
        ratios = dict(normalized_components(patient("1", Sex.male, fruits_score=5.0, water_score=5.0, alcohol_score=2.5)))
        self.assertEqual(ratios["Fruits"], 0.5)
        self.assertEqual(ratios["Water"], 1.0)
        self.assertEqual(ratios["Alcohol"], 0.5)

    def test_ratios_are_clamped(self) -> None:
        record = patient("1", Sex.female, total=130.0, water_score=7.5)
        water = next(c for c in HEIFA_COMPONENTS if c.field == "water_score")
        self.assertEqual(component_ratio(record, water), 1.0)
        self.assertEqual(total_ratio(record), 1.0)


class TestSexPartitionedAverage(unittest.TestCase):
    def test_empty_gives_no_averages(self) -> None:
        self.assertEqual(sex_partitioned_average([]), (None, None))

    def test_single_male(self) -> None:
        self.assertEqual(sex_partitioned_average([patient("1", Sex.male, 70.0)]), (70.0, None))

    def test_partitions_by_sex(self) -> None:
        records = [
            patient("1", Sex.male, 60.0),
            patient("2", Sex.male, 80.0),
            patient("3", Sex.female, 50.0),
        ]
        self.assertEqual(sex_partitioned_average(records), (70.0, 50.0))


if __name__ == "__main__":
    unittest.main()
