# -*- coding: utf-8 -*-
"""HEIFA score derivations used by the insights and clinician views.

Everything here is a pure function of patient records.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..patients.models import HEIFA_COMPONENTS, HEIFA_TOTAL, HeifaComponent, PatientRecord, Sex


def _clamp_ratio(score: float, max_score: float) -> float:
    if max_score <= 0:
        return 0.0
    return min(max(score / max_score, 0.0), 1.0)


def component_ratio(record: PatientRecord, component: HeifaComponent) -> float:
    return _clamp_ratio(record.score(component), component.max_score)


def normalized_components(record: PatientRecord) -> List[Tuple[str, float]]:
    """(label, score / max) for the thirteen components, each clamped to [0, 1]."""
    return [(c.label, component_ratio(record, c)) for c in HEIFA_COMPONENTS]


def total_ratio(record: PatientRecord) -> float:
    return component_ratio(record, HEIFA_TOTAL)


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def sex_partitioned_average(records: Iterable[PatientRecord]) -> Tuple[Optional[float], Optional[float]]:
    """Mean total score per sex as (male, female).

    An empty partition gives ``None``, so "no patients" stays distinct from an
    average of zero.
    """
    male: List[float] = []
    female: List[float] = []
    for record in records:
        (male if record.sex == Sex.male else female).append(record.heifa_total_score)
    return _mean(male), _mean(female)
