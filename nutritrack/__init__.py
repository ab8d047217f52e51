# -*- coding: utf-8 -*-
"""NutriTrack data layer: HEIFA seed import, patient accounts, questionnaire and score insights."""

__version__ = "1.0.0"
