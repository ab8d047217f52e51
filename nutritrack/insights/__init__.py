# -*- coding: utf-8 -*-
"""Derived HEIFA scores for the insights and clinician views."""
