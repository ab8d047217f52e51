# -*- coding: utf-8 -*-
"""NutriCoach tips: storage and the AI collaborator boundary."""
