# -*- coding: utf-8 -*-
"""One-time CSV seeding of patient records (header lookup, row parsing, ledger)."""
