# -*- coding: utf-8 -*-
"""Nutrition history: gap-filled per-day series over a trailing window."""
