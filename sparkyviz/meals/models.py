# -*- coding: utf-8 -*-
"""Meals - Pydantic models."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from ..upstream.models import FoodItem


class MealsResponse(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    meals: Dict[str, List[FoodItem]]
