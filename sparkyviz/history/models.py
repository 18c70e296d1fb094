# -*- coding: utf-8 -*-
"""History - Pydantic models."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..upstream.models import FoodItem, GoalSet


class Nutrients(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None


class DailyData(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    nutrients: Nutrients = Nutrients()
    # None means meals were not requested; an empty mapping means none logged.
    meals: Optional[Dict[str, List[FoodItem]]] = None


class HeatmapCell(BaseModel):
    value: float
    percentage: Optional[float] = Field(None, description="Percent of goal; null when the goal is zero")
    zone: str
    color: str
    text_color: str


class HeatmapDay(BaseModel):
    date: str
    cells: Dict[str, HeatmapCell]


class HeatmapResponse(BaseModel):
    identity: str
    start: str
    end: str
    goals: GoalSet
    days: List[HeatmapDay]
