# -*- coding: utf-8 -*-
"""Upstream - normalized record shapes."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

STANDARD_MEALS = ("breakfast", "lunch", "dinner", "snack")


class UpstreamProfile(BaseModel):
    user_id: str = Field(..., min_length=1, description="Upstream internal user id")
    name: Optional[str] = None
    avatar: Optional[str] = None
    birth_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    gender: Optional[str] = None


class GoalSet(BaseModel):
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)


class DailyTotals(BaseModel):
    """One sparse row from the nutrition trends report."""

    date: str = Field(..., description="YYYY-MM-DD")
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None


class FoodItem(BaseModel):
    name: str
    brand: Optional[str] = None
    quantity: float = 0.0
    unit: Optional[str] = None
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


MealBreakdown = Dict[str, List[FoodItem]]


def empty_breakdown() -> MealBreakdown:
    return {meal: [] for meal in STANDARD_MEALS}
