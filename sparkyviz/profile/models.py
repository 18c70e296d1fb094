# -*- coding: utf-8 -*-
"""Profile - Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..upstream.models import GoalSet


class Profile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    avatar: str
    goals: GoalSet
    current_streak: int = Field(0, ge=0, alias="currentStreak")
    total_days: int = Field(0, ge=0, alias="totalDays")
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[str] = None
