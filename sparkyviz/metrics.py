# -*- coding: utf-8 -*-
"""Derived metrics: goal adherence, heatmap zones, streaks."""

from __future__ import annotations

import math
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

NUTRIENTS = ("calories", "protein", "carbs", "fat")

GOOD_MAX = 15.0
MID_MAX = 30.0
LOW_MAX = 50.0
OVER_GOAL_WEIGHT = 0.5


class HeatmapZone(str, Enum):
    no_data = "NoData"
    good = "Good"
    mid = "Mid"
    low = "Low"
    high = "High"


def percent_of_goal(value: float, goal: float) -> float:
    """Return ``value / goal * 100``.

    A zero goal yields 0.0 when nothing was logged and ``math.inf`` otherwise,
    so anything logged against a zero target lands in the far-off tier.
    """
    if goal <= 0:
        return 0.0 if value <= 0 else math.inf
    return value / goal * 100.0


def adjusted_distance(percentage: float) -> float:
    # Overshooting counts half as much as undershooting.
    if percentage < 100:
        return 100.0 - percentage
    return (percentage - 100.0) * OVER_GOAL_WEIGHT


def heatmap_zone(percentage: float) -> HeatmapZone:
    if percentage == 0:
        return HeatmapZone.no_data
    distance = adjusted_distance(percentage)
    if distance <= GOOD_MAX:
        return HeatmapZone.good
    if distance <= MID_MAX:
        return HeatmapZone.mid
    if distance <= LOW_MAX:
        return HeatmapZone.low
    return HeatmapZone.high


def _lerp(a: float, b: float, t: float) -> int:
    return int(math.floor(a + (b - a) * t + 0.5))


def heatmap_color(percentage: float) -> str:
    """RGBA swatch for a heatmap cell: gray, then green through red."""
    if percentage == 0:
        return "rgba(229, 231, 235, 1)"
    distance = adjusted_distance(percentage)
    if distance <= GOOD_MAX:
        alpha = 1 - (distance / GOOD_MAX) * 0.3
        return f"rgba(34, 197, 94, {alpha:g})"
    if distance <= MID_MAX:
        t = (distance - GOOD_MAX) / (MID_MAX - GOOD_MAX)
        return f"rgba({_lerp(34, 234, t)}, {_lerp(197, 179, t)}, {_lerp(94, 0, t)}, {0.9 - t * 0.1:g})"
    if distance <= LOW_MAX:
        t = (distance - MID_MAX) / (LOW_MAX - MID_MAX)
        return f"rgba({_lerp(234, 249, t)}, {_lerp(179, 115, t)}, 0, {0.85 - t * 0.05:g})"
    t = min((distance - LOW_MAX) / 50.0, 1.0)
    return f"rgba(239, {_lerp(115, 115 * 0.7, t)}, {_lerp(0, 68 * 0.3, t)}, {0.85 + t * 0.15:g})"


_TEXT_COLORS = {
    HeatmapZone.no_data: "rgb(107, 114, 128)",
    HeatmapZone.good: "rgb(21, 128, 61)",
    HeatmapZone.mid: "rgb(161, 98, 7)",
    HeatmapZone.low: "rgb(194, 65, 12)",
    HeatmapZone.high: "rgb(185, 28, 28)",
}


def text_color(percentage: float) -> str:
    return _TEXT_COLORS[heatmap_zone(percentage)]


def _calories_of(day: Any) -> float:
    if isinstance(day, Mapping):
        nutrients = day.get("nutrients") or {}
        return float(nutrients.get("calories") or 0.0)
    return float(day.nutrients.calories)


def _date_of(day: Any) -> str:
    return day["date"] if isinstance(day, Mapping) else day.date


def compute_streak_and_total_days(days: Sequence[Any], today: Optional[date] = None) -> Tuple[int, int]:
    """Return ``(current_streak, total_days)`` for a gap-filled day sequence.

    The streak walks backwards from today one calendar day at a time and
    stops at the first day that is missing or has zero calories; an
    unfinished today with nothing logged ends the streak at 0.
    """
    calories_by_date: Dict[str, float] = {}
    for day in days:
        calories_by_date[_date_of(day)] = _calories_of(day)

    total_days = sum(1 for cal in calories_by_date.values() if cal > 0)

    cursor = today or date.today()
    streak = 0
    for _ in range(len(calories_by_date)):
        if calories_by_date.get(cursor.isoformat(), 0.0) <= 0:
            break
        streak += 1
        cursor -= timedelta(days=1)
    return streak, total_days


def compute_age(birth_date: Optional[str], today: Optional[date] = None) -> Optional[int]:
    if not birth_date:
        return None
    try:
        born = date.fromisoformat(birth_date[:10])
    except ValueError:
        return None
    today = today or date.today()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age if age >= 0 else None


def build_heatmap(
    days: Iterable[Any],
    goals: Mapping[str, float],
    nutrients: Sequence[str] = NUTRIENTS,
) -> List[Dict[str, Any]]:
    """Per-day, per-nutrient adherence cells for the dashboard grid."""
    rows: List[Dict[str, Any]] = []
    for day in days:
        values = day["nutrients"] if isinstance(day, Mapping) else day.nutrients.model_dump()
        cells: Dict[str, Dict[str, Any]] = {}
        for key in nutrients:
            value = float(values.get(key) or 0.0)
            pct = percent_of_goal(value, float(goals.get(key) or 0.0))
            cells[key] = {
                "value": value,
                "percentage": round(pct, 1) if math.isfinite(pct) else None,
                "zone": heatmap_zone(pct).value,
                "color": heatmap_color(pct),
                "text_color": text_color(pct),
            }
        rows.append({"date": _date_of(day), "cells": cells})
    return rows
