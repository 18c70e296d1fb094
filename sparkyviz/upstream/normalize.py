# -*- coding: utf-8 -*-
"""Upstream - best-effort normalization of SparkyFitness payloads.

The upstream API has shipped several field spellings over time
(``total_calories`` vs ``calories``, ``entry_date`` vs ``date``, nested food
variants vs flat rows). Everything here maps whatever arrives onto the
models in :mod:`.models` and never raises for missing optional fields.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from ..errors import UpstreamMalformed
from .models import DailyTotals, FoodItem, GoalSet, MealBreakdown, UpstreamProfile, empty_breakdown

_NUM_RE = re.compile(r"-?\d+(?:\.\d+)?")
_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})")

AVATAR_FALLBACK = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def round1(value: float) -> float:
    return round(float(value), 1)


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            fv = float(value)
        except OverflowError:
            return None
        return fv if math.isfinite(fv) else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        m = _NUM_RE.search(s.replace(",", ""))
        if not m:
            return None
        fv = float(m.group(0))
        return fv if math.isfinite(fv) else None
    return None


def _first_present(obj: Dict[str, Any], keys: Iterable[str]) -> Any:
    for k in keys:
        if k in obj and obj.get(k) is not None:
            return obj.get(k)
    return None


def _pick_num(obj: Dict[str, Any], keys: Iterable[str]) -> Optional[float]:
    for k in keys:
        if k in obj:
            val = _coerce_float(obj.get(k))
            if val is not None:
                return val
    return None


def _pick_str(obj: Dict[str, Any], keys: Iterable[str]) -> Optional[str]:
    value = _first_present(obj, keys)
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def calendar_day(value: Any) -> Optional[str]:
    """Return the ``YYYY-MM-DD`` prefix of a date/datetime string.

    Timestamps are not converted between zones: the upstream reports local
    calendar days, so the leading date is taken verbatim.
    """
    if value is None:
        return None
    m = _DATE_RE.match(str(value).strip())
    return m.group(1) if m else None


def unwrap(payload: Any) -> Any:
    """Strip ``{"data": ...}`` envelopes."""
    while isinstance(payload, dict) and set(payload.keys()) <= {"data", "success", "message"} and "data" in payload:
        payload = payload["data"]
    return payload


def _single_object(payload: Any) -> Dict[str, Any]:
    payload = unwrap(payload)
    if isinstance(payload, dict) and isinstance(payload.get("data"), (dict, list)):
        payload = payload["data"]
    if isinstance(payload, list):
        payload = payload[0] if payload else None
    if not isinstance(payload, dict):
        return {}
    return payload


def _rows(payload: Any) -> List[Dict[str, Any]]:
    payload = unwrap(payload)
    if isinstance(payload, dict):
        for key in ("data", "entries", "items", "results", "rows"):
            if isinstance(payload.get(key), list):
                payload = payload[key]
                break
        else:
            payload = [payload]
    if not isinstance(payload, list):
        return []
    return [row for row in payload if isinstance(row, dict)]


def resolve_avatar(raw: Optional[str], *, base_url: str, seed: str) -> str:
    if not raw:
        return AVATAR_FALLBACK.format(seed=quote(seed, safe=""))
    if raw.startswith(("http://", "https://", "data:")):
        return raw
    return f"{base_url.rstrip('/')}/{raw.lstrip('/')}"


def parse_profile(payload: Any) -> UpstreamProfile:
    data = _single_object(payload)
    user_id = _pick_str(data, ["id", "user_id", "userId"])
    if not user_id:
        raise UpstreamMalformed("profile response has no user id", path="/auth/profiles")
    return UpstreamProfile(
        user_id=user_id,
        name=_pick_str(data, ["full_name", "display_name", "name", "username"]),
        avatar=_pick_str(data, ["avatar_url", "avatarUrl", "avatar", "profile_picture"]),
        birth_date=calendar_day(_first_present(data, ["date_of_birth", "birth_date", "dob"])),
        gender=_pick_str(data, ["gender", "sex"]),
    )


def parse_goals(payload: Any) -> GoalSet:
    data = _single_object(payload)

    def goal(keys: List[str]) -> float:
        value = _pick_num(data, keys)
        return max(0.0, value) if value is not None else 0.0

    return GoalSet(
        calories=goal(["calories", "target_calories", "calorie_goal"]),
        protein=goal(["protein", "target_protein", "protein_goal"]),
        carbs=goal(["carbs", "carbohydrates", "target_carbs", "carbs_goal"]),
        fat=goal(["fat", "target_fat", "fat_goal"]),
    )


def parse_daily_totals(payload: Any) -> List[DailyTotals]:
    out: List[DailyTotals] = []
    for row in _rows(payload):
        day = calendar_day(_first_present(row, ["date", "entry_date", "day"]))
        if not day:
            continue

        def num(keys: List[str]) -> float:
            value = _pick_num(row, keys)
            return value if value is not None else 0.0

        out.append(
            DailyTotals(
                date=day,
                calories=num(["calories", "total_calories"]),
                protein=num(["protein", "total_protein"]),
                carbs=num(["carbs", "total_carbs", "carbohydrates"]),
                fat=num(["fat", "total_fat"]),
                fiber=_pick_num(row, ["fiber", "dietary_fiber", "total_fiber"]),
                sugar=_pick_num(row, ["sugar", "sugars", "total_sugar", "total_sugars"]),
                sodium=_pick_num(row, ["sodium", "total_sodium"]),
            )
        )
    return out


def _food_sources(entry: Dict[str, Any]) -> List[Dict[str, Any]]:
    sources = [entry]
    for key in ("food_variant", "food_variants", "variant", "food", "foods"):
        nested = entry.get(key)
        if isinstance(nested, list):
            nested = nested[0] if nested else None
        if isinstance(nested, dict):
            sources.append(nested)
    return sources


def _lookup(sources: List[Dict[str, Any]], keys: List[str]) -> Any:
    for src in sources:
        value = _first_present(src, keys)
        if value is not None:
            return value
    return None


def _meal_key(raw: Any) -> str:
    if isinstance(raw, dict):
        raw = _first_present(raw, ["name", "type"])
    key = str(raw or "").strip().lower()
    if key == "snacks":
        return "snack"
    return key or "other"


def scale_food_entry(entry: Dict[str, Any]) -> FoodItem:
    """Scale per-serving nutrients by ``quantity / serving_size`` then round."""
    sources = _food_sources(entry)
    serving_size = _coerce_float(_lookup(sources, ["serving_size", "servingSize"]))
    quantity = _coerce_float(_lookup(sources, ["quantity", "amount"]))
    if quantity is None:
        quantity = serving_size if serving_size is not None else 1.0
    factor = quantity / serving_size if serving_size and serving_size > 0 else 1.0

    def scaled(keys: List[str]) -> float:
        per_serving = _coerce_float(_lookup(sources, keys))
        return round1((per_serving or 0.0) * factor)

    name = _lookup(sources, ["food_name", "name", "title"])
    brand = _lookup(sources, ["brand_name", "brand"])
    brand_str = str(brand).strip() if brand is not None else ""
    unit = _lookup(sources, ["unit", "serving_unit"])
    return FoodItem(
        name=str(name).strip() if name is not None and str(name).strip() else "Unknown food",
        brand=brand_str or None,
        quantity=quantity,
        unit=str(unit) if unit is not None else None,
        calories=scaled(["calories", "energy_kcal"]),
        protein=scaled(["protein"]),
        carbs=scaled(["carbs", "carbohydrates"]),
        fat=scaled(["fat"]),
    )


def parse_food_entries(payload: Any) -> MealBreakdown:
    breakdown = empty_breakdown()
    for entry in _rows(payload):
        meal = _meal_key(_first_present(entry, ["meal_type", "mealType", "meal", "meal_type_name"]))
        breakdown.setdefault(meal, []).append(scale_food_entry(entry))
    return breakdown
