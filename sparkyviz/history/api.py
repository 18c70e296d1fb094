# -*- coding: utf-8 -*-
"""History - API endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import settings
from ..deps import get_upstream, require_identity, to_http_error
from ..errors import SparkyVizError
from ..metrics import build_heatmap
from ..upstream.client import SparkyFitnessClient
from .aggregator import build_history, request_deadline
from .models import DailyData, HeatmapResponse

router = APIRouter(prefix="/api", tags=["Nutrition"])


def _check_days(days: int) -> int:
    if days <= 0 or days > settings.max_days:
        raise HTTPException(status_code=400, detail=f"days must be between 1 and {settings.max_days}")
    return days


@router.get(
    "/{identity}/nutrition/history",
    response_model=List[DailyData],
    response_model_exclude_none=True,
    summary="Gap-filled daily nutrition for the trailing window",
)
async def nutrition_history(
    identity: str = Depends(require_identity),
    days: int = Query(default=settings.default_days),
    meals: bool = Query(default=False, description="Include per-day meal breakdowns"),
    client: SparkyFitnessClient = Depends(get_upstream),
):
    _check_days(days)
    try:
        return await build_history(client, identity, days, include_meals=meals)
    except SparkyVizError as exc:
        raise to_http_error(exc, what="nutrition history") from exc


@router.get(
    "/{identity}/nutrition/heatmap",
    response_model=HeatmapResponse,
    summary="Percent-of-goal heatmap cells for the trailing window",
)
async def nutrition_heatmap(
    identity: str = Depends(require_identity),
    days: int = Query(default=settings.default_days),
    client: SparkyFitnessClient = Depends(get_upstream),
):
    _check_days(days)
    try:
        async with request_deadline(identity, what="Heatmap build"):
            goals = await client.fetch_goals(identity)
            history = await build_history(client, identity, days, include_meals=False)
    except SparkyVizError as exc:
        raise to_http_error(exc, what="nutrition heatmap") from exc
    return HeatmapResponse(
        identity=identity,
        start=history[0].date,
        end=history[-1].date,
        goals=goals,
        days=build_heatmap(history, goals.model_dump()),
    )
