# -*- coding: utf-8 -*-
"""Meals - lazy single-day breakdown endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..deps import get_upstream, require_identity, to_http_error
from ..errors import SparkyVizError
from ..history.aggregator import fetch_meals_for_date, parse_day
from ..upstream.client import SparkyFitnessClient
from .models import MealsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Meals"])


@router.get("/{identity}/meals/{day}", response_model=MealsResponse, summary="Meal breakdown for one day")
async def meals_for_day(
    day: str,
    identity: str = Depends(require_identity),
    client: SparkyFitnessClient = Depends(get_upstream),
):
    try:
        parsed = parse_day(day)
        meals = await fetch_meals_for_date(client, identity, parsed)
    except SparkyVizError as exc:
        logger.error("Failed to fetch meals for %s on %s: %s", identity, day, exc)
        raise to_http_error(exc, what="meal data") from exc
    return MealsResponse(date=parsed.isoformat(), meals=meals)
