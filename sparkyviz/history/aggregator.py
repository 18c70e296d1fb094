# -*- coding: utf-8 -*-
"""History - reconcile sparse upstream totals into a gap-filled day sequence."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date, timedelta
from typing import AsyncIterator, Dict, List, Optional

from ..config import settings
from ..errors import InvalidInput, UpstreamError, UpstreamUnavailable
from ..upstream.client import SparkyFitnessClient
from ..upstream.models import DailyTotals, MealBreakdown, empty_breakdown
from ..upstream.normalize import round1
from .models import DailyData, Nutrients

logger = logging.getLogger(__name__)


def date_window(days: int, today: Optional[date] = None) -> List[date]:
    """``days`` consecutive calendar days ending at ``today`` inclusive."""
    if days <= 0:
        raise InvalidInput(f"days must be positive, got {days}")
    end = today or date.today()
    start = end - timedelta(days=days - 1)
    return [start + timedelta(days=i) for i in range(days)]


@asynccontextmanager
async def request_deadline(identity: str, deadline: Optional[float] = None, *, what: str = "Request") -> AsyncIterator[None]:
    """Bound a whole aggregation; expiry surfaces as ``UpstreamUnavailable``."""
    limit = settings.request_deadline if deadline is None else deadline
    try:
        async with asyncio.timeout(limit):
            yield
    except TimeoutError as exc:
        logger.warning("%s for %s exceeded %.1fs deadline", what, identity, limit)
        raise UpstreamUnavailable(f"Upstream did not answer within {limit:g}s") from exc


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def _nutrients_from(totals: Optional[DailyTotals]) -> Nutrients:
    if totals is None:
        return Nutrients()

    def opt(value: Optional[float]) -> Optional[float]:
        return round1(value) if value is not None else None

    return Nutrients(
        calories=round1(totals.calories),
        protein=round1(totals.protein),
        carbs=round1(totals.carbs),
        fat=round1(totals.fat),
        fiber=opt(totals.fiber),
        sugar=opt(totals.sugar),
        sodium=opt(totals.sodium),
    )


async def fetch_meals_for_date(client: SparkyFitnessClient, identity: str, day: date) -> MealBreakdown:
    """Single-day meal breakdown; failures propagate to the caller."""
    return await client.fetch_food_entries(identity, day)


async def _fetch_meals_degraded(
    client: SparkyFitnessClient,
    identity: str,
    day: date,
    gate: asyncio.Semaphore,
) -> MealBreakdown:
    async with gate:
        try:
            return await client.fetch_food_entries(identity, day)
        except UpstreamError as exc:
            logger.warning("Meal fetch for %s on %s failed, using empty day: %s", identity, day, exc)
            return empty_breakdown()
        except Exception:
            logger.exception("Unreadable meal entries for %s on %s, using empty day", identity, day)
            return empty_breakdown()


async def fetch_meals_for_window(
    client: SparkyFitnessClient,
    identity: str,
    window: List[date],
    *,
    max_concurrency: Optional[int] = None,
) -> Dict[str, MealBreakdown]:
    """Fan out one food-entries call per day and join them all.

    Each day's failure only empties that day's breakdown.
    """
    gate = asyncio.Semaphore(max_concurrency or settings.max_concurrency)
    async with asyncio.TaskGroup() as group:
        tasks = {
            day.isoformat(): group.create_task(_fetch_meals_degraded(client, identity, day, gate))
            for day in window
        }
    return {key: task.result() for key, task in tasks.items()}


async def _build_history(
    client: SparkyFitnessClient,
    identity: str,
    days: int,
    include_meals: bool,
    today: Optional[date],
    max_concurrency: Optional[int],
    user_id: Optional[str],
) -> List[DailyData]:
    window = date_window(days, today)
    if user_id is None:
        user_id = await client.resolve_upstream_identity(identity)

    wanted = {d.isoformat() for d in window}
    by_date: Dict[str, DailyTotals] = {}
    for row in await client.fetch_daily_totals(identity, user_id, window[0], window[-1]):
        if row.date not in wanted:
            logger.debug("Dropping upstream total for %s outside %s..%s", row.date, window[0], window[-1])
            continue
        by_date[row.date] = row

    meals: Dict[str, MealBreakdown] = {}
    if include_meals:
        meals = await fetch_meals_for_window(client, identity, window, max_concurrency=max_concurrency)

    out: List[DailyData] = []
    for day in window:
        key = day.isoformat()
        record = DailyData(date=key, nutrients=_nutrients_from(by_date.get(key)))
        if include_meals:
            record.meals = meals.get(key) or empty_breakdown()
        out.append(record)
    return out


async def build_history(
    client: SparkyFitnessClient,
    identity: str,
    days: int,
    include_meals: bool = False,
    *,
    today: Optional[date] = None,
    deadline: Optional[float] = None,
    max_concurrency: Optional[int] = None,
    user_id: Optional[str] = None,
) -> List[DailyData]:
    """Gap-filled, ascending per-day nutrition for the last ``days`` days.

    Always returns exactly ``days`` records ending at ``today``; days the
    upstream has no total for are zero-filled. Identity, total and goal
    failures abort the build. A ``user_id`` already resolved by the caller
    skips the profile lookup.
    """
    if days <= 0:
        raise InvalidInput(f"days must be positive, got {days}")
    async with request_deadline(identity, deadline, what="History build"):
        return await _build_history(client, identity, days, include_meals, today, max_concurrency, user_id)
