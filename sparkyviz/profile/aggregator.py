# -*- coding: utf-8 -*-
"""Profile - combine upstream profile, today's goals and recent history."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..history.aggregator import build_history, request_deadline
from ..metrics import compute_age, compute_streak_and_total_days
from ..upstream.client import SparkyFitnessClient
from .models import Profile

logger = logging.getLogger(__name__)

PROFILE_WINDOW_DAYS = 90


async def build_profile(
    client: SparkyFitnessClient,
    identity: str,
    *,
    today: Optional[date] = None,
    deadline: Optional[float] = None,
) -> Profile:
    """Assemble the dashboard header for ``identity``.

    Goals are today's goals only; they are applied to the whole window even
    if the user changed targets during it.
    """
    today = today or date.today()
    async with request_deadline(identity, deadline, what="Profile build"):
        upstream = await client.fetch_profile(identity)
        goals = await client.fetch_goals(identity, today)
        history = await build_history(
            client,
            identity,
            PROFILE_WINDOW_DAYS,
            include_meals=False,
            today=today,
            deadline=deadline,
            user_id=upstream.user_id,
        )
    streak, total_days = compute_streak_and_total_days(history, today)
    logger.debug("Profile for %s: streak=%s total_days=%s", identity, streak, total_days)

    return Profile(
        name=upstream.name or identity[:1].upper() + identity[1:],
        avatar=upstream.avatar or "",
        goals=goals,
        current_streak=streak,
        total_days=total_days,
        age=compute_age(upstream.birth_date, today),
        gender=upstream.gender,
    )
