# -*- coding: utf-8 -*-
"""Upstream - authenticated calls against the SparkyFitness API."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..credentials.directory import CredentialDirectory
from ..errors import UpstreamMalformed, UpstreamUnavailable
from .models import DailyTotals, GoalSet, MealBreakdown, UpstreamProfile, empty_breakdown
from .normalize import parse_daily_totals, parse_food_entries, parse_goals, parse_profile, resolve_avatar

logger = logging.getLogger(__name__)

PROFILE_PATH = "/auth/profiles"
GOALS_PATH = "/goals/by-date/{date}"
TRENDS_PATH = "/reports/mini-nutrition-trends"
FOOD_ENTRIES_PATH = "/food-entries/by-date/{date}"


class SparkyFitnessClient:
    """One request-scoped HTTP session against the upstream API.

    Use as ``async with SparkyFitnessClient(directory) as client: ...``.
    Every method looks the identity's API key up in the directory and sends
    it as a bearer token. No retries, no caching.
    """

    def __init__(
        self,
        directory: CredentialDirectory,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.directory = directory
        self.base_url = (base_url or settings.upstream_base_url).rstrip("/")
        self.timeout = settings.upstream_timeout if timeout is None else timeout
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "SparkyFitnessClient":
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _headers(self, identity: str) -> Dict[str, str]:
        record = self.directory.lookup(identity)
        return {"Authorization": f"Bearer {record.api_key}"}

    async def _get(
        self,
        identity: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        allow_not_found: bool = False,
    ) -> Any:
        if self._http is None:
            raise RuntimeError("SparkyFitnessClient used outside of 'async with'")
        headers = self._headers(identity)
        try:
            resp = await self._http.get(path, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("Upstream timeout on %s for %s", path, identity)
            raise UpstreamUnavailable(f"Upstream timed out: {path}", path=path) from exc
        except httpx.HTTPError as exc:
            logger.warning("Upstream request to %s failed: %s", path, exc)
            raise UpstreamUnavailable(f"Upstream request failed: {exc}", path=path) from exc

        if resp.status_code == 404 and allow_not_found:
            return None
        if resp.status_code >= 400:
            logger.warning("Upstream %s returned HTTP %s for %s", path, resp.status_code, identity)
            raise UpstreamUnavailable(
                f"Upstream returned HTTP {resp.status_code} for {path}",
                status_code=resp.status_code,
                path=path,
            )
        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("Upstream %s returned non-JSON body", path)
            raise UpstreamMalformed(f"Upstream returned invalid JSON for {path}", path=path) from exc

    async def fetch_profile(self, identity: str) -> UpstreamProfile:
        payload = await self._get(identity, PROFILE_PATH)
        profile = parse_profile(payload)
        profile.avatar = resolve_avatar(profile.avatar, base_url=self.base_url, seed=identity)
        return profile

    async def resolve_upstream_identity(self, identity: str) -> str:
        """Return the upstream's internal user id for ``identity``."""
        return (await self.fetch_profile(identity)).user_id

    async def fetch_goals(self, identity: str, day: Optional[date] = None) -> GoalSet:
        day = day or date.today()
        payload = await self._get(identity, GOALS_PATH.format(date=day.isoformat()))
        return parse_goals(payload)

    async def fetch_daily_totals(
        self,
        identity: str,
        user_id: str,
        start: date,
        end: date,
    ) -> List[DailyTotals]:
        """Sparse per-day totals; days without logged food are simply absent."""
        payload = await self._get(
            identity,
            TRENDS_PATH,
            params={"userId": user_id, "startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        if payload is None:
            return []
        return parse_daily_totals(payload)

    async def fetch_food_entries(self, identity: str, day: date) -> MealBreakdown:
        payload = await self._get(
            identity,
            FOOD_ENTRIES_PATH.format(date=day.isoformat()),
            allow_not_found=True,
        )
        if payload is None:
            return empty_breakdown()
        return parse_food_entries(payload)
