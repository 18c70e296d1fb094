# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import time
import unittest
from datetime import date, timedelta

import httpx

from sparkyviz.errors import UpstreamUnavailable
from sparkyviz.profile.aggregator import build_profile
from sparkyviz.upstream.client import SparkyFitnessClient
from tests.fake_upstream import BASE_URL, FakeSparky, make_directory

TODAY = date(2026, 10, 18)


def _row(offset: int, calories: float) -> dict:
    return {"date": (TODAY - timedelta(days=offset)).isoformat(), "calories": calories}


class TestBuildProfile(unittest.IsolatedAsyncioTestCase):
    def _client(self, fake: FakeSparky) -> SparkyFitnessClient:
        return SparkyFitnessClient(make_directory(), base_url=BASE_URL, transport=fake.transport())

    async def test_profile_with_streak(self) -> None:
        totals = [_row(i, 2000) for i in range(5)] + [_row(6, 1800), _row(40, 1500), _row(120, 1500)]
        fake = FakeSparky(totals=totals)
        async with self._client(fake) as client:
            profile = await build_profile(client, "alice", today=TODAY)

        self.assertEqual(profile.name, "Alice Example")
        self.assertEqual(profile.avatar, f"{BASE_URL}/uploads/alice.png")
        self.assertEqual(profile.goals.calories, 2000)
        self.assertEqual(profile.current_streak, 5)
        # The 120-days-ago row falls outside the 90 day window.
        self.assertEqual(profile.total_days, 7)
        self.assertEqual(profile.age, 35)
        self.assertEqual(profile.gender, "female")
        self.assertIn("/goals/by-date/2026-10-18", fake.paths())

        trends = [r for r in fake.calls if r.url.path == "/reports/mini-nutrition-trends"][0]
        self.assertEqual(trends.url.params["startDate"], (TODAY - timedelta(days=89)).isoformat())
        self.assertEqual(trends.url.params["endDate"], TODAY.isoformat())

    async def test_serializes_camel_case_metrics(self) -> None:
        fake = FakeSparky(profile={"id": "u-1"})
        async with self._client(fake) as client:
            profile = await build_profile(client, "alice", today=TODAY)
        payload = profile.model_dump(by_alias=True)
        self.assertEqual(payload["name"], "Alice")
        self.assertEqual(payload["currentStreak"], 0)
        self.assertEqual(payload["totalDays"], 0)
        self.assertIsNone(payload["age"])
        self.assertTrue(payload["avatar"].startswith("https://api.dicebear.com/"))

    async def test_profile_is_resolved_once(self) -> None:
        fake = FakeSparky(totals=[_row(0, 2000)])
        async with self._client(fake) as client:
            await build_profile(client, "alice", today=TODAY)
        self.assertEqual(fake.paths().count("/auth/profiles"), 1)
        trends = [r for r in fake.calls if r.url.path == "/reports/mini-nutrition-trends"][0]
        self.assertEqual(trends.url.params["userId"], "u-1")

    async def test_deadline_covers_goals_call(self) -> None:
        fake = FakeSparky()

        async def slow_goals(request: httpx.Request) -> httpx.Response:
            if request.url.path.startswith("/goals/"):
                await asyncio.sleep(0.5)
            return fake.handler(request)

        client = SparkyFitnessClient(make_directory(), base_url=BASE_URL, transport=httpx.MockTransport(slow_goals))
        started = time.monotonic()
        async with client:
            with self.assertRaises(UpstreamUnavailable):
                await build_profile(client, "alice", today=TODAY, deadline=0.05)
        self.assertLess(time.monotonic() - started, 0.4)

    async def test_goal_failure_aborts(self) -> None:
        fake = FakeSparky(fail_paths=["/goals/"])
        async with self._client(fake) as client:
            with self.assertRaises(UpstreamUnavailable):
                await build_profile(client, "alice", today=TODAY)


if __name__ == "__main__":
    unittest.main()
