# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import unittest
from unittest import mock
from datetime import date, timedelta

import httpx

from sparkyviz.errors import InvalidInput, UpstreamUnavailable
from sparkyviz.history.aggregator import build_history, date_window, fetch_meals_for_window
from sparkyviz.upstream.client import SparkyFitnessClient
from tests.fake_upstream import BASE_URL, FakeSparky, make_directory

TODAY = date(2026, 10, 18)


def _day(offset: int) -> str:
    return (TODAY - timedelta(days=offset)).isoformat()


class TestDateWindow(unittest.TestCase):
    def test_window_ends_today(self) -> None:
        window = date_window(3, TODAY)
        self.assertEqual(window, [date(2026, 10, 16), date(2026, 10, 17), date(2026, 10, 18)])

    def test_window_crosses_month_and_year(self) -> None:
        window = date_window(5, date(2026, 1, 2))
        self.assertEqual(window[0], date(2025, 12, 29))
        self.assertEqual(len(window), 5)

    def test_non_positive_days(self) -> None:
        for days in (0, -3):
            with self.assertRaises(InvalidInput):
                date_window(days, TODAY)


class TestBuildHistory(unittest.IsolatedAsyncioTestCase):
    def _client(self, fake: FakeSparky) -> SparkyFitnessClient:
        return SparkyFitnessClient(make_directory(), base_url=BASE_URL, transport=fake.transport())

    async def test_seven_days_five_with_data(self) -> None:
        totals = [
            {"date": _day(0), "calories": 2000.04, "protein": 150.26, "carbs": 240, "fat": 70.55},
            {"date": _day(1), "calories": 1800, "protein": 120, "carbs": 200, "fat": 60},
            {"date": _day(3), "calories": 1700, "protein": 110, "carbs": 190, "fat": 55},
            {"date": _day(4), "calories": 1600, "protein": 100, "carbs": 180, "fat": 50},
            {"date": _day(6), "calories": 1500, "protein": 90, "carbs": 170, "fat": 45},
        ]
        fake = FakeSparky(totals=totals)
        async with self._client(fake) as client:
            history = await build_history(client, "alice", 7, today=TODAY)

        self.assertEqual(len(history), 7)
        self.assertEqual([d.date for d in history], [_day(i) for i in range(6, -1, -1)])
        zero_days = [d for d in history if d.nutrients.calories == 0]
        self.assertEqual({d.date for d in zero_days}, {_day(2), _day(5)})
        for d in zero_days:
            self.assertEqual((d.nutrients.protein, d.nutrients.carbs, d.nutrients.fat), (0, 0, 0))
        last = history[-1].nutrients
        self.assertEqual(last.calories, 2000.0)
        self.assertEqual(last.protein, 150.3)
        self.assertTrue(all(d.meals is None for d in history))
        self.assertNotIn("/food-entries/by-date/" + _day(0), fake.paths())

    async def test_out_of_window_rows_are_ignored(self) -> None:
        totals = [
            {"date": _day(10), "calories": 999},
            {"date": (TODAY + timedelta(days=1)).isoformat(), "calories": 999},
            {"date": _day(0), "calories": 100},
        ]
        fake = FakeSparky(totals=totals)
        async with self._client(fake) as client:
            history = await build_history(client, "alice", 3, today=TODAY)
        self.assertEqual([d.nutrients.calories for d in history], [0, 0, 100])

    async def test_empty_upstream_still_full_length(self) -> None:
        fake = FakeSparky()
        async with self._client(fake) as client:
            history = await build_history(client, "alice", 90, today=TODAY)
        self.assertEqual(len(history), 90)
        self.assertEqual(len({d.date for d in history}), 90)
        self.assertEqual(history[-1].date, TODAY.isoformat())
        self.assertTrue(all(d.nutrients.calories == 0 for d in history))

    async def test_meals_attached_and_one_day_failure_degrades(self) -> None:
        entries = {
            _day(0): [{"meal_type": "dinner", "food_name": "Pasta", "quantity": 150, "serving_size": 100, "calories": 200}],
            _day(2): [{"meal_type": "breakfast", "food_name": "Toast", "calories": 120}],
        }
        fake = FakeSparky(entries=entries, fail_dates=[_day(1)])
        async with self._client(fake) as client:
            history = await build_history(client, "alice", 4, include_meals=True, today=TODAY)

        self.assertEqual(len(history), 4)
        by_date = {d.date: d for d in history}
        self.assertEqual(by_date[_day(0)].meals["dinner"][0].calories, 300.0)
        self.assertEqual(by_date[_day(2)].meals["breakfast"][0].name, "Toast")
        for empty in (_day(1), _day(3)):
            self.assertIsNotNone(by_date[empty].meals)
            self.assertTrue(all(items == [] for items in by_date[empty].meals.values()))
        food_calls = [p for p in fake.paths() if p.startswith("/food-entries/")]
        self.assertEqual(len(food_calls), 4)

    async def test_unreadable_meal_day_degrades(self) -> None:
        entries = {
            _day(0): [{"meal_type": "lunch", "food_name": "Glitch", "quantity": 10**400, "serving_size": 1, "calories": 10**400}],
            _day(1): [{"meal_type": "dinner", "food_name": "Stew", "calories": 400}],
        }
        fake = FakeSparky(entries=entries, totals=[{"date": _day(0), "calories": 10**400}])
        async with self._client(fake) as client:
            history = await build_history(client, "alice", 3, include_meals=True, today=TODAY)
        self.assertEqual(len(history), 3)
        self.assertEqual(history[-1].nutrients.calories, 0.0)
        self.assertEqual(history[-1].meals["lunch"][0].calories, 0.0)
        self.assertEqual(history[1].meals["dinner"][0].name, "Stew")

    async def test_unexpected_meal_error_only_empties_that_day(self) -> None:
        fake = FakeSparky(entries={_day(0): [{"meal_type": "snack", "food_name": "Nuts", "calories": 180}]})
        async with self._client(fake) as client:
            real_fetch = client.fetch_food_entries

            async def flaky(identity: str, day: date):
                if day.isoformat() == _day(1):
                    raise ValueError("cannot parse entries")
                return await real_fetch(identity, day)

            with mock.patch.object(client, "fetch_food_entries", side_effect=flaky):
                history = await build_history(client, "alice", 3, include_meals=True, today=TODAY)
        self.assertEqual(len(history), 3)
        self.assertTrue(all(items == [] for items in history[1].meals.values()))
        self.assertEqual(history[2].meals["snack"][0].name, "Nuts")

    async def test_totals_inside_data_envelope(self) -> None:
        fake = FakeSparky()
        fake.totals = {"data": [{"date": _day(0), "calories": 1800}], "count": 1}
        async with self._client(fake) as client:
            history = await build_history(client, "alice", 3, today=TODAY)
        self.assertEqual([d.nutrients.calories for d in history], [0, 0, 1800])

    async def test_preresolved_user_id_skips_profile_call(self) -> None:
        fake = FakeSparky()
        async with self._client(fake) as client:
            await build_history(client, "alice", 3, today=TODAY, user_id="u-1")
        self.assertNotIn("/auth/profiles", fake.paths())
        self.assertEqual(fake.calls[0].url.params["userId"], "u-1")

    async def test_totals_failure_aborts(self) -> None:
        fake = FakeSparky(fail_paths=["/reports/"])
        async with self._client(fake) as client:
            with self.assertRaises(UpstreamUnavailable):
                await build_history(client, "alice", 7, today=TODAY)

    async def test_identity_failure_aborts_before_totals(self) -> None:
        fake = FakeSparky(fail_paths=["/auth/"])
        async with self._client(fake) as client:
            with self.assertRaises(UpstreamUnavailable):
                await build_history(client, "alice", 7, today=TODAY)
        self.assertEqual(fake.paths(), ["/auth/profiles"])

    async def test_invalid_days(self) -> None:
        fake = FakeSparky()
        async with self._client(fake) as client:
            with self.assertRaises(InvalidInput):
                await build_history(client, "alice", 0, today=TODAY)
        self.assertEqual(fake.calls, [])

    async def test_deadline(self) -> None:
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json={"id": "u-1"})

        client = SparkyFitnessClient(make_directory(), base_url=BASE_URL, transport=httpx.MockTransport(slow))
        async with client:
            with self.assertRaises(UpstreamUnavailable):
                await build_history(client, "alice", 7, today=TODAY, deadline=0.05)


class TestMealFanOut(unittest.IsolatedAsyncioTestCase):
    async def test_concurrency_is_bounded_and_order_kept(self) -> None:
        active = 0
        peak = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return httpx.Response(404)

        window = [TODAY - timedelta(days=i) for i in range(12, -1, -1)]
        client = SparkyFitnessClient(make_directory(), base_url=BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            meals = await fetch_meals_for_window(client, "alice", window, max_concurrency=3)
        self.assertEqual(list(meals.keys()), [d.isoformat() for d in window])
        self.assertLessEqual(peak, 3)
        self.assertGreater(peak, 1)


if __name__ == "__main__":
    unittest.main()
