"""Tests for navigation pacing."""

import random
from unittest.mock import AsyncMock, MagicMock

from mseater.models import DurationRange
from mseater.navigator import RateLimitedNavigator


def make_page() -> MagicMock:
    page = MagicMock()
    page.goto = AsyncMock(return_value=None)
    return page


class TestRateLimitedNavigator:
    async def test_first_navigation_is_not_delayed(self) -> None:
        sleep = AsyncMock()
        navigator = RateLimitedNavigator(DurationRange(lower=15, upper=25), sleep=sleep)
        page = make_page()

        await navigator.goto(page, "https://tickets.example/search")

        sleep.assert_not_awaited()
        page.goto.assert_awaited_once_with("https://tickets.example/search")
        assert navigator.has_navigated_once is True

    async def test_later_navigations_wait_within_interval(self) -> None:
        sleep = AsyncMock()
        navigator = RateLimitedNavigator(
            DurationRange(lower=15, upper=25), sleep=sleep, rng=random.Random(7)
        )
        page = make_page()

        for i in range(5):
            await navigator.goto(page, f"https://tickets.example/seats/{i}")

        assert sleep.await_count == 4
        delays = [call.args[0] for call in sleep.await_args_list]
        assert all(15 <= d <= 25 for d in delays)
        assert page.goto.await_count == 5

    async def test_fixed_interval_is_constant(self) -> None:
        sleep = AsyncMock()
        navigator = RateLimitedNavigator(DurationRange(lower=3, upper=3), sleep=sleep)
        page = make_page()

        for _ in range(3):
            await navigator.goto(page, "https://tickets.example/")

        assert [call.args[0] for call in sleep.await_args_list] == [3, 3]

    async def test_pacing_spans_pages(self) -> None:
        sleep = AsyncMock()
        navigator = RateLimitedNavigator(DurationRange(lower=1, upper=1), sleep=sleep)

        await navigator.goto(make_page(), "https://tickets.example/search")
        await navigator.goto(make_page(), "https://tickets.example/seats/1")

        sleep.assert_awaited_once_with(1)

    async def test_goto_passes_options(self) -> None:
        navigator = RateLimitedNavigator(DurationRange(lower=0, upper=0), sleep=AsyncMock())
        page = make_page()

        await navigator.goto(page, "https://tickets.example/", wait_until="networkidle")

        page.goto.assert_awaited_once_with("https://tickets.example/", wait_until="networkidle")

    async def test_wait_turn_reports_delay(self) -> None:
        navigator = RateLimitedNavigator(DurationRange(lower=2, upper=2), sleep=AsyncMock())
        assert await navigator.wait_turn() == 0.0
        assert await navigator.wait_turn() == 2
