"""Tests for the hourly peak price query."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pricewatch.metrics.hourly import HourlyPriceQuery
from pricewatch.models.prices import PriceSample

NOW = datetime(2025, 1, 26, 15, 30, tzinfo=timezone.utc)
H1 = datetime(2025, 1, 26, 13, 0, tzinfo=timezone.utc)
H2 = datetime(2025, 1, 26, 14, 0, tzinfo=timezone.utc)


async def _seed(store, asset: str, price: str, timestamp: datetime) -> None:
    await store.insert_sample(
        PriceSample(asset=asset, price=Decimal(price), timestamp=timestamp)
    )


@pytest.mark.asyncio
async def test_peak_per_hour(sample_store):
    await _seed(sample_store, "ethereum", "10", H1 + timedelta(minutes=5))
    await _seed(sample_store, "ethereum", "15", H1 + timedelta(minutes=10))
    await _seed(sample_store, "ethereum", "5", H2 + timedelta(minutes=5))

    rows = await HourlyPriceQuery(sample_store).get_hourly_prices(now=NOW)

    assert [(r.hour, r.asset, r.highest_price) for r in rows] == [
        (H1, "ethereum", Decimal("15")),
        (H2, "ethereum", Decimal("5")),
    ]


@pytest.mark.asyncio
async def test_ordered_by_hour_then_asset(sample_store):
    await _seed(sample_store, "polygon", "1", H2 + timedelta(minutes=5))
    await _seed(sample_store, "ethereum", "2000", H2 + timedelta(minutes=5))
    await _seed(sample_store, "polygon", "0.9", H1 + timedelta(minutes=5))

    rows = await HourlyPriceQuery(sample_store).get_hourly_prices(now=NOW)

    assert [(r.hour, r.asset) for r in rows] == [
        (H1, "polygon"),
        (H2, "ethereum"),
        (H2, "polygon"),
    ]


@pytest.mark.asyncio
async def test_samples_older_than_window_are_excluded(sample_store):
    await _seed(sample_store, "ethereum", "99", NOW - timedelta(hours=24))
    await _seed(sample_store, "ethereum", "10", NOW - timedelta(hours=23))

    rows = await HourlyPriceQuery(sample_store).get_hourly_prices(now=NOW)

    assert [r.highest_price for r in rows] == [Decimal("10")]


@pytest.mark.asyncio
async def test_each_call_rescans(sample_store):
    query = HourlyPriceQuery(sample_store)
    assert await query.get_hourly_prices(now=NOW) == []

    await _seed(sample_store, "ethereum", "10", H1)

    assert len(await query.get_hourly_prices(now=NOW)) == 1


@pytest.mark.asyncio
async def test_custom_window(sample_store):
    await _seed(sample_store, "ethereum", "10", NOW - timedelta(hours=3))

    rows = await HourlyPriceQuery(sample_store, window=timedelta(hours=2)).get_hourly_prices(now=NOW)

    assert rows == []


@pytest.mark.asyncio
async def test_naive_now_is_treated_as_utc(sample_store):
    await _seed(sample_store, "ethereum", "10", H1 + timedelta(minutes=5))

    rows = await HourlyPriceQuery(sample_store).get_hourly_prices(
        now=NOW.replace(tzinfo=None)
    )

    assert [(r.hour, r.highest_price) for r in rows] == [(H1, Decimal("10"))]


@pytest.mark.asyncio
async def test_offset_now_is_converted_to_utc(sample_store):
    await _seed(sample_store, "ethereum", "10", NOW - timedelta(hours=23))
    plus_two = timezone(timedelta(hours=2))

    rows = await HourlyPriceQuery(sample_store).get_hourly_prices(
        now=NOW.astimezone(plus_two)
    )

    assert len(rows) == 1
