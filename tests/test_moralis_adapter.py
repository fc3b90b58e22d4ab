"""Tests for the Moralis price source.

The REST client is never allowed to hit the network: its request method
is replaced with AsyncMock.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from pricewatch.adapters.moralis import (
    MarketDataError,
    MoralisAdapter,
    MoralisNormalizer,
    MoralisRestClient,
)

RANKING = [
    {"rank": 1, "name": "Bitcoin", "symbol": "BTC", "usd_price": 40000.12},
    {"rank": 2, "name": "Ethereum", "symbol": "ETH", "usd_price": 2000.5},
    {"rank": 14, "name": "Polygon", "symbol": "MATIC", "usd_price": 0.85},
]


@pytest.fixture
def rest_client() -> MoralisRestClient:
    """Return a REST client with a mocked request method."""
    client = MoralisRestClient(base_url="https://example.invalid/api", api_key="test-key")
    client._request = AsyncMock(return_value=RANKING)
    return client


@pytest.mark.asyncio
async def test_fetch_price_matches_name_case_insensitively(rest_client):
    adapter = MoralisAdapter(rest_client)

    price = await adapter.fetch_price("ethereum")

    assert price == Decimal("2000.5")
    rest_client._request.assert_awaited_once_with("GET", "/market-data/global/market-cap")


@pytest.mark.asyncio
async def test_fetch_price_keeps_printed_value(rest_client):
    price = await MoralisAdapter(rest_client).fetch_price("Bitcoin")

    assert str(price) == "40000.12"


@pytest.mark.asyncio
async def test_unlisted_asset_returns_none(rest_client):
    assert await MoralisAdapter(rest_client).fetch_price("dogecoin") is None


@pytest.mark.asyncio
async def test_provider_failure_returns_none(rest_client):
    rest_client._request = AsyncMock(side_effect=MarketDataError("status 500"))
    adapter = MoralisAdapter(rest_client)

    assert await adapter.fetch_price("ethereum") is None


@pytest.mark.asyncio
async def test_unexpected_error_returns_none(rest_client):
    rest_client._request = AsyncMock(side_effect=KeyError("boom"))
    adapter = MoralisAdapter(rest_client)

    assert await adapter.fetch_price("ethereum") is None


@pytest.mark.asyncio
async def test_non_list_payload_is_a_provider_failure(rest_client):
    rest_client._request = AsyncMock(return_value={"message": "Invalid key"})

    with pytest.raises(MarketDataError):
        await rest_client.get_top_currencies()

    assert await MoralisAdapter(rest_client).fetch_price("ethereum") is None


@pytest.mark.asyncio
async def test_each_fetch_requests_a_fresh_snapshot(rest_client):
    adapter = MoralisAdapter(rest_client)

    await adapter.fetch_price("ethereum")
    await adapter.fetch_price("polygon")

    assert rest_client._request.await_count == 2


@pytest.mark.asyncio
async def test_close_without_session_is_safe(rest_client):
    await MoralisAdapter(rest_client).close()


def test_provider_name(rest_client):
    assert MoralisAdapter(rest_client).provider_name == "moralis"


# -----------------------------------------------------------------------
# Normalizer
# -----------------------------------------------------------------------


def test_normalize_ranking_skips_malformed_entries():
    quotes = MoralisNormalizer.normalize_ranking(
        [
            {"name": "Ethereum", "usd_price": 2000},
            {"name": "NoPrice"},
            {"usd_price": 5},
            {"name": "Garbage", "usd_price": "not-a-number"},
            "not-a-dict",
        ]
    )

    assert [q.name for q in quotes] == ["Ethereum"]


def test_find_quote_returns_first_match():
    quotes = MoralisNormalizer.normalize_ranking(RANKING)

    quote = MoralisNormalizer.find_quote(quotes, "POLYGON")

    assert quote is not None
    assert quote.symbol == "MATIC"
    assert MoralisNormalizer.find_quote(quotes, "solana") is None


def test_normalize_entry_rejects_negative_price():
    with pytest.raises(ValueError):
        MoralisNormalizer.normalize_entry({"name": "Broken", "usd_price": -1})
