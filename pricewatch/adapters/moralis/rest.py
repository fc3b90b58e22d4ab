"""
Moralis market data REST client.

Fetches the provider's snapshot of top currencies ranked by market cap.
Implements simple request throttling to stay under the provider quota.

Endpoints:
    Market cap ranking: https://deep-index.moralis.io/api/v2.2/market-data/global/market-cap

Authentication:
    X-API-Key header carrying the MORALIS_API_KEY credential.

Response Format:
    [
        {
            "rank": 1,
            "name": "Bitcoin",
            "symbol": "BTC",
            "usd_price": 40000.12,
            "market_cap_usd": 780000000000,
            ...
        },
        ...
    ]
"""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
import structlog

logger = structlog.get_logger(__name__)


class MarketDataError(Exception):
    """Raised when the provider cannot be reached or returns an error."""

    pass


class RateLimitError(MarketDataError):
    """Raised when rate limit is exceeded."""

    pass


class MoralisRestClient:
    """
    Async REST API client for Moralis market data.

    Attributes:
        base_url: REST API base URL.
        rate_limit_per_second: Maximum requests per second.
        timeout_seconds: Total request timeout.

    Example:
        >>> client = MoralisRestClient(
        ...     base_url="https://deep-index.moralis.io/api/v2.2",
        ...     api_key="...",
        ... )
        >>> entries = await client.get_top_currencies()
        >>> print(entries[0]["name"])
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        market_cap_endpoint: str = "/market-data/global/market-cap",
        rate_limit_per_second: int = 5,
        timeout_seconds: int = 10,
    ):
        """
        Initialize REST client.

        Args:
            base_url: REST API base URL.
            api_key: Provider credential sent as X-API-Key.
            market_cap_endpoint: Path of the ranked snapshot endpoint.
            rate_limit_per_second: Maximum requests per second.
            timeout_seconds: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.market_cap_endpoint = market_cap_endpoint
        self.rate_limit_per_second = rate_limit_per_second
        self.timeout_seconds = timeout_seconds

        self._api_key = api_key
        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time: float = 0.0
        self._request_interval = 1.0 / rate_limit_per_second

        if not api_key:
            logger.warning("moralis_api_key_missing", base_url=self.base_url)

        logger.info(
            "rest_client_initialized",
            base_url=self.base_url,
            rate_limit=rate_limit_per_second,
        )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            headers = {
                "User-Agent": "pricewatch/1.0",
                "Accept": "application/json",
            }
            if self._api_key:
                headers["X-API-Key"] = self._api_key
            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("rest_client_session_closed", base_url=self.base_url)

    async def _rate_limit(self) -> None:
        """
        Apply rate limiting using simple time-based throttling.

        Ensures minimum interval between requests.
        """
        loop = asyncio.get_running_loop()
        time_since_last = loop.time() - self._last_request_time

        if time_since_last < self._request_interval:
            await asyncio.sleep(self._request_interval - time_since_last)

        self._last_request_time = loop.time()

    async def _request(
        self, method: str, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Make HTTP request with rate limiting and error handling.

        Args:
            method: HTTP method.
            endpoint: API endpoint path.
            params: Query parameters.

        Returns:
            Any: Parsed JSON response.

        Raises:
            RateLimitError: If rate limited by the provider.
            MarketDataError: If the request fails.
        """
        await self._rate_limit()

        session = await self._ensure_session()
        url = f"{self.base_url}{endpoint}"

        try:
            async with session.request(method, url, params=params) as response:
                if response.status == 429:
                    retry_after = response.headers.get("Retry-After", "unknown")
                    logger.warning(
                        "rest_rate_limited",
                        url=url,
                        retry_after=retry_after,
                    )
                    raise RateLimitError(f"Rate limited, retry after {retry_after}s")

                if response.status >= 400:
                    error_text = await response.text()
                    logger.error(
                        "rest_request_failed",
                        url=url,
                        status=response.status,
                        error=error_text,
                    )
                    raise MarketDataError(
                        f"REST request failed with status {response.status}: {error_text}"
                    )

                return await response.json(content_type=None)

        except aiohttp.ClientError as e:
            logger.error("rest_client_error", url=url, error=str(e))
            raise MarketDataError(f"REST request failed: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error("rest_timeout", url=url, timeout=self.timeout_seconds)
            raise MarketDataError(
                f"REST request timeout after {self.timeout_seconds}s"
            ) from e
        except ValueError as e:
            logger.error("rest_invalid_json", url=url, error=str(e))
            raise MarketDataError(f"Invalid JSON response: {e}") from e

    async def get_top_currencies(self) -> List[Dict[str, Any]]:
        """
        Fetch the ranked snapshot of top currencies by market cap.

        Returns:
            List[Dict[str, Any]]: Raw provider entries.

        Raises:
            MarketDataError: If the request fails or the payload is not a list.
        """
        data = await self._request("GET", self.market_cap_endpoint)

        if not isinstance(data, list):
            logger.error(
                "rest_unexpected_payload",
                endpoint=self.market_cap_endpoint,
                payload_type=type(data).__name__,
            )
            raise MarketDataError(
                f"Expected a list of currencies, got {type(data).__name__}"
            )

        logger.debug("rest_top_currencies_fetched", count=len(data))
        return data

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"MoralisRestClient(base_url={self.base_url}, "
            f"rate_limit={self.rate_limit_per_second}/s)"
        )
