"""Supabase (PostgREST) data source implementation."""

import logging
import asyncio
from typing import Optional

import httpx

from journal_analytics.clock import wall_clock
from journal_analytics.models import TradeRecord
from .base import DataSource, DataSourceError, rows_to_trades

logger = logging.getLogger(__name__)

# API constants
TRADES_ENDPOINT = "/rest/v1/trades"
TRADES_SELECT = "*,strategies(name)"
PAGE_SIZE = 1000
REQUEST_TIMEOUT = 30.0
MAX_RETRIES = 5
RETRY_DELAY = 2.0
RATE_LIMIT_DELAY = 0.5


class SupabaseDataSource(DataSource):
    """
    Data source implementation using the Supabase REST API.

    Limitations:
    - Results are paged in blocks of 1,000 rows (the PostgREST default cap)
    - Scoping to the user relies on row-level security and the caller's token
    """

    def __init__(
        self,
        api_url: str,
        anon_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_delay: float = RETRY_DELAY,
    ):
        """
        Initialize Supabase data source.

        Args:
            api_url: Project URL, e.g. https://<ref>.supabase.co
            anon_key: Public anon key sent as the ``apikey`` header
            transport: Optional httpx transport (used by tests)
            retry_delay: Seconds to wait before retrying a timed-out request
        """
        self.api_url = api_url.rstrip("/")
        self.anon_key = anon_key
        self.retry_delay = retry_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _make_request(
        self,
        params: dict,
        headers: dict,
        retry_count: int = 0,
    ) -> list[dict]:
        """
        Make HTTP request with timeout handling and retries.

        Args:
            params: PostgREST query parameters
            headers: Per-request headers (auth, range)
            retry_count: Current retry attempt

        Returns:
            Response JSON rows
        """
        client = await self._get_client()

        try:
            response = await client.get(
                TRADES_ENDPOINT,
                params=params,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            if retry_count < MAX_RETRIES:
                logger.warning(
                    f"Request to {TRADES_ENDPOINT} timed out (attempt {retry_count + 1}/{MAX_RETRIES}). "
                    f"Retrying in {self.retry_delay}s..."
                )
                await asyncio.sleep(self.retry_delay)
                return await self._make_request(params, headers, retry_count + 1)
            logger.error(f"Request to {TRADES_ENDPOINT} failed after {MAX_RETRIES} retries: {e}")
            raise DataSourceError(f"Timed out fetching trades: {e}") from e

        except httpx.HTTPStatusError as e:
            # Handle rate limiting (429 Too Many Requests)
            if e.response.status_code == 429 and retry_count < MAX_RETRIES:
                logger.warning(
                    f"Rate limited (429) on {TRADES_ENDPOINT} (attempt {retry_count + 1}/{MAX_RETRIES}). "
                    f"Retrying in {RATE_LIMIT_DELAY}s..."
                )
                await asyncio.sleep(RATE_LIMIT_DELAY)
                return await self._make_request(params, headers, retry_count + 1)

            logger.error(f"HTTP error {e.response.status_code} for {TRADES_ENDPOINT}: {e}")
            raise DataSourceError(
                f"Supabase returned {e.response.status_code} for trades"
            ) from e

        except httpx.HTTPError as e:
            logger.error(f"Unexpected error for {TRADES_ENDPOINT}: {e}")
            raise DataSourceError(f"Could not reach Supabase: {e}") from e

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={
                    "apikey": self.anon_key,
                    "Accept": "application/json",
                },
                timeout=REQUEST_TIMEOUT,
                transport=self._transport,
            )
        return self._client

    async def get_trades(self, access_token: Optional[str] = None) -> list[TradeRecord]:
        """
        Retrieve the caller's trades with their strategy names.

        Pages through the table with Range headers until a short page comes back.
        """
        params = {
            "select": TRADES_SELECT,
            "order": "opened_at.asc",
        }
        bearer = access_token or self.anon_key

        trades: list[TradeRecord] = []
        offset = 0

        while True:
            headers = {
                "Authorization": f"Bearer {bearer}",
                "Range-Unit": "items",
                "Range": f"{offset}-{offset + PAGE_SIZE - 1}",
            }
            rows = await self._make_request(params, headers)

            if not rows:
                break

            trades.extend(rows_to_trades(rows))

            # A short page means there is no more data
            if len(rows) < PAGE_SIZE:
                break
            offset += PAGE_SIZE

        logger.info(f"Fetched {len(trades)} trades from Supabase")

        # Sort by entry time ascending
        trades.sort(key=lambda t: wall_clock(t.openedAt))

        return trades

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
