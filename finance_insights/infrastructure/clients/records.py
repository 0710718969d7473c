"""Record store HTTP client for fetching a user's transaction and income snapshot"""

import asyncio
import httpx
from typing import Any, Dict, List, Tuple
from finance_insights.domain.exceptions import RecordSourceError
from finance_insights.config import settings
from finance_insights.infrastructure.observability.metrics import record_fetch_failures_counter


class RecordsClient:
    """Client for the external record store API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.records_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.fetch_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.fetch_backoff_base
        self.transport = transport

    async def get_snapshot(self, user_id: str) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Fetch transactions and incomes for one user as a single snapshot.

        Raises:
            RecordSourceError: When the store stays unavailable after retries,
                rejects the request, or returns a malformed payload
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            transactions = await self._fetch(client, "transactions", user_id)
            incomes = await self._fetch(client, "incomes", user_id)
        return transactions, incomes

    async def _fetch(self, client: httpx.AsyncClient, collection: str, user_id: str) -> List[Dict[str, Any]]:
        """
        GET one collection with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ... (base * 2^(attempt-1))
        - Retries on 5xx errors, timeouts and network failures
        - 4xx responses and malformed payloads fail immediately
        """
        url = f"{self.base_url}/records/{collection}"
        attempt = 0
        while True:
            try:
                response = await client.get(url, params={"user_id": user_id})
                response.raise_for_status()
                data = response.json()
                items = data.get(collection, [])
                if not isinstance(items, list):
                    raise TypeError(f"'{collection}' is not a list")
                return items

            except httpx.HTTPStatusError as e:
                record_fetch_failures_counter.labels(collection=collection).inc()
                if e.response.status_code < 500:
                    raise RecordSourceError(f"Record store error: {e.response.status_code}") from e
                error = RecordSourceError(f"Record store error: {e.response.status_code}")
                cause: Exception = e

            except httpx.TimeoutException as e:
                record_fetch_failures_counter.labels(collection=collection).inc()
                error = RecordSourceError(f"Record store timeout after {self.timeout}s")
                cause = e

            except httpx.RequestError as e:
                record_fetch_failures_counter.labels(collection=collection).inc()
                error = RecordSourceError(f"Record store unreachable: {e}")
                cause = e

            except (KeyError, ValueError, TypeError, AttributeError) as e:
                record_fetch_failures_counter.labels(collection=collection).inc()
                raise RecordSourceError(f"Invalid {collection} data from record store: {e}") from e

            attempt += 1
            if attempt > self.max_retries:
                raise error from cause

            backoff = self.backoff_base * (2 ** (attempt - 1))
            await asyncio.sleep(backoff)
