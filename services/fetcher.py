"""HTTP client for the Awair local air-data API."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from app.schemas import AirDataPayload
from models.records import AirReading

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A source could not be reached or returned an unusable body."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"unable to get air-data from {source}: {reason}")
        self.source = source
        self.reason = reason


class ReadingFetcher:
    """Performs one GET per call and decodes the body into an ``AirReading``.

    No retries are attempted; the next refresh cycle is the retry.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float | httpx.Timeout = httpx.Timeout(5.0),
    ) -> None:
        self._client = client
        self._timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def fetch(self, source: str) -> AirReading:
        client = self._get_client()
        try:
            response = await client.get(source)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(source, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(source, str(exc) or type(exc).__name__) from exc
        except (httpx.InvalidURL, ValueError) as exc:
            raise FetchError(source, f"invalid URL: {exc}") from exc

        try:
            payload = AirDataPayload.model_validate_json(response.content)
        except ValidationError as exc:
            raise FetchError(
                source, f"invalid air-data payload ({exc.error_count()} errors)"
            ) from exc

        logger.debug("Fetched air-data", extra={"source": source})
        return payload.to_reading()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
