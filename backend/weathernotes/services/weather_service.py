"""
WeatherNotes — Weather Lookup Adapter
======================================

What:  Fetches current conditions for a city from WeatherAPI.com.
Why:   The notes page shows the weather for the user's stored city.
How:   One GET to `current.json?key=...&q=<city>` through httpx, bounded by
       WEATHER_TIMEOUT. The response becomes a WeatherSnapshot.
Who:   Called by the notes routes once per page render.

Outcomes:
    WeatherSnapshot       → the page renders the widget
    WeatherNotFoundError  → response has no `current` object (or blank city)
    WeatherServiceError   → network error, timeout, non-2xx, bad JSON, no key

Both errors are non-fatal: the caller renders the fallback message. There is
no cache, retry or backoff, so a render costs at most one outbound request,
and nothing about a lookup survives the request that made it.
"""

import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from weathernotes.config import settings
from weathernotes.exceptions import WeatherNotFoundError, WeatherServiceError
from weathernotes.schemas.weather import WeatherSnapshot

logger = logging.getLogger(__name__)


class WeatherService:
    """
    Thin client over the weather API.

    `transport` is forwarded to httpx.AsyncClient; tests pass an
    httpx.MockTransport to script upstream responses.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.weather_api_key if api_key is None else api_key
        self.api_url = api_url or settings.weather_api_url
        self.timeout = timeout or settings.weather_timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def fetch_current(self, city: str) -> WeatherSnapshot:
        """
        Current conditions for `city`.

        Raises:
            WeatherNotFoundError: blank city, or no current conditions returned
            WeatherServiceError: the request failed or the body was unusable
        """
        city = (city or "").strip()
        if not city:
            raise WeatherNotFoundError(city=city)
        if not self.is_configured:
            logger.warning("Weather lookup skipped: WEATHER_API_KEY is not set")
            raise WeatherServiceError(
                message="Weather service is not configured",
                context={"reason": "missing_api_key"},
            )

        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(
                    self.api_url,
                    params={"key": self.api_key, "q": city, "aqi": "no"},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as e:
            logger.warning("Weather lookup timed out after %.1fs", self.timeout)
            raise WeatherServiceError(context={"error_type": type(e).__name__})
        except httpx.HTTPStatusError as e:
            logger.warning("Weather API returned HTTP %d", e.response.status_code)
            raise WeatherServiceError(context={"status": e.response.status_code})
        except httpx.HTTPError as e:
            logger.warning("Weather request failed: %s", str(e))
            raise WeatherServiceError(context={"error_type": type(e).__name__})
        except ValueError as e:
            # response.json() on a non-JSON body
            logger.warning("Weather API returned a malformed body: %s", str(e))
            raise WeatherServiceError(context={"error_type": "malformed_body"})

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not isinstance(payload, dict):
            raise WeatherServiceError(context={"error_type": "malformed_body"})
        if not payload.get("current"):
            logger.info("No current conditions for city '%s' (%.0fms)", city, duration_ms)
            raise WeatherNotFoundError(city=city)

        try:
            snapshot = WeatherSnapshot.from_api(payload, city)
        except (KeyError, TypeError, AttributeError, PydanticValidationError) as e:
            logger.warning("Weather payload could not be parsed: %s", str(e))
            raise WeatherServiceError(context={"error_type": "malformed_body"})

        logger.info(
            "Weather for '%s' fetched in %.0fms: %.1f°C %s",
            snapshot.location,
            duration_ms,
            snapshot.temp_c,
            snapshot.condition,
        )
        return snapshot


weather_service = WeatherService()
