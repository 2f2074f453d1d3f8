"""
Infrastructure layer: Forecast provider client with retry logic.
"""
from typing import List, Dict, Any, Optional
import logging
from pydantic import BaseModel, ValidationError
import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from app.config import settings
from app.domain.models import (
    Coordinate,
    CurrentWeather,
    DailyForecast,
    WeatherForecast,
)
from app.infrastructure.api_constants import APIConstants, OpenWeatherEndpoints

logger = logging.getLogger(__name__)


# Pydantic model for the provider response
class OneCallResponse(BaseModel):
    """Subset of the One Call response used for analysis."""
    lat: Optional[float] = None
    lon: Optional[float] = None
    timezone: Optional[str] = None
    current: Optional[CurrentWeather] = None
    daily: List[DailyForecast] = []


class WeatherConfigurationError(Exception):
    """Raised when the forecast provider is not configured (no API key)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class WeatherAPIError(Exception):
    """Raised when the forecast provider answers with an error or cannot be reached."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == APIConstants.UNAUTHORIZED


class WeatherAPIClient:
    """
    Client for the OpenWeather One Call API.

    Transport failures (connection errors, timeouts) are retried with
    exponential backoff. Error responses are never retried.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        """
        Initialize the API client with configuration.

        Args:
            api_key: Overrides the configured API key
            base_url: Overrides the configured base URL
        """
        self.base_url = base_url or settings.openweather_base_url
        self.api_key = settings.openweather_api_key if api_key is None else api_key
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"accept": APIConstants.CONTENT_TYPE_JSON},
            timeout=settings.request_timeout,
        )

    async def __aenter__(self) -> "WeatherAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Make an HTTP request, retrying transport failures.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Response data as dictionary

        Raises:
            WeatherAPIError: If the provider answers with a non-success status
            httpx.TransportError: If the provider is unreachable after retries
        """
        response = await self.client.request(method, endpoint, **kwargs)

        if response.status_code == APIConstants.UNAUTHORIZED:
            raise WeatherAPIError("Invalid API key", status_code=response.status_code)
        if not response.is_success:
            raise WeatherAPIError(
                f"Weather API error: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise WeatherAPIError(f"Malformed forecast response: {str(e)}") from e

    async def get_forecast(self, coordinate: Coordinate) -> WeatherForecast:
        """
        Fetch current conditions and the daily forecast for a coordinate.

        Args:
            coordinate: Field centroid

        Returns:
            WeatherForecast with at most ``settings.forecast_days`` daily entries

        Raises:
            WeatherConfigurationError: If no API key is configured
            WeatherAPIError: If the request fails or the response is malformed
        """
        if not self.api_key:
            raise WeatherConfigurationError(
                "Missing API key: please set OPENWEATHER_API_KEY in your .env file."
            )

        logger.info(f"Fetching forecast for ({coordinate.lat:.5f}, {coordinate.lon:.5f})")
        try:
            data = await self._make_request(
                "GET",
                OpenWeatherEndpoints.ONE_CALL,
                params=OpenWeatherEndpoints.one_call_params(
                    coordinate.lat,
                    coordinate.lon,
                    self.api_key,
                    units=settings.weather_units,
                ),
            )
        except httpx.TransportError as e:
            raise WeatherAPIError(
                f"Weather API request error: {str(e)}",
                status_code=APIConstants.SERVICE_UNAVAILABLE,
            ) from e

        try:
            response = OneCallResponse(**data)
        except (ValidationError, TypeError) as e:
            raise WeatherAPIError(f"Malformed forecast response: {str(e)}") from e

        daily = response.daily[:settings.forecast_days]
        if len(daily) < settings.forecast_days:
            logger.warning(
                f"Provider returned {len(response.daily)} daily entries, "
                f"expected {settings.forecast_days}"
            )
        return WeatherForecast(current=response.current, daily=tuple(daily))


# Singleton instance
_weather_client: Optional[WeatherAPIClient] = None


def get_weather_client() -> WeatherAPIClient:
    """
    Get or create the singleton forecast client instance.

    Returns:
        WeatherAPIClient instance
    """
    global _weather_client
    if _weather_client is None:
        _weather_client = WeatherAPIClient()
    return _weather_client
