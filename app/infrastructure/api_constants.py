"""
API endpoint constants and configuration.

This module contains all forecast-provider endpoint paths and related constants.
Centralizing these values makes it easy to swap out endpoints or update API versions.
"""


# OpenWeather API Endpoints
class OpenWeatherEndpoints:
    """OpenWeather API endpoint paths."""

    ONE_CALL = "/data/3.0/onecall"

    # Blocks of the One Call response that the analysis never reads
    EXCLUDED_BLOCKS = ("minutely", "hourly", "alerts")

    @classmethod
    def one_call_params(
        cls,
        lat: float,
        lon: float,
        api_key: str,
        units: str = "metric",
    ) -> dict[str, str | float]:
        """
        Build query parameters for a One Call request.

        Args:
            lat: Latitude of the field centroid
            lon: Longitude of the field centroid
            api_key: OpenWeather API key
            units: Unit system (metric gives °C and m/s)

        Returns:
            Query parameter dictionary
        """
        return {
            "lat": lat,
            "lon": lon,
            "exclude": ",".join(cls.EXCLUDED_BLOCKS),
            "units": units,
            "appid": api_key,
        }


# API Configuration Constants
class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Status codes with dedicated handling
    UNAUTHORIZED = 401
    SERVICE_UNAVAILABLE = 503
