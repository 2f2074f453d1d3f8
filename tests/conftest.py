"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Forecast day factories and sample weeks
- Sample field polygons
- One Call response payloads
- Mock weather client
- FastAPI test client
"""
import pytest
from typing import Callable
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from app.main import app
from app.domain.models import (
    Coordinate,
    CurrentWeather,
    DailyForecast,
    TemperatureRange,
    WeatherForecast,
)
from app.infrastructure.weather_api_client import WeatherAPIClient

# 2024-07-01 00:00 UTC
FIRST_DAY = 1719792000
DAY_SECONDS = 86400


# ============================================================
# Forecast Fixtures
# ============================================================

def make_day(
    index: int = 0,
    pop: float = 0.1,
    rain: float = 0.0,
    wind_speed: float = 2.0,
    humidity: float = 40.0,
    temp_max: float = 25.0,
    temp_min: float = 18.0,
) -> DailyForecast:
    """Build one forecast day; defaults describe a calm day."""
    return DailyForecast(
        dt=FIRST_DAY + index * DAY_SECONDS,
        temp=TemperatureRange(min=temp_min, max=temp_max),
        pop=pop,
        rain=rain,
        wind_speed=wind_speed,
        humidity=humidity,
    )


@pytest.fixture
def day_factory() -> Callable[..., DailyForecast]:
    return make_day


@pytest.fixture
def calm_week() -> list[DailyForecast]:
    """Seven calm days: no rule fires."""
    return [make_day(i) for i in range(7)]


@pytest.fixture
def rainy_week() -> list[DailyForecast]:
    """One heavy-rain day (55 mm) in an otherwise calm week."""
    days = [make_day(i) for i in range(7)]
    days[2] = make_day(2, pop=0.9, rain=55.0)
    return days


@pytest.fixture
def heat_week() -> list[DailyForecast]:
    """Three consecutive dry-hot days, no rain anywhere."""
    return [
        make_day(i, temp_max=36.0) if 1 <= i <= 3 else make_day(i)
        for i in range(7)
    ]


@pytest.fixture
def sample_forecast(rainy_week) -> WeatherForecast:
    return WeatherForecast(
        current=CurrentWeather(dt=FIRST_DAY, temp=27.5, humidity=70, wind_speed=3.1),
        daily=tuple(rainy_week),
    )


def one_call_payload(days: int = 8) -> dict:
    """One Call style payload with more daily entries than the analysis uses."""
    daily = []
    for i in range(days):
        daily.append({
            "dt": FIRST_DAY + i * DAY_SECONDS,
            "sunrise": FIRST_DAY + i * DAY_SECONDS + 20000,
            "temp": {"day": 24.0, "min": 18.0, "max": 25.0, "night": 19.0},
            "pop": 0.1,
            "rain": 0.0,
            "wind_speed": 2.0,
            "humidity": 40,
            "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        })
    return {
        "lat": 28.6139,
        "lon": 77.209,
        "timezone": "Asia/Kolkata",
        "current": {
            "dt": FIRST_DAY,
            "temp": 27.5,
            "feels_like": 29.0,
            "humidity": 70,
            "wind_speed": 3.1,
            "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        },
        "daily": daily,
    }


@pytest.fixture
def one_call_response() -> dict:
    return one_call_payload()


# ============================================================
# Geometry Fixtures
# ============================================================

@pytest.fixture
def field_polygon() -> list[Coordinate]:
    """Rectangular field near New Delhi, (lat, lon) vertices."""
    return [
        Coordinate(lat=28.6130, lon=77.2080),
        Coordinate(lat=28.6130, lon=77.2100),
        Coordinate(lat=28.6150, lon=77.2100),
        Coordinate(lat=28.6150, lon=77.2080),
    ]


# ============================================================
# Mock Client Fixtures
# ============================================================

@pytest.fixture
def mock_weather_client(sample_forecast):
    """Create a mock forecast client."""
    mock_client = AsyncMock(spec=WeatherAPIClient)
    mock_client.get_forecast.return_value = sample_forecast
    return mock_client


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
