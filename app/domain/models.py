"""
Domain models for fields, forecasts, soil health and advisory sessions.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, databases, etc.).
All models are frozen: a changed value is always a new instance.
"""
from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    """A single latitude/longitude pair."""
    lat: float = Field(description="Latitude in degrees")
    lon: float = Field(description="Longitude in degrees")

    class Config:
        frozen = True


# ============================================================
# Forecast
# ============================================================

class WeatherCondition(BaseModel):
    """Weather-condition label attached to a forecast entry."""
    main: str = ""
    description: str = ""
    icon: str = ""

    class Config:
        frozen = True


class TemperatureRange(BaseModel):
    """Daily temperature range in °C."""
    min: float
    max: float

    class Config:
        frozen = True


class DailyForecast(BaseModel):
    """One calendar day of the forecast."""
    dt: int = Field(description="Forecast timestamp (unix seconds)")
    temp: TemperatureRange
    pop: float = Field(ge=0.0, le=1.0, description="Probability of precipitation")
    rain: Optional[float] = Field(default=None, description="Rainfall in mm")
    wind_speed: Optional[float] = Field(default=None, description="Wind speed in m/s")
    humidity: Optional[float] = Field(default=None, ge=0.0, le=100.0, description="Humidity in %")
    weather: tuple[WeatherCondition, ...] = ()

    class Config:
        frozen = True


class CurrentWeather(BaseModel):
    """Current conditions reported alongside the forecast."""
    dt: Optional[int] = None
    temp: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    weather: tuple[WeatherCondition, ...] = ()

    class Config:
        frozen = True


class WeatherForecast(BaseModel):
    """Forecast data for one coordinate, truncated to the analysis window."""
    current: Optional[CurrentWeather] = None
    daily: tuple[DailyForecast, ...] = ()

    class Config:
        frozen = True


# ============================================================
# Soil health
# ============================================================

class SoilStatus(str, Enum):
    """Qualitative soil metric status."""
    LOW = "Low"
    OPTIMAL = "Optimal"
    HIGH = "High"


class SoilMetric(BaseModel):
    """Single soil metric with its display value (number plus unit)."""
    name: str
    value: str = Field(description="Display value, e.g. '210 kg/ha'")
    status: SoilStatus

    class Config:
        frozen = True


class SoilHealthRecord(BaseModel):
    """Soil-health record grouped into general, macro and micro metrics."""
    general: tuple[SoilMetric, ...]
    macro_nutrients: tuple[SoilMetric, ...]
    micro_nutrients: tuple[SoilMetric, ...]

    class Config:
        frozen = True

    def find(self, marker: str) -> Optional[SoilMetric]:
        """Return the first metric whose name contains ``marker``."""
        for metric in (*self.general, *self.macro_nutrients, *self.micro_nutrients):
            if marker in metric.name:
                return metric
        return None

    def replace_metric(self, name: str, **changes) -> "SoilHealthRecord":
        """Return a new record with the metric called ``name`` updated."""
        groups = {}
        for group in ("general", "macro_nutrients", "micro_nutrients"):
            groups[group] = tuple(
                metric.model_copy(update=changes) if metric.name == name else metric
                for metric in getattr(self, group)
            )
        return SoilHealthRecord(**groups)


# ============================================================
# Analysis output
# ============================================================

class Recommendations(BaseModel):
    """Advisory text, one entry per management area."""
    fertilizer: str
    zinc: str
    ph: str
    irrigation: str
    pest: str

    class Config:
        frozen = True


class WeatherAnalysis(BaseModel):
    """Result of analyzing a forecast against a baseline soil record."""
    alerts: tuple[str, ...]
    adjusted_soil: SoilHealthRecord
    recommendations: Recommendations

    class Config:
        frozen = True


class ChartPoint(BaseModel):
    """Named numeric value for a soil chart."""
    name: str
    value: float

    class Config:
        frozen = True


class SoilChartSeries(BaseModel):
    """Numeric chart series derived from a soil record."""
    macro: tuple[ChartPoint, ...]
    general: tuple[ChartPoint, ...]
    micro: tuple[ChartPoint, ...]

    class Config:
        frozen = True


# ============================================================
# Session state
# ============================================================

WeatherStatus = Literal["idle", "loading", "ready", "error"]


class WeatherErrorState(BaseModel):
    """Failure of the last forecast fetch."""
    kind: Literal["configuration", "upstream"]
    message: str

    class Config:
        frozen = True


class SessionState(BaseModel):
    """Snapshot of a farmer's advisory session."""
    location: str = ""
    vertices: tuple[Coordinate, ...] = ()
    area_m2: float = 0.0
    area_unit: str = "acres"
    displayed_area: str = "0.00"
    centroid: Optional[Coordinate] = None
    soil_report: Optional[str] = Field(
        default=None,
        description="Reference to the uploaded soil report (not parsed)"
    )
    analysis_requested: bool = False
    generation: int = Field(
        default=0,
        description="Incremented on every field change"
    )
    fetch_token: int = Field(
        default=0,
        description="Incremented on every field change and forecast request; "
                    "only the latest request may apply its result"
    )
    weather_status: WeatherStatus = "idle"
    weather_error: Optional[WeatherErrorState] = None
    current_weather: Optional[CurrentWeather] = None
    daily_forecast: tuple[DailyForecast, ...] = ()
    analysis: Optional[WeatherAnalysis] = None
    charts: Optional[SoilChartSeries] = None

    class Config:
        frozen = True
