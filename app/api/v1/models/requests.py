"""
API request models using Pydantic.
"""
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field

from app.domain.models import Coordinate, DailyForecast, SoilHealthRecord


class FieldBoundaryRequest(BaseModel):
    """Field boundary as ordered (latitude, longitude) pairs."""
    vertices: List[Tuple[float, float]] = Field(
        default=[],
        description="Ordered [lat, lon] vertices of the field boundary",
        examples=[[[28.6139, 77.2090], [28.6139, 77.2100], [28.6149, 77.2100]]],
    )

    def coordinates(self) -> list[Coordinate]:
        return [Coordinate(lat=lat, lon=lon) for lat, lon in self.vertices]


class FieldSelectionRequest(FieldBoundaryRequest):
    """Field selected on the map."""
    location: str = Field(description="Human-readable location label")
    area_m2: Optional[float] = Field(
        default=None,
        ge=0,
        description="Planar field area in square meters, as measured by the map",
    )


class AreaUnitRequest(BaseModel):
    """Display unit change."""
    unit: str = Field(examples=["hectares"])


class SoilReportRequest(BaseModel):
    """Reference to an uploaded soil report document."""
    reference: str = Field(min_length=1, examples=["soil-health-card-2024.pdf"])


class WeatherAnalysisRequest(BaseModel):
    """Forecast to analyze, optionally against a custom baseline."""
    daily: List[DailyForecast] = Field(
        description="Chronological daily forecast entries (normally 7)"
    )
    baseline: Optional[SoilHealthRecord] = Field(
        default=None,
        description="Baseline soil record; the reference record is used when omitted",
    )
