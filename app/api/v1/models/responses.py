"""
API response models using Pydantic.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from app.domain.models import (
    Coordinate,
    Recommendations,
    SessionState,
    SoilChartSeries,
    SoilHealthRecord,
)


class CentroidResponse(BaseModel):
    """Representative coordinate of a field boundary."""
    centroid: Optional[Coordinate] = Field(
        description="Polygon centroid, or null for an empty boundary"
    )
    vertex_count: int

    class Config:
        json_schema_extra = {
            "example": {
                "centroid": {"lat": 28.6142, "lon": 77.2097},
                "vertex_count": 3,
            }
        }


class AreaResponse(BaseModel):
    """Field area converted to a display unit."""
    area_m2: float
    unit: str
    area: float = Field(description="Area in the requested unit")
    displayed_area: str = Field(description="Area rounded to two decimals")


class AreaUnitsResponse(BaseModel):
    """Supported area units and their factors against square meters."""
    factors: Dict[str, float]


class SoilBaselineResponse(BaseModel):
    """Reference soil record used as analysis baseline."""
    soil: SoilHealthRecord
    charts: SoilChartSeries


class WeatherAnalysisResponse(BaseModel):
    """Alerts, projected soil and recommendations for a forecast."""
    alerts: List[str] = Field(description="Distinct risk alerts, never empty")
    adjusted_soil: SoilHealthRecord
    recommendations: Recommendations
    charts: SoilChartSeries

    class Config:
        json_schema_extra = {
            "example": {
                "alerts": ["No unusual weather risks detected this week."],
                "adjusted_soil": {
                    "general": [{"name": "pH Level", "value": "5.8", "status": "Low"}],
                    "macro_nutrients": [{"name": "Nitrogen (N)", "value": "210 kg/ha", "status": "Low"}],
                    "micro_nutrients": [{"name": "Zinc (Zn)", "value": "0.5 ppm", "status": "Low"}],
                },
                "recommendations": {
                    "fertilizer": "Balanced NPK (10-5-20). Base dose with top-up based on soil test and crop stage.",
                    "zinc": "Apply Zinc Sulphate (21%) ~10 kg/acre at soil prep or 0.5% foliar if deficiency persists.",
                    "ph": "Use dolomitic lime if Mg is low.",
                    "irrigation": "Irrigate 2-3 days interval based on field condition.",
                    "pest": "Keep scouting for aphids/whiteflies; use yellow sticky traps; spot-treat with Imidacloprid if needed.",
                },
                "charts": {
                    "macro": [{"name": "Nitrogen (N)", "value": 210}],
                    "general": [{"name": "pH Level", "value": 5.8}],
                    "micro": [{"name": "Zinc (Zn)", "value": 0.5}],
                },
            }
        }


class SessionResponse(BaseModel):
    """Advisory session snapshot."""
    session_id: str
    state: SessionState
