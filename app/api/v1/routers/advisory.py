"""
API router for soil and weather advisory endpoints.
"""
from fastapi import APIRouter

from app.api.dependencies import WeatherAnalyzerDep
from app.api.v1.models.requests import WeatherAnalysisRequest
from app.api.v1.models.responses import SoilBaselineResponse, WeatherAnalysisResponse
from app.domain.soil_reference import BASELINE_SOIL
from app.services.domain.soil_charts import build_soil_chart_series


router = APIRouter(
    tags=["advisory"],
)


@router.get(
    "/soil/baseline",
    response_model=SoilBaselineResponse,
    summary="Get the reference soil record",
)
async def get_soil_baseline() -> SoilBaselineResponse:
    """
    Return the baseline soil-health record and its chart series.

    Returns:
        SoilBaselineResponse
    """
    return SoilBaselineResponse(
        soil=BASELINE_SOIL,
        charts=build_soil_chart_series(BASELINE_SOIL),
    )


@router.post(
    "/weather/analysis",
    response_model=WeatherAnalysisResponse,
    summary="Analyze a forecast against a soil record",
    description="""
    Derive weekly risk alerts, projected soil values and recommendations
    from a daily forecast.

    Rules:
    - Heavy rain (>= 50 mm, or >= 30 mm at pop >= 0.8) projects N/K leaching
    - 3+ consecutive dry-hot days (pop <= 0.2, max >= 35°C) projects drought stress
    - Wind >= 12 m/s and humid-warm days raise per-day alerts
    """,
    responses={
        422: {"description": "Invalid forecast payload"},
        429: {"description": "Rate limit exceeded"},
    },
)
async def analyze_weather(
    request: WeatherAnalysisRequest,
    analyzer: WeatherAnalyzerDep,
) -> WeatherAnalysisResponse:
    """
    Analyze a supplied forecast.

    Args:
        request: Forecast and optional baseline
        analyzer: Weather analyzer (injected dependency)

    Returns:
        WeatherAnalysisResponse
    """
    baseline = request.baseline or BASELINE_SOIL
    analysis = analyzer.analyze(request.daily, baseline)

    return WeatherAnalysisResponse(
        alerts=list(analysis.alerts),
        adjusted_soil=analysis.adjusted_soil,
        recommendations=analysis.recommendations,
        charts=build_soil_chart_series(analysis.adjusted_soil),
    )
