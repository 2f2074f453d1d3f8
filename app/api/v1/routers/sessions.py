"""
API router for advisory session endpoints.
"""
from fastapi import APIRouter, status

from app.api.dependencies import FieldSessionDep, SessionRegistryDep
from app.api.v1.models.requests import (
    AreaUnitRequest,
    FieldSelectionRequest,
    SoilReportRequest,
)
from app.api.v1.models.responses import SessionResponse


router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
)

SESSION_NOT_FOUND = {404: {"description": "Session not found"}}


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start an advisory session",
)
async def create_session(registry: SessionRegistryDep) -> SessionResponse:
    session_id, session = registry.create()
    return SessionResponse(session_id=session_id, state=session.state)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get the current session state",
    responses=SESSION_NOT_FOUND,
)
async def get_session(session_id: str, session: FieldSessionDep) -> SessionResponse:
    return SessionResponse(session_id=session_id, state=session.state)


@router.put(
    "/{session_id}/field",
    response_model=SessionResponse,
    summary="Select a field and fetch its forecast",
    description="""
    Record the field selected on the map, resolve its centroid and fetch the
    7-day forecast for it.

    Forecast failures do not fail the request: they are reported in
    `state.weather_error` and previous results are kept.
    """,
    responses={
        **SESSION_NOT_FOUND,
        429: {"description": "Rate limit exceeded"},
    },
)
async def select_field(
    session_id: str,
    selection: FieldSelectionRequest,
    session: FieldSessionDep,
) -> SessionResponse:
    """
    Select a field and refresh the weather analysis.

    Args:
        session_id: Session identifier
        selection: Location label, boundary and area
        session: Resolved session (injected dependency)

    Returns:
        SessionResponse with the state after the forecast fetch
    """
    session.select_field(
        location=selection.location,
        vertices=selection.coordinates(),
        area_m2=selection.area_m2,
    )
    state = await session.refresh_weather()
    return SessionResponse(session_id=session_id, state=state)


@router.put(
    "/{session_id}/area-unit",
    response_model=SessionResponse,
    summary="Change the displayed area unit",
    responses={
        **SESSION_NOT_FOUND,
        400: {"description": "Unknown area unit"},
    },
)
async def set_area_unit(
    session_id: str,
    request: AreaUnitRequest,
    session: FieldSessionDep,
) -> SessionResponse:
    state = session.set_area_unit(request.unit)
    return SessionResponse(session_id=session_id, state=state)


@router.put(
    "/{session_id}/soil-report",
    response_model=SessionResponse,
    summary="Attach a soil report reference",
    responses=SESSION_NOT_FOUND,
)
async def attach_soil_report(
    session_id: str,
    request: SoilReportRequest,
    session: FieldSessionDep,
) -> SessionResponse:
    state = session.attach_soil_report(request.reference)
    return SessionResponse(session_id=session_id, state=state)


@router.post(
    "/{session_id}/analysis",
    response_model=SessionResponse,
    summary="Request the field analysis",
    description="Has no effect until a location and a positive area are set.",
    responses=SESSION_NOT_FOUND,
)
async def request_analysis(session_id: str, session: FieldSessionDep) -> SessionResponse:
    state = session.request_analysis()
    return SessionResponse(session_id=session_id, state=state)


@router.post(
    "/{session_id}/weather/refresh",
    response_model=SessionResponse,
    summary="Re-fetch the forecast for the current field",
    responses={
        **SESSION_NOT_FOUND,
        429: {"description": "Rate limit exceeded"},
    },
)
async def refresh_weather(session_id: str, session: FieldSessionDep) -> SessionResponse:
    state = await session.refresh_weather()
    return SessionResponse(session_id=session_id, state=state)
