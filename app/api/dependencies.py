"""
Dependency injection for FastAPI.
"""
from typing import Annotated, Optional
from fastapi import Depends, HTTPException, Path

from app.infrastructure.weather_api_client import get_weather_client
from app.services.domain.weather_analyzer import WeatherAnalyzer
from app.services.application.field_session import FieldSession, SessionRegistry


def get_weather_analyzer() -> WeatherAnalyzer:
    """
    Dependency factory for WeatherAnalyzer.

    Returns:
        WeatherAnalyzer instance
    """
    return WeatherAnalyzer()


def _new_session() -> FieldSession:
    return FieldSession(
        weather_client=get_weather_client(),
        analyzer=WeatherAnalyzer(),
    )


# Singleton registry
_session_registry: Optional[SessionRegistry] = None


def get_session_registry() -> SessionRegistry:
    """
    Get or create the process-wide session registry.

    Returns:
        SessionRegistry instance
    """
    global _session_registry
    if _session_registry is None:
        _session_registry = SessionRegistry(_new_session)
    return _session_registry


def get_field_session(
    session_id: Annotated[str, Path(description="Session identifier")],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> FieldSession:
    """
    Resolve a session from the path.

    Raises:
        HTTPException: 404 if the session does not exist
    """
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return session


# Type aliases for cleaner route signatures
WeatherAnalyzerDep = Annotated[WeatherAnalyzer, Depends(get_weather_analyzer)]
SessionRegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]
FieldSessionDep = Annotated[FieldSession, Depends(get_field_session)]
