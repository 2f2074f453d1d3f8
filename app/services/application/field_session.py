"""
Application service: Orchestration of a farmer's advisory session.

A session owns one immutable SessionState. Every operation produces a new
state value and notifies subscribers with (previous, current); nothing
mutates a published state.
"""
from collections import OrderedDict
from typing import Callable, Optional, Sequence
import logging
import uuid

from app.config import settings
from app.domain.models import (
    Coordinate,
    SessionState,
    SoilHealthRecord,
    WeatherErrorState,
)
from app.domain.soil_reference import BASELINE_SOIL
from app.infrastructure.weather_api_client import (
    WeatherAPIClient,
    WeatherAPIError,
    WeatherConfigurationError,
)
from app.services.domain.soil_charts import build_soil_chart_series
from app.services.domain.weather_analyzer import WeatherAnalyzer
from app.utils.area_units import format_area
from app.utils.geometry import compute_centroid

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState, SessionState], None]


class FieldSession:
    """
    Application service for one advisory session.

    Coordinates the geometry resolver, the forecast client and the weather
    analyzer. Follows the application layer pattern: no agronomy here, only
    state transitions and coordination.

    Each field change bumps ``state.generation``. Each field change and each
    forecast request bumps ``state.fetch_token``; a fetch keeps the token it
    was started with and its result is dropped once a newer request exists.
    """

    def __init__(
        self,
        weather_client: WeatherAPIClient,
        analyzer: WeatherAnalyzer,
        baseline: SoilHealthRecord = BASELINE_SOIL,
        area_unit: Optional[str] = None,
    ):
        """
        Initialize the session with dependencies.

        Args:
            weather_client: Forecast provider client
            analyzer: Weather analyzer for soil/advisory computation
            baseline: Reference soil record for this session
            area_unit: Initial display unit (defaults to settings)
        """
        self.weather_client = weather_client
        self.analyzer = analyzer
        self.baseline = baseline
        self._listeners: list[StateListener] = []
        self._state = SessionState(
            area_unit=area_unit or settings.default_area_unit,
            charts=build_soil_chart_series(baseline),
        )

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener for state transitions.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, **changes) -> SessionState:
        previous = self._state
        self._state = previous.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(previous, self._state)
        return self._state

    # ------------------------------------------------------------
    # Field inputs
    # ------------------------------------------------------------

    def select_field(
        self,
        location: str,
        vertices: Sequence[Coordinate] = (),
        area_m2: Optional[float] = None,
    ) -> SessionState:
        """
        Record a field selected on the map.

        An empty vertex list keeps the previous boundary and centroid, and a
        missing area keeps the previous area.

        Args:
            location: Human-readable location label
            vertices: Field boundary as (lat, lon) vertices
            area_m2: Planar field area in square meters

        Returns:
            The new session state
        """
        changes = {
            "location": location,
            "generation": self._state.generation + 1,
            "fetch_token": self._state.fetch_token + 1,
        }
        # An in-flight fetch now belongs to a previous field
        if self._state.weather_status == "loading":
            changes["weather_status"] = "idle"
        if area_m2:
            changes["area_m2"] = area_m2
            changes["displayed_area"] = format_area(area_m2, self._state.area_unit)
        if vertices:
            changes["vertices"] = tuple(vertices)
            centroid = compute_centroid(vertices)
            if centroid is not None:
                changes["centroid"] = centroid

        state = self._transition(**changes)
        logger.info(
            f"Field selected: location={location!r}, vertices={len(state.vertices)}, "
            f"area_m2={state.area_m2:.1f}, generation={state.generation}"
        )
        return state

    def set_area_unit(self, unit: str) -> SessionState:
        """
        Change the unit used for the displayed area.

        Raises:
            ValueError: If the unit is unknown
        """
        displayed = format_area(self._state.area_m2, unit)
        return self._transition(area_unit=unit, displayed_area=displayed)

    def attach_soil_report(self, reference: str) -> SessionState:
        """Record an uploaded soil report. Its contents do not affect the baseline."""
        logger.info(f"Soil report attached: {reference!r}")
        return self._transition(soil_report=reference)

    def request_analysis(self) -> SessionState:
        """
        Mark the field analysis as requested.

        Without a location or a positive area there is nothing to analyze yet
        and the state is returned unchanged.
        """
        if not self._state.location or self._state.area_m2 <= 0:
            logger.debug("Analysis requested before a field was selected")
            return self._state
        return self._transition(analysis_requested=True)

    # ------------------------------------------------------------
    # Weather
    # ------------------------------------------------------------

    async def refresh_weather(self) -> SessionState:
        """
        Fetch the forecast for the current field and apply the analysis.

        Failures are recorded in the state as a configuration or upstream
        error and previous results are kept. Results of a fetch superseded by
        a later request or a later field selection are discarded.

        Returns:
            The session state after the fetch completes
        """
        start = self._state
        if start.centroid is None or start.area_m2 <= 0:
            logger.debug("No field selected, skipping forecast fetch")
            return start

        token = start.fetch_token + 1
        self._transition(fetch_token=token, weather_status="loading", weather_error=None)

        try:
            forecast = await self.weather_client.get_forecast(start.centroid)
            analysis = self.analyzer.analyze(forecast.daily, self.baseline)
            charts = build_soil_chart_series(analysis.adjusted_soil)
        except WeatherConfigurationError as e:
            return self._fail(token, "configuration", e.message)
        except WeatherAPIError as e:
            if e.is_unauthorized:
                logger.error("Forecast provider rejected the configured API key")
            return self._fail(token, "upstream", e.message)
        except Exception as e:
            logger.exception(f"Unexpected error while refreshing weather: {str(e)}")
            return self._fail(token, "upstream", str(e) or "Failed to fetch weather")

        if self._is_stale(token):
            return self._state

        logger.info(f"Weather analysis applied for request {token}: {len(analysis.alerts)} alerts")
        return self._transition(
            weather_status="ready",
            weather_error=None,
            current_weather=forecast.current,
            daily_forecast=forecast.daily,
            analysis=analysis,
            charts=charts,
        )

    def _fail(self, token: int, kind: str, message: str) -> SessionState:
        if self._is_stale(token):
            return self._state
        logger.warning(f"Weather fetch failed ({kind}): {message}")
        return self._transition(
            weather_status="error",
            weather_error=WeatherErrorState(kind=kind, message=message),
        )

    def _is_stale(self, token: int) -> bool:
        if token != self._state.fetch_token:
            logger.info(
                f"Discarding forecast for request {token}, "
                f"latest request is {self._state.fetch_token}"
            )
            return True
        return False


class SessionRegistry:
    """
    In-memory store of advisory sessions keyed by id.

    Holds at most ``max_sessions`` sessions; creating one more evicts the
    least recently used session.
    """

    def __init__(
        self,
        session_factory: Callable[[], FieldSession],
        max_sessions: Optional[int] = None,
    ):
        self._session_factory = session_factory
        self.max_sessions = max_sessions or settings.max_sessions
        self._sessions: OrderedDict[str, FieldSession] = OrderedDict()

    def create(self) -> tuple[str, FieldSession]:
        session_id = uuid.uuid4().hex
        session = self._session_factory()
        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted least recently used session {evicted}")
        logger.info(f"Created session {session_id}")
        return session_id, session

    def get(self, session_id: str) -> Optional[FieldSession]:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def __len__(self) -> int:
        return len(self._sessions)
