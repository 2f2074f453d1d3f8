"""
Domain service: Weather-driven soil adjustment and advisory.

Turns a 7-day forecast and a baseline soil record into:
- weekly risk alerts (heavy rain, heat/drought streaks, wind, fungal pressure)
- a soil record with projected nutrient and pH drift
- fertilizer, zinc, pH, irrigation and pest recommendations

The analyzer holds no state between calls; identical inputs always give
identical outputs.
"""
from typing import Optional, Sequence
from dataclasses import dataclass
import logging

from app.domain.models import (
    DailyForecast,
    Recommendations,
    SoilHealthRecord,
    SoilMetric,
    WeatherAnalysis,
)
from app.domain.soil_reference import (
    DISPLAY_PRECISION,
    NITROGEN,
    ORGANIC_CARBON,
    PH_LEVEL,
    POTASSIUM,
    STATUS_THRESHOLDS,
)
from app.utils.numbers import format_fixed, parse_leading_number, split_unit_suffix

logger = logging.getLogger(__name__)


# ============================================================
# Advisory text
# ============================================================

ALERT_HIGH_WIND = "High winds expected: risk of lodging and spray drift."
ALERT_FUNGAL = "Very humid & warm: fungal disease pressure likely."
ALERT_LEACHING = "Heavy rain likely: leaching of Nitrogen and Potassium expected."
ALERT_DROUGHT = "Heat wave & dry spell for 3+ days: drought stress risk."
ALERT_NO_RISK = "No unusual weather risks detected this week."

FERTILIZER_AFTER_RAIN = (
    "Split-apply N & K (e.g., Urea + MOP) after heavy rain; "
    "add stabilizers (NBPT) to reduce N losses."
)
FERTILIZER_HEAT = (
    "Prefer K-rich blends (e.g., 10-5-20) to aid osmotic balance; "
    "avoid surface-applied urea before irrigation."
)
FERTILIZER_DEFAULT = (
    "Balanced NPK (10-5-20). Base dose with top-up based on soil test and crop stage."
)
ZINC_RECOMMENDATION = (
    "Apply Zinc Sulphate (21%) ~10 kg/acre at soil prep or 0.5% foliar "
    "if deficiency persists."
)
PH_RAIN_PREFIX = "Consider light liming to buffer acidity from rain; "
PH_LIMING = "Use dolomitic lime if Mg is low."
IRRIGATION_HEAT = "Adopt shorter, more frequent irrigation; mulch to conserve soil moisture."
IRRIGATION_AFTER_RAIN = (
    "Delay irrigation for 2-3 days post heavy rain; improve drainage if waterlogging."
)
IRRIGATION_DEFAULT = "Irrigate 2-3 days interval based on field condition."
PEST_HUMID = (
    "High humidity: scout for late blight; preventive Mancozeb/Chlorothalonil spray window."
)
PEST_DEFAULT = (
    "Keep scouting for aphids/whiteflies; use yellow sticky traps; "
    "spot-treat with Imidacloprid if needed."
)


@dataclass
class WeatherRuleConfig:
    """Thresholds for the weather rules."""

    # Heavy rain
    heavy_rain_mm: float = 50.0
    """Rainfall that makes a day heavy-rain on its own"""

    likely_rain_pop: float = 0.8
    """Precipitation probability that, with likely_rain_mm, makes a heavy-rain day"""

    likely_rain_mm: float = 30.0

    # Heat and drought
    dry_pop: float = 0.2
    """Maximum precipitation probability for a dry day"""

    hot_max_temp: float = 35.0
    """Minimum daily max temperature (°C) for a hot day"""

    heat_streak_days: int = 3
    """Consecutive dry-hot days that count as a drought spell"""

    # Per-day hazards
    high_wind_speed: float = 12.0
    """Wind speed (m/s) for a high-wind alert"""

    fungal_humidity: float = 90.0
    """Humidity (%) for fungal pressure and blight scouting"""

    fungal_max_temp: float = 28.0

    # Soil drift after heavy rain
    rain_nitrogen_factor: float = 0.90
    rain_potassium_factor: float = 0.92
    rain_ph_delta: float = -0.1
    rain_organic_carbon_factor: float = 0.98

    # Soil drift after a heat streak
    heat_potassium_factor: float = 0.95
    heat_ph_delta: float = 0.1
    heat_organic_carbon_factor: float = 1.03


@dataclass(frozen=True)
class WeatherSignals:
    """Week-level signals extracted from the forecast."""
    heavy_rain_days: int
    max_heat_streak: int
    humid_days: int
    alerts: tuple[str, ...]


class WeatherAnalyzer:
    """
    Domain service for weather-driven soil and advisory analysis.

    Rules run in a single chronological pass over the forecast; the soil
    adjustment then applies the rain rule before the heat rule, so the heat
    rule sees already-adjusted values.
    """

    def __init__(self, config: Optional[WeatherRuleConfig] = None):
        self.config = config or WeatherRuleConfig()

    def analyze(
        self,
        daily: Sequence[DailyForecast],
        baseline: SoilHealthRecord,
    ) -> WeatherAnalysis:
        """
        Analyze a forecast against a baseline soil record.

        Args:
            daily: Chronological daily forecast (normally 7 entries)
            baseline: Soil record to adjust; it is never modified

        Returns:
            WeatherAnalysis with alerts, adjusted soil and recommendations
        """
        signals = self.extract_signals(daily)
        logger.info(
            f"Analyzed {len(daily)} forecast days: heavy_rain_days={signals.heavy_rain_days}, "
            f"max_heat_streak={signals.max_heat_streak}, alerts={len(signals.alerts)}"
        )

        return WeatherAnalysis(
            alerts=signals.alerts,
            adjusted_soil=self.adjust_soil(baseline, signals),
            recommendations=self.recommend(signals),
        )

    def extract_signals(self, daily: Sequence[DailyForecast]) -> WeatherSignals:
        """Run the per-day rules and derive the week-level alerts."""
        cfg = self.config
        alerts: list[str] = []
        heavy_rain_days = 0
        humid_days = 0
        streak = 0
        max_streak = 0

        for day in daily:
            rain = day.rain or 0.0
            humidity = day.humidity or 0.0

            if rain >= cfg.heavy_rain_mm or (
                day.pop >= cfg.likely_rain_pop and rain >= cfg.likely_rain_mm
            ):
                heavy_rain_days += 1

            is_dry_hot = day.pop <= cfg.dry_pop and day.temp.max >= cfg.hot_max_temp
            streak = streak + 1 if is_dry_hot else 0
            max_streak = max(max_streak, streak)

            if (day.wind_speed or 0.0) >= cfg.high_wind_speed:
                alerts.append(ALERT_HIGH_WIND)
            if humidity >= cfg.fungal_humidity:
                humid_days += 1
                if day.temp.max >= cfg.fungal_max_temp:
                    alerts.append(ALERT_FUNGAL)

        if heavy_rain_days >= 1:
            alerts.append(ALERT_LEACHING)
        if max_streak >= cfg.heat_streak_days:
            alerts.append(ALERT_DROUGHT)
        if not alerts:
            alerts.append(ALERT_NO_RISK)

        return WeatherSignals(
            heavy_rain_days=heavy_rain_days,
            max_heat_streak=max_streak,
            humid_days=humid_days,
            alerts=tuple(dict.fromkeys(alerts)),
        )

    def adjust_soil(
        self,
        baseline: SoilHealthRecord,
        signals: WeatherSignals,
    ) -> SoilHealthRecord:
        """
        Project soil drift for the week and recompute statuses.

        Returns:
            A new record; unchanged metrics keep the baseline values
        """
        cfg = self.config
        # Fresh record; frozen metrics are shared with baseline until rewritten
        soil = SoilHealthRecord(
            general=tuple(baseline.general),
            macro_nutrients=tuple(baseline.macro_nutrients),
            micro_nutrients=tuple(baseline.micro_nutrients),
        )

        if signals.heavy_rain_days >= 1:
            soil = _scale(soil, NITROGEN, cfg.rain_nitrogen_factor, floor=True)
            soil = _scale(soil, POTASSIUM, cfg.rain_potassium_factor, floor=True)
            soil = _shift(soil, PH_LEVEL, cfg.rain_ph_delta, floor=True)
            soil = _scale(soil, ORGANIC_CARBON, cfg.rain_organic_carbon_factor, floor=True)
            logger.debug("Applied heavy-rain leaching adjustment")

        if signals.max_heat_streak >= cfg.heat_streak_days:
            soil = _scale(soil, POTASSIUM, cfg.heat_potassium_factor, floor=True)
            soil = _shift(soil, PH_LEVEL, cfg.heat_ph_delta, floor=False)
            soil = _scale(soil, ORGANIC_CARBON, cfg.heat_organic_carbon_factor, floor=False)
            logger.debug("Applied heat-streak adjustment")

        for name, threshold in STATUS_THRESHOLDS.items():
            metric = soil.find(name)
            if metric is None:
                continue
            status = threshold.classify(parse_leading_number(metric.value))
            soil = soil.replace_metric(metric.name, status=status)

        return soil

    def recommend(self, signals: WeatherSignals) -> Recommendations:
        """Select advisory text from the week-level signals."""
        heavy_rain = signals.heavy_rain_days >= 1
        heat_streak = signals.max_heat_streak >= self.config.heat_streak_days

        if heavy_rain:
            fertilizer = FERTILIZER_AFTER_RAIN
        elif heat_streak:
            fertilizer = FERTILIZER_HEAT
        else:
            fertilizer = FERTILIZER_DEFAULT

        if heat_streak:
            irrigation = IRRIGATION_HEAT
        elif heavy_rain:
            irrigation = IRRIGATION_AFTER_RAIN
        else:
            irrigation = IRRIGATION_DEFAULT

        return Recommendations(
            fertilizer=fertilizer,
            zinc=ZINC_RECOMMENDATION,
            ph=(PH_RAIN_PREFIX if heavy_rain else "") + PH_LIMING,
            irrigation=irrigation,
            pest=PEST_HUMID if signals.humid_days else PEST_DEFAULT,
        )


def _scale(soil: SoilHealthRecord, name: str, factor: float, floor: bool) -> SoilHealthRecord:
    metric = soil.find(name)
    if metric is None:
        return soil
    return _rewrite(soil, metric, parse_leading_number(metric.value) * factor, DISPLAY_PRECISION[name], floor)


def _shift(soil: SoilHealthRecord, name: str, delta: float, floor: bool) -> SoilHealthRecord:
    metric = soil.find(name)
    if metric is None:
        return soil
    return _rewrite(soil, metric, parse_leading_number(metric.value) + delta, DISPLAY_PRECISION[name], floor)


def _rewrite(
    soil: SoilHealthRecord,
    metric: SoilMetric,
    value: float,
    places: int,
    floor: bool,
) -> SoilHealthRecord:
    # Written back under the metric's own name, which may only contain the marker
    if floor:
        value = max(0.0, value)
    display = format_fixed(value, places) + split_unit_suffix(metric.value)
    return soil.replace_metric(metric.name, value=display)
