"""
Unit tests for the weather analyzer.

Tests cover:
- Per-day rules (heavy rain, dry-hot streaks, wind, fungal pressure)
- Alert de-duplication and the no-risk sentinel
- Soil adjustment order, rounding and status recompute
- Recommendation selection
- Purity of the analysis
"""
import pytest

from app.domain.models import SoilHealthRecord, SoilMetric, SoilStatus
from app.domain.soil_reference import (
    BASELINE_SOIL,
    IRON,
    NITROGEN,
    ORGANIC_CARBON,
    PH_LEVEL,
    POTASSIUM,
    ZINC,
)
from app.services.domain.weather_analyzer import (
    ALERT_DROUGHT,
    ALERT_FUNGAL,
    ALERT_HIGH_WIND,
    ALERT_LEACHING,
    ALERT_NO_RISK,
    FERTILIZER_AFTER_RAIN,
    FERTILIZER_DEFAULT,
    FERTILIZER_HEAT,
    IRRIGATION_AFTER_RAIN,
    IRRIGATION_DEFAULT,
    IRRIGATION_HEAT,
    PEST_DEFAULT,
    PEST_HUMID,
    PH_LIMING,
    PH_RAIN_PREFIX,
    ZINC_RECOMMENDATION,
    WeatherAnalyzer,
    WeatherRuleConfig,
)


@pytest.fixture
def analyzer() -> WeatherAnalyzer:
    return WeatherAnalyzer()


def value_of(soil: SoilHealthRecord, name: str) -> str:
    return soil.find(name).value


def status_of(soil: SoilHealthRecord, name: str) -> SoilStatus:
    return soil.find(name).status


# ============================================================
# Weekly Scenarios
# ============================================================

class TestCalmWeek:
    """A week where no rule fires."""

    def test_only_sentinel_alert(self, analyzer, calm_week):
        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_NO_RISK,)

    def test_soil_matches_baseline(self, analyzer, calm_week):
        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert result.adjusted_soil == BASELINE_SOIL
        assert result.adjusted_soil is not BASELINE_SOIL

    def test_default_recommendations(self, analyzer, calm_week):
        recs = analyzer.analyze(calm_week, BASELINE_SOIL).recommendations

        assert recs.fertilizer == FERTILIZER_DEFAULT
        assert recs.zinc == ZINC_RECOMMENDATION
        assert recs.ph == PH_LIMING
        assert recs.irrigation == IRRIGATION_DEFAULT
        assert recs.pest == PEST_DEFAULT


class TestHeavyRainWeek:
    """One 55 mm day in an otherwise calm week."""

    def test_leaching_alert(self, analyzer, rainy_week):
        result = analyzer.analyze(rainy_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_LEACHING,)

    def test_soil_leaching(self, analyzer, rainy_week):
        soil = analyzer.analyze(rainy_week, BASELINE_SOIL).adjusted_soil

        assert value_of(soil, NITROGEN) == "189 kg/ha"
        assert value_of(soil, POTASSIUM) == "110 kg/ha"
        assert value_of(soil, PH_LEVEL) == "5.7"
        assert value_of(soil, ORGANIC_CARBON) == "0.44%"

    def test_unchanged_metrics_keep_values(self, analyzer, rainy_week):
        soil = analyzer.analyze(rainy_week, BASELINE_SOIL).adjusted_soil

        assert value_of(soil, "Phosphorus (P)") == "15 kg/ha"
        assert value_of(soil, ZINC) == "0.5 ppm"
        assert value_of(soil, IRON) == "4.8 ppm"

    def test_recommendations(self, analyzer, rainy_week):
        recs = analyzer.analyze(rainy_week, BASELINE_SOIL).recommendations

        assert recs.fertilizer == FERTILIZER_AFTER_RAIN
        assert recs.irrigation == IRRIGATION_AFTER_RAIN
        assert recs.ph == PH_RAIN_PREFIX + PH_LIMING

    def test_probable_rain_counts_as_heavy(self, analyzer, calm_week, day_factory):
        calm_week[4] = day_factory(4, pop=0.8, rain=30.0)

        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert ALERT_LEACHING in result.alerts

    def test_unlikely_moderate_rain_is_not_heavy(self, analyzer, calm_week, day_factory):
        calm_week[4] = day_factory(4, pop=0.7, rain=45.0)

        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_NO_RISK,)


class TestHeatWeek:
    """Three consecutive dry-hot days."""

    def test_drought_alert(self, analyzer, heat_week):
        result = analyzer.analyze(heat_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_DROUGHT,)

    def test_soil_drift(self, analyzer, heat_week):
        soil = analyzer.analyze(heat_week, BASELINE_SOIL).adjusted_soil

        assert value_of(soil, POTASSIUM) == "114 kg/ha"
        assert value_of(soil, PH_LEVEL) == "5.9"
        assert value_of(soil, ORGANIC_CARBON) == "0.46%"
        assert value_of(soil, NITROGEN) == "210 kg/ha"

    def test_recommendations(self, analyzer, heat_week):
        recs = analyzer.analyze(heat_week, BASELINE_SOIL).recommendations

        assert recs.irrigation == IRRIGATION_HEAT
        assert recs.fertilizer == FERTILIZER_HEAT
        assert recs.ph == PH_LIMING

    def test_interrupted_streak_does_not_fire(self, analyzer, calm_week, day_factory):
        for i in (0, 1, 3, 4):
            calm_week[i] = day_factory(i, temp_max=36.0)

        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert ALERT_DROUGHT not in result.alerts
        assert result.adjusted_soil == BASELINE_SOIL

    def test_rainy_hot_day_breaks_streak(self, analyzer, calm_week, day_factory):
        calm_week[0] = day_factory(0, temp_max=38.0)
        calm_week[1] = day_factory(1, temp_max=38.0, pop=0.5)
        calm_week[2] = day_factory(2, temp_max=38.0)
        calm_week[3] = day_factory(3, temp_max=38.0)

        signals = analyzer.extract_signals(calm_week)

        assert signals.max_heat_streak == 2


class TestRainAndHeatWeek:
    """Both soil rules fire; rain is applied first."""

    @pytest.fixture
    def mixed_week(self, heat_week, day_factory):
        heat_week[6] = day_factory(6, rain=60.0, pop=0.95)
        return heat_week

    def test_both_alerts_in_order(self, analyzer, mixed_week):
        result = analyzer.analyze(mixed_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_LEACHING, ALERT_DROUGHT)

    def test_heat_rule_sees_rain_adjusted_values(self, analyzer, mixed_week):
        soil = analyzer.analyze(mixed_week, BASELINE_SOIL).adjusted_soil

        assert value_of(soil, NITROGEN) == "189 kg/ha"
        assert value_of(soil, PH_LEVEL) == "5.8"
        assert value_of(soil, ORGANIC_CARBON) == "0.45%"
        assert status_of(soil, POTASSIUM) == SoilStatus.LOW

    def test_priorities(self, analyzer, mixed_week):
        recs = analyzer.analyze(mixed_week, BASELINE_SOIL).recommendations

        assert recs.fertilizer == FERTILIZER_AFTER_RAIN
        assert recs.irrigation == IRRIGATION_HEAT


# ============================================================
# Per-day Hazard Tests
# ============================================================

class TestHazardAlerts:
    """Tests for wind and fungal alerts."""

    def test_high_wind(self, analyzer, calm_week, day_factory):
        calm_week[3] = day_factory(3, wind_speed=12.0)

        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_HIGH_WIND,)

    def test_repeated_alerts_are_deduplicated(self, analyzer, calm_week, day_factory):
        for i in range(4):
            calm_week[i] = day_factory(i, wind_speed=15.0, humidity=95.0, temp_max=30.0)

        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_HIGH_WIND, ALERT_FUNGAL)
        assert len(set(result.alerts)) == len(result.alerts)

    def test_day_alerts_precede_week_alerts(self, analyzer, rainy_week, day_factory):
        rainy_week[5] = day_factory(5, wind_speed=20.0)

        result = analyzer.analyze(rainy_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_HIGH_WIND, ALERT_LEACHING)

    def test_humid_but_cool_day(self, analyzer, calm_week, day_factory):
        calm_week[0] = day_factory(0, humidity=92.0, temp_max=24.0)

        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert ALERT_FUNGAL not in result.alerts
        # Blight scouting only needs the humidity
        assert result.recommendations.pest == PEST_HUMID

    def test_missing_optional_readings_count_as_zero(self, analyzer, day_factory):
        day = day_factory(0).model_copy(update={"rain": None, "wind_speed": None, "humidity": None})

        result = analyzer.analyze([day], BASELINE_SOIL)

        assert result.alerts == (ALERT_NO_RISK,)


# ============================================================
# Soil Adjustment Tests
# ============================================================

class TestSoilAdjustment:
    """Tests for soil drift and status recompute."""

    def test_baseline_is_not_modified(self, analyzer, rainy_week):
        before = BASELINE_SOIL.model_dump()

        analyzer.analyze(rainy_week, BASELINE_SOIL)

        assert BASELINE_SOIL.model_dump() == before

    def test_rain_floors_values_at_zero(self, analyzer, rainy_week):
        baseline = BASELINE_SOIL.replace_metric(PH_LEVEL, value="0.05")

        soil = analyzer.analyze(rainy_week, baseline).adjusted_soil

        assert value_of(soil, PH_LEVEL) == "0.0"

    def test_status_recomputed_from_thresholds(self, analyzer, calm_week):
        baseline = (
            BASELINE_SOIL
            .replace_metric(NITROGEN, value="400 kg/ha", status=SoilStatus.LOW)
            .replace_metric(PH_LEVEL, value="6.5", status=SoilStatus.LOW)
        )

        soil = analyzer.analyze(calm_week, baseline).adjusted_soil

        assert status_of(soil, NITROGEN) == SoilStatus.HIGH
        assert status_of(soil, PH_LEVEL) == SoilStatus.OPTIMAL

    def test_micro_nutrient_status_is_kept(self, analyzer, rainy_week):
        baseline = BASELINE_SOIL.replace_metric(ZINC, status=SoilStatus.HIGH)

        soil = analyzer.analyze(rainy_week, baseline).adjusted_soil

        assert status_of(soil, ZINC) == SoilStatus.HIGH

    def test_unparseable_value_falls_back_to_zero(self, analyzer, rainy_week, caplog):
        baseline = BASELINE_SOIL.replace_metric(NITROGEN, value="not measured")

        with caplog.at_level("WARNING"):
            soil = analyzer.analyze(rainy_week, baseline).adjusted_soil

        assert value_of(soil, NITROGEN) == "0"
        assert status_of(soil, NITROGEN) == SoilStatus.LOW
        assert "not measured" in caplog.text

    def test_record_without_metric_is_tolerated(self, analyzer, rainy_week):
        baseline = SoilHealthRecord(
            general=(SoilMetric(name=PH_LEVEL, value="7.0", status=SoilStatus.OPTIMAL),),
            macro_nutrients=(),
            micro_nutrients=(),
        )

        soil = analyzer.analyze(rainy_week, baseline).adjusted_soil

        assert value_of(soil, PH_LEVEL) == "6.9"
        assert soil.macro_nutrients == ()

    def test_metric_with_longer_name_is_adjusted(self, analyzer, rainy_week, calm_week):
        baseline = SoilHealthRecord(
            general=(SoilMetric(name="Soil pH Level", value="7.0", status=SoilStatus.OPTIMAL),),
            macro_nutrients=(
                SoilMetric(name="Available Nitrogen (N)", value="210 kg/ha", status=SoilStatus.HIGH),
            ),
            micro_nutrients=(),
        )

        rained = analyzer.analyze(rainy_week, baseline).adjusted_soil
        calm = analyzer.analyze(calm_week, baseline).adjusted_soil

        assert rained.macro_nutrients[0].name == "Available Nitrogen (N)"
        assert rained.macro_nutrients[0].value == "189 kg/ha"
        assert rained.general[0].value == "6.9"
        assert calm.macro_nutrients[0].status == SoilStatus.LOW


# ============================================================
# Configuration and Purity Tests
# ============================================================

class TestAnalyzerBehaviour:
    """Tests for configuration and purity."""

    def test_custom_thresholds(self, calm_week):
        analyzer = WeatherAnalyzer(WeatherRuleConfig(high_wind_speed=1.0))

        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_HIGH_WIND,)

    def test_identical_inputs_identical_outputs(self, analyzer, rainy_week):
        first = analyzer.analyze(rainy_week, BASELINE_SOIL)
        second = analyzer.analyze(rainy_week, BASELINE_SOIL)

        assert first == second
        assert first.model_dump_json() == second.model_dump_json()

    def test_no_state_between_calls(self, analyzer, rainy_week, calm_week):
        analyzer.analyze(rainy_week, BASELINE_SOIL)

        result = analyzer.analyze(calm_week, BASELINE_SOIL)

        assert result.alerts == (ALERT_NO_RISK,)
        assert result.adjusted_soil == BASELINE_SOIL

    def test_empty_forecast(self, analyzer):
        result = analyzer.analyze([], BASELINE_SOIL)

        assert result.alerts == (ALERT_NO_RISK,)
        assert result.recommendations.fertilizer == FERTILIZER_DEFAULT


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
