"""
Domain service: chart series for the soil-health panels.
"""
from app.domain.models import ChartPoint, SoilChartSeries, SoilHealthRecord
from app.utils.numbers import parse_leading_number


# (chart label, name marker used to locate the metric)
MACRO_SERIES = (
    ("Nitrogen (N)", "(N)"),
    ("Phosphorus (P)", "(P)"),
    ("Potassium (K)", "(K)"),
)
GENERAL_SERIES = (
    ("pH Level", "pH"),
    ("Organic Carbon (%)", "Organic Carbon"),
)
MICRO_SERIES = (
    ("Zinc (Zn)", "(Zn)"),
    ("Iron (Fe)", "(Fe)"),
)


def build_soil_chart_series(soil: SoilHealthRecord) -> SoilChartSeries:
    """
    Build numeric chart series from a soil record.

    A metric missing from the record plots as 0.
    """
    return SoilChartSeries(
        macro=_series(soil, MACRO_SERIES),
        general=_series(soil, GENERAL_SERIES),
        micro=_series(soil, MICRO_SERIES),
    )


def _series(soil: SoilHealthRecord, spec: tuple[tuple[str, str], ...]) -> tuple[ChartPoint, ...]:
    points = []
    for label, marker in spec:
        metric = soil.find(marker)
        value = parse_leading_number(metric.value) if metric is not None else 0.0
        points.append(ChartPoint(name=label, value=value))
    return tuple(points)
