"""
Reference soil data: the baseline soil-health record and status thresholds.
"""
from dataclasses import dataclass

from app.domain.models import SoilHealthRecord, SoilMetric, SoilStatus


PH_LEVEL = "pH Level"
ORGANIC_CARBON = "Organic Carbon (OC)"
NITROGEN = "Nitrogen (N)"
PHOSPHORUS = "Phosphorus (P)"
POTASSIUM = "Potassium (K)"
ZINC = "Zinc (Zn)"
IRON = "Iron (Fe)"


BASELINE_SOIL = SoilHealthRecord(
    general=(
        SoilMetric(name=PH_LEVEL, value="5.8", status=SoilStatus.LOW),
        SoilMetric(name=ORGANIC_CARBON, value="0.45%", status=SoilStatus.LOW),
    ),
    macro_nutrients=(
        SoilMetric(name=NITROGEN, value="210 kg/ha", status=SoilStatus.LOW),
        SoilMetric(name=PHOSPHORUS, value="15 kg/ha", status=SoilStatus.OPTIMAL),
        SoilMetric(name=POTASSIUM, value="120 kg/ha", status=SoilStatus.LOW),
    ),
    micro_nutrients=(
        SoilMetric(name=ZINC, value="0.5 ppm", status=SoilStatus.LOW),
        SoilMetric(name=IRON, value="4.8 ppm", status=SoilStatus.OPTIMAL),
    ),
)


@dataclass(frozen=True)
class StatusThreshold:
    """Bounds for the Optimal band of a metric (both inclusive)."""
    low: float
    high: float

    def classify(self, value: float) -> SoilStatus:
        if value < self.low:
            return SoilStatus.LOW
        if value > self.high:
            return SoilStatus.HIGH
        return SoilStatus.OPTIMAL


# Micro-nutrients have no entry, so they keep their baseline status.
STATUS_THRESHOLDS: dict[str, StatusThreshold] = {
    NITROGEN: StatusThreshold(low=250, high=350),
    PHOSPHORUS: StatusThreshold(low=12, high=30),
    POTASSIUM: StatusThreshold(low=150, high=300),
    PH_LEVEL: StatusThreshold(low=6.0, high=7.5),
    ORGANIC_CARBON: StatusThreshold(low=0.75, high=1.5),
}


# Decimal places used when a weather-adjusted value is written back
DISPLAY_PRECISION: dict[str, int] = {
    NITROGEN: 0,
    POTASSIUM: 0,
    PH_LEVEL: 1,
    ORGANIC_CARBON: 2,
}
